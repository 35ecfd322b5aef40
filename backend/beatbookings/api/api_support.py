"""Support thread between a user and the admin team."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query, Request, status

from .. import schemas
from ..core.config import Settings
from ..crud import crud_admin_message
from ..models import AdminSender
from ..services.streams import sse_response, unread_events, unread_response
from .dependencies import CurrentUser, get_current_user, get_settings

router = APIRouter(tags=["support"])


@router.get("/messages", response_model=List[schemas.SupportMessageResponse])
async def read_support_messages(current_user: CurrentUser = Depends(get_current_user)):
    return await crud_admin_message.list_thread(current_user.remote, current_user.id)


@router.post("/messages", response_model=schemas.SupportMessageResponse, status_code=status.HTTP_201_CREATED)
async def send_support_message(
    payload: schemas.SupportMessageCreate,
    current_user: CurrentUser = Depends(get_current_user),
):
    return await crud_admin_message.create_support_message(
        current_user.remote, current_user.id, AdminSender.USER, payload.message
    )


@router.post("/messages/read", response_model=dict)
async def mark_support_messages_read(current_user: CurrentUser = Depends(get_current_user)):
    """Mark the admin's replies as read."""
    marked = await crud_admin_message.mark_read(current_user.remote, current_user.id, AdminSender.ADMIN)
    return {"marked": marked}


@router.get("/unread", response_model=None, responses={304: {"description": "Not Modified"}})
async def read_support_unread(
    if_none_match: Optional[str] = Header(default=None, convert_underscores=False, alias="If-None-Match"),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Unread admin replies with lightweight ETag support."""
    count = await crud_admin_message.count_unread_for_user(current_user.remote, current_user.id)
    return unread_response(f"support:{current_user.id}", count, if_none_match)


@router.get("/stream")
async def support_stream(
    request: Request,
    heartbeat: Optional[float] = Query(None, ge=5.0, le=120.0),
    current_user: CurrentUser = Depends(get_current_user),
    cfg: Settings = Depends(get_settings),
):
    """Push the unread count whenever it changes."""

    async def poll() -> int:
        return await crud_admin_message.count_unread_for_user(current_user.remote, current_user.id)

    events = unread_events(
        poll,
        interval=cfg.POLL_INTERVAL_SECONDS,
        heartbeat=heartbeat or cfg.STREAM_HEARTBEAT_SECONDS,
        request=request,
    )
    return sse_response(events)
