"""Admin console: platform stats, listings, subscription moderation,
announcements and support conversations."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from fastapi import APIRouter, Depends, Header, Query, Request, status
from fastapi.responses import JSONResponse

from .. import schemas
from ..core.config import Settings
from ..crud import crud_admin, crud_admin_message, crud_event, crud_profile
from ..models import AdminSender
from ..remote import RemoteError
from ..services.streams import sse_response, unread_events, unread_response
from ..utils.errors import error_response, remote_error_response, require_confirmation
from .dependencies import CurrentUser, get_current_admin, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

USER_SEARCH_FIELDS = ("name", "email", "role")
EVENT_SEARCH_FIELDS = ("title", "type", "city", "state", "venue", "creator_name")
SUBSCRIPTION_SEARCH_FIELDS = ("stage_name", "email", "subscription_tier", "entitlement_tier", "status")


def _search(rows: List[Dict[str, Any]], q: Optional[str], fields: Iterable[str]) -> List[Dict[str, Any]]:
    """Case-insensitive substring match over the given text columns."""
    needle = (q or "").strip().lower()
    if not needle:
        return rows
    fields = tuple(fields)
    return [
        row for row in rows
        if any(needle in str(row.get(f) or "").lower() for f in fields)
    ]


def _with_total(items: List[Dict[str, Any]]) -> JSONResponse:
    resp = JSONResponse(items)
    resp.headers["Access-Control-Expose-Headers"] = "X-Total-Count"
    resp.headers["X-Total-Count"] = str(len(items))
    return resp


# ────────────────────────────────────────────────────────────────────────────────
# Stats and listings

@router.get("/stats", response_model=schemas.PlatformStats)
async def read_stats(current_user: CurrentUser = Depends(get_current_admin)):
    return await crud_admin.get_platform_stats(current_user.remote)


@router.get("/users", response_model=List[schemas.AdminUserRow])
async def list_users(q: Optional[str] = Query(None), current_user: CurrentUser = Depends(get_current_admin)):
    rows = await crud_admin.get_all_users(current_user.remote)
    items = [schemas.AdminUserRow.model_validate(r).model_dump(mode="json") for r in _search(rows, q, USER_SEARCH_FIELDS)]
    return _with_total(items)


@router.get("/events", response_model=List[schemas.AdminEventRow])
async def list_events(q: Optional[str] = Query(None), current_user: CurrentUser = Depends(get_current_admin)):
    rows = await crud_admin.get_all_events(current_user.remote)
    items = [schemas.AdminEventRow.model_validate(r).model_dump(mode="json") for r in _search(rows, q, EVENT_SEARCH_FIELDS)]
    return _with_total(items)


@router.get("/subscriptions", response_model=List[schemas.AdminSubscriptionRow])
async def list_subscriptions(q: Optional[str] = Query(None), current_user: CurrentUser = Depends(get_current_admin)):
    rows = await crud_admin.get_all_subscriptions(current_user.remote)
    items = [
        schemas.AdminSubscriptionRow.model_validate(r).model_dump(mode="json")
        for r in _search(rows, q, SUBSCRIPTION_SEARCH_FIELDS)
    ]
    return _with_total(items)


# ────────────────────────────────────────────────────────────────────────────────
# Subscription moderation (no undo)

@router.post("/subscriptions/{subscription_id}/deactivate", response_model=dict)
async def deactivate_subscription(
    subscription_id: str,
    payload: schemas.ConfirmAction,
    current_user: CurrentUser = Depends(get_current_admin),
):
    require_confirmation(payload.confirm, "deactivate this subscription")
    try:
        await crud_admin.deactivate_subscription(current_user.remote, subscription_id)
    except RemoteError as exc:
        raise remote_error_response(exc)
    logger.info("Admin %s deactivated subscription %s", current_user.id, subscription_id)
    return {"id": subscription_id, "status": "inactive"}


@router.delete("/subscriptions/{subscription_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_subscription(
    subscription_id: str,
    confirm: bool = Query(False),
    current_user: CurrentUser = Depends(get_current_admin),
):
    require_confirmation(confirm, "delete this subscription")
    try:
        await crud_admin.delete_subscription(current_user.remote, subscription_id)
    except RemoteError as exc:
        raise remote_error_response(exc)
    logger.info("Admin %s deleted subscription %s", current_user.id, subscription_id)


# ────────────────────────────────────────────────────────────────────────────────
# Announcements

@router.get("/announcements", response_model=List[schemas.AnnouncementResponse])
async def list_announcements(current_user: CurrentUser = Depends(get_current_admin)):
    return await crud_event.list_announcements(current_user.remote, active_only=False)


@router.post("/announcements", response_model=schemas.AnnouncementResponse, status_code=status.HTTP_201_CREATED)
async def create_announcement(
    payload: schemas.AnnouncementCreate,
    current_user: CurrentUser = Depends(get_current_admin),
):
    return await crud_event.create_announcement(current_user.remote, payload.model_dump())


@router.delete("/announcements/{announcement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_announcement(
    announcement_id: str,
    confirm: bool = Query(False),
    current_user: CurrentUser = Depends(get_current_admin),
):
    require_confirmation(confirm, "delete this announcement")
    deleted = await crud_event.delete_announcement(current_user.remote, announcement_id)
    if not deleted:
        raise error_response("Announcement not found", {"announcement_id": "not_found"}, status.HTTP_404_NOT_FOUND)


# ────────────────────────────────────────────────────────────────────────────────
# Support conversations

@router.get("/conversations", response_model=List[schemas.ConversationSummary])
async def list_conversations(current_user: CurrentUser = Depends(get_current_admin)):
    return await crud_admin_message.get_admin_conversations(current_user.remote)


async def _thread_user(user_id: str, current_user: CurrentUser) -> None:
    if not await crud_profile.get_profile(current_user.remote, user_id):
        raise error_response("User not found", {"user_id": "not_found"}, status.HTTP_404_NOT_FOUND)


@router.get("/conversations/{user_id}/messages", response_model=List[schemas.SupportMessageResponse])
async def read_conversation(user_id: str, current_user: CurrentUser = Depends(get_current_admin)):
    return await crud_admin_message.list_thread(current_user.remote, user_id)


@router.post(
    "/conversations/{user_id}/messages",
    response_model=schemas.SupportMessageResponse,
    status_code=status.HTTP_201_CREATED,
)
async def reply_to_conversation(
    user_id: str,
    payload: schemas.SupportMessageCreate,
    current_user: CurrentUser = Depends(get_current_admin),
):
    await _thread_user(user_id, current_user)
    return await crud_admin_message.create_support_message(
        current_user.remote, user_id, AdminSender.ADMIN, payload.message
    )


@router.post("/conversations/{user_id}/read", response_model=dict)
async def mark_conversation_read(user_id: str, current_user: CurrentUser = Depends(get_current_admin)):
    marked = await crud_admin_message.mark_read(current_user.remote, user_id, AdminSender.USER)
    return {"marked": marked}


@router.get("/messages/unread", response_model=None, responses={304: {"description": "Not Modified"}})
async def read_admin_unread(
    if_none_match: Optional[str] = Header(default=None, convert_underscores=False, alias="If-None-Match"),
    current_user: CurrentUser = Depends(get_current_admin),
):
    count = await crud_admin_message.count_unread_for_admin(current_user.remote)
    return unread_response("admin", count, if_none_match)


@router.get("/messages/stream")
async def admin_unread_stream(
    request: Request,
    heartbeat: Optional[float] = Query(None, ge=5.0, le=120.0),
    current_user: CurrentUser = Depends(get_current_admin),
    cfg: Settings = Depends(get_settings),
):
    async def poll() -> int:
        return await crud_admin_message.count_unread_for_admin(current_user.remote)

    events = unread_events(
        poll,
        interval=cfg.POLL_INTERVAL_SECONDS,
        heartbeat=heartbeat or cfg.STREAM_HEARTBEAT_SECONDS,
        request=request,
    )
    return sse_response(events)
