import logging
from datetime import date
from typing import Any, Dict, List, Optional

import httpx
from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from .. import schemas
from ..core.config import Settings
from ..crud import crud_event
from ..models import EventStatus
from ..remote import RemoteClient, RemoteError
from ..services import publishing
from ..services.media_service import EVENT_COVER_PREFIX, remove_by_url, store_upload
from ..utils.errors import error_response, remote_error_response, require_confirmation
from .dependencies import (
    CurrentUser,
    forbidden,
    get_anon_remote,
    get_current_user,
    get_http_client,
    get_optional_user,
    get_settings,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["events"])


def _not_found() -> Exception:
    return error_response("Event not found", {"event_id": "not_found"}, status.HTTP_404_NOT_FOUND)


async def _own_event(event_id: str, current_user: CurrentUser) -> Dict[str, Any]:
    event = await crud_event.get_event(current_user.remote, event_id)
    if not event:
        raise _not_found()
    if event.get("creator_id") != current_user.id:
        raise forbidden("You can only manage your own events.", current_user)
    return event


@router.get("/", response_model=List[schemas.EventResponse])
async def list_events(
    from_date: Optional[date] = Query(None),
    limit: Optional[int] = Query(None, ge=1, le=200),
    remote: RemoteClient = Depends(get_anon_remote),
):
    """Published events in ascending date order."""
    return await crud_event.list_published_events(remote, from_date=from_date, limit=limit)


@router.get("/me", response_model=List[schemas.EventResponse])
async def list_my_events(current_user: CurrentUser = Depends(get_current_user)):
    return await crud_event.list_events_by_creator(current_user.remote, current_user.id)


@router.post("/", response_model=schemas.EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(payload: schemas.EventCreate, current_user: CurrentUser = Depends(get_current_user)):
    """New events always start as drafts."""
    if current_user.role is None:
        raise forbidden("Choose a role before creating events.", current_user)
    return await crud_event.create_event(current_user.remote, current_user.id, payload.model_dump(exclude_unset=True))


@router.get("/{event_id}", response_model=schemas.EventResponse)
async def read_event(
    event_id: str,
    current_user: Optional[CurrentUser] = Depends(get_optional_user),
    remote: RemoteClient = Depends(get_anon_remote),
):
    client = current_user.remote if current_user else remote
    event = await crud_event.get_event(client, event_id)
    if not event:
        raise _not_found()
    is_owner = current_user is not None and event.get("creator_id") == current_user.id
    if event.get("status") != EventStatus.PUBLISHED.value and not is_owner:
        raise _not_found()
    return event


@router.patch("/{event_id}", response_model=schemas.EventResponse)
async def update_event(
    event_id: str,
    payload: schemas.EventUpdate,
    current_user: CurrentUser = Depends(get_current_user),
):
    await _own_event(event_id, current_user)
    return await crud_event.update_event(current_user.remote, event_id, payload.model_dump(exclude_unset=True))


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_event(
    event_id: str,
    confirm: bool = Query(False),
    current_user: CurrentUser = Depends(get_current_user),
):
    require_confirmation(confirm, "delete this event")
    event = await _own_event(event_id, current_user)
    await crud_event.delete_event(current_user.remote, event_id)
    await remove_by_url(current_user.remote, event.get("cover_image"))


@router.post("/{event_id}/cover", response_model=schemas.EventResponse)
async def upload_event_cover(
    event_id: str,
    file: UploadFile = File(...),
    current_user: CurrentUser = Depends(get_current_user),
    cfg: Settings = Depends(get_settings),
):
    event = await _own_event(event_id, current_user)
    stored = await store_upload(
        current_user.remote, cfg, file, prefix=EVENT_COVER_PREFIX, owner_id=current_user.id, images_only=True
    )
    updated = await crud_event.update_event(current_user.remote, event_id, {"cover_image": stored.public_url})
    if event.get("cover_image"):
        await remove_by_url(current_user.remote, event["cover_image"])
    return updated


@router.post("/{event_id}/publish", response_model=schemas.PublishResult)
async def publish_event(
    event_id: str,
    current_user: CurrentUser = Depends(get_current_user),
    http: httpx.AsyncClient = Depends(get_http_client),
    cfg: Settings = Depends(get_settings),
):
    """Publish for free when eligible, otherwise start a paid checkout."""
    event = await _own_event(event_id, current_user)
    if event.get("status") == EventStatus.PUBLISHED.value:
        raise error_response("Event is already published", {"status": "published"}, status.HTTP_409_CONFLICT)
    eligibility = await publishing.check_eligibility(
        current_user.remote, creator_id=current_user.id, creator_role=current_user.role, settings=cfg
    )
    if eligibility.allowed:
        updated = await crud_event.update_event(current_user.remote, event_id, {"status": EventStatus.PUBLISHED})
        logger.info("Event %s published free by %s", event_id, current_user.id)
        return schemas.PublishResult(published=True, event=updated)
    try:
        session = await publishing.create_checkout_session(
            http, cfg, access_token=current_user.token, event_id=event_id
        )
    except RemoteError as exc:
        raise remote_error_response(exc, status.HTTP_502_BAD_GATEWAY)
    return schemas.PublishResult(
        published=False,
        requires_payment=True,
        checkout_url=session["checkout_url"],
        session_id=session.get("session_id"),
        event=event,
    )


async def _published_event(event_id: str, current_user: CurrentUser) -> Dict[str, Any]:
    event = await crud_event.get_event(current_user.remote, event_id)
    if not event or event.get("status") != EventStatus.PUBLISHED.value:
        raise _not_found()
    return event


@router.post("/{event_id}/attendance", response_model=schemas.AttendanceResponse)
async def attend_event(event_id: str, current_user: CurrentUser = Depends(get_current_user)):
    await _published_event(event_id, current_user)
    await crud_event.set_attendance(current_user.remote, current_user.id, event_id)
    return {"event_id": event_id, "going": True}


@router.delete("/{event_id}/attendance", response_model=schemas.AttendanceResponse)
async def leave_event(event_id: str, current_user: CurrentUser = Depends(get_current_user)):
    await _published_event(event_id, current_user)
    await crud_event.clear_attendance(current_user.remote, current_user.id, event_id)
    return {"event_id": event_id, "going": False}
