from typing import List, Optional

from fastapi import APIRouter, Depends, Header, Query, Response, status

from .. import schemas
from ..crud import crud_notification
from ..services.streams import change_token, unread_response
from ..utils.errors import error_response
from .dependencies import CurrentUser, get_current_user

router = APIRouter(tags=["notifications"])


async def _own_notification(notification_id: str, current_user: CurrentUser) -> dict:
    notif = await crud_notification.get_notification(current_user.remote, notification_id)
    if not notif or notif.get("user_id") != current_user.id:
        raise error_response(
            "Notification not found",
            {"notification_id": "not_found"},
            status.HTTP_404_NOT_FOUND,
        )
    return notif


@router.get(
    "/",
    response_model=List[schemas.NotificationResponse],
    responses={304: {"description": "Not Modified"}},
)
async def read_my_notifications(
    response: Response,
    skip: int = Query(0, ge=0),
    limit: int = Query(20, ge=1, le=100),
    unread_only: bool = False,
    if_none_match: Optional[str] = Header(default=None, convert_underscores=False, alias="If-None-Match"),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Retrieve notifications with lightweight ETag support to reduce churn."""
    notifs = await crud_notification.get_notifications_for_user(
        current_user.remote, current_user.id, skip=skip, limit=limit, unread_only=unread_only
    )
    latest = max((str(n.get("created_at") or "0") for n in notifs), default="0")
    read_state = "".join("1" if n.get("is_read") else "0" for n in notifs)
    etag = change_token("notif", current_user.id, latest, len(notifs), read_state, skip, limit, unread_only)
    if if_none_match and if_none_match.strip() == etag:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers={"ETag": etag})
    response.headers["ETag"] = etag
    response.headers["Cache-Control"] = "private, max-age=15, stale-while-revalidate=60"
    return notifs


@router.get("/unread", response_model=None, responses={304: {"description": "Not Modified"}})
async def read_notifications_unread(
    if_none_match: Optional[str] = Header(default=None, convert_underscores=False, alias="If-None-Match"),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Badge count of unread notifications."""
    count = await crud_notification.count_unread(current_user.remote, current_user.id)
    return unread_response(f"notifications:{current_user.id}", count, if_none_match)


@router.put("/read-all")
async def mark_all_notifications_read(current_user: CurrentUser = Depends(get_current_user)):
    """Mark all notifications as read for the current user."""
    updated = await crud_notification.mark_all_read(current_user.remote, current_user.id)
    return {"updated": updated}


@router.put("/{notification_id}/read", response_model=schemas.NotificationResponse)
async def mark_notification_read(
    notification_id: str,
    current_user: CurrentUser = Depends(get_current_user),
):
    """Mark a notification as read."""
    notif = await _own_notification(notification_id, current_user)
    if notif.get("is_read"):
        return notif
    return await crud_notification.mark_as_read(current_user.remote, notification_id) or {**notif, "is_read": True}


@router.delete("/{notification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_notification(
    notification_id: str,
    current_user: CurrentUser = Depends(get_current_user),
):
    await _own_notification(notification_id, current_user)
    await crud_notification.delete_notification(current_user.remote, notification_id)
