import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Response, status

from .. import schemas
from ..crud import crud_artist, crud_booking
from ..models import BookingStatus, UserRole, available_booking_actions
from ..remote import RemoteError
from ..services.calendar_service import booking_ics
from ..utils.errors import error_response, remote_error_response, require_confirmation
from .dependencies import CurrentUser, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings"])


def _is_participant(row: Dict[str, Any], viewer: CurrentUser) -> bool:
    return viewer.id in (row.get("planner_id"), row.get("artist_user_id"))


def present_booking(row: Dict[str, Any]) -> schemas.BookingResponse:
    data = dict(row)
    data["available_actions"] = available_booking_actions(row.get("status"))
    return schemas.BookingResponse.model_validate(data)


async def _load(booking_id: str, viewer: CurrentUser) -> Dict[str, Any]:
    row = await crud_booking.get_booking(viewer.remote, booking_id)
    if not row or not _is_participant(row, viewer):
        raise error_response("Booking not found", {"booking_id": "not_found"}, status.HTTP_404_NOT_FOUND)
    return row


@router.get("/me", response_model=List[schemas.BookingResponse])
async def read_my_bookings(current_user: CurrentUser = Depends(get_current_user)):
    """Bookings where the caller is the artist or the planner."""
    remote = current_user.remote
    if current_user.role == UserRole.ARTIST:
        artist = await crud_artist.get_artist_profile_by_user(remote, current_user.id)
        if not artist:
            return []
        rows = await crud_booking.list_bookings(remote, artist_id=artist["id"])
    else:
        rows = await crud_booking.list_bookings(remote, planner_id=current_user.id)
    return [present_booking(row) for row in rows]


@router.get("/{booking_id}", response_model=schemas.BookingResponse)
async def read_booking(booking_id: str, current_user: CurrentUser = Depends(get_current_user)):
    return present_booking(await _load(booking_id, current_user))


@router.post("/{booking_id}/cancel", response_model=schemas.BookingResponse)
async def cancel_booking(
    booking_id: str,
    payload: schemas.ConfirmAction,
    current_user: CurrentUser = Depends(get_current_user),
):
    """Cancel a confirmed booking. Either party may cancel; there is no undo."""
    require_confirmation(payload.confirm, "cancel this booking")
    row = await _load(booking_id, current_user)
    if row.get("status") != BookingStatus.ACCEPTED.value:
        raise error_response("Booking is already cancelled", {"status": str(row.get("status"))}, status.HTTP_409_CONFLICT)
    try:
        await crud_booking.cancel_confirmed_booking(current_user.remote, booking_id)
    except RemoteError as exc:
        raise remote_error_response(exc)
    logger.info("Booking %s cancelled by %s", booking_id, current_user.id)
    return present_booking(await _load(booking_id, current_user))


@router.get("/{booking_id}/calendar.ics", responses={200: {"content": {"text/calendar": {}}}})
async def download_booking_calendar(booking_id: str, current_user: CurrentUser = Depends(get_current_user)):
    """Return an ICS file for a confirmed booking."""
    row = await _load(booking_id, current_user)
    if row.get("status") != BookingStatus.ACCEPTED.value:
        raise error_response("Booking is not confirmed", {"status": str(row.get("status"))}, status.HTTP_400_BAD_REQUEST)
    headers = {"Content-Disposition": f"attachment; filename=booking-{booking_id}.ics"}
    return Response(booking_ics(row), media_type="text/calendar", headers=headers)
