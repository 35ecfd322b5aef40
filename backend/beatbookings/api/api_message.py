import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from .. import schemas
from ..crud import crud_booking, crud_message
from ..utils.errors import error_response
from .dependencies import CurrentUser, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["messages"])


async def _check_booking(booking_id: str, current_user: CurrentUser) -> dict:
    booking = await crud_booking.get_booking(current_user.remote, booking_id)
    if not booking or current_user.id not in (booking.get("planner_id"), booking.get("artist_user_id")):
        raise error_response("Booking not found", {"booking_id": "not_found"}, status.HTTP_404_NOT_FOUND)
    return booking


async def _load_thread(
    current_user: CurrentUser,
    booking_id: Optional[str],
    with_user: Optional[str],
) -> List[dict]:
    if booking_id:
        await _check_booking(booking_id, current_user)
        return await crud_message.get_messages_for_booking(current_user.remote, booking_id)
    if with_user:
        return await crud_message.get_conversation(current_user.remote, current_user.id, with_user)
    raise error_response("Specify a booking or a user", {"booking_id": "required", "with_user": "required"})


@router.get("/", response_model=List[schemas.MessageResponse])
async def read_messages(
    booking_id: Optional[str] = Query(None),
    with_user: Optional[str] = Query(None),
    current_user: CurrentUser = Depends(get_current_user),
):
    """Messages for one booking, or the direct thread with another user."""
    return await _load_thread(current_user, booking_id, with_user)


@router.post("/", response_model=List[schemas.MessageResponse], status_code=status.HTTP_201_CREATED)
async def send_message(
    payload: schemas.MessageCreate,
    current_user: CurrentUser = Depends(get_current_user),
):
    """Send a message and return the refreshed thread."""
    if payload.recipient_id == current_user.id:
        raise error_response("You cannot message yourself", {"recipient_id": "invalid"})
    if payload.booking_id:
        booking = await _check_booking(payload.booking_id, current_user)
        if payload.recipient_id not in (booking.get("planner_id"), booking.get("artist_user_id")):
            raise error_response("Recipient is not part of this booking", {"recipient_id": "invalid"})
    await crud_message.create_message(
        current_user.remote,
        sender_id=current_user.id,
        recipient_id=payload.recipient_id,
        content=payload.content,
        booking_id=payload.booking_id,
    )
    return await _load_thread(
        current_user, payload.booking_id, None if payload.booking_id else payload.recipient_id
    )
