import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, status

from .. import schemas
from ..crud import crud_artist, crud_booking, crud_booking_request, crud_subscription
from ..models import (
    BookingRequestStatus,
    InvalidTransitionError,
    RequestAction,
    UserRole,
    available_request_actions,
    ensure_request_action,
)
from ..models.subscription import is_active
from ..remote import RemoteError
from ..utils.errors import error_response, remote_error_response
from .api_booking import present_booking
from .dependencies import CurrentUser, get_current_artist, get_current_planner, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(tags=["booking-requests"])

NOT_ACCEPTING = "This artist is not currently accepting bookings"


def _present(row: Dict[str, Any], viewer: CurrentUser) -> schemas.BookingRequestResponse:
    if viewer.role == UserRole.ARTIST:
        is_owner = row.get("artist_user_id") == viewer.id
    else:
        is_owner = row.get("planner_id") == viewer.id
    data = dict(row)
    data["available_actions"] = available_request_actions(row.get("status"), viewer.role, is_owner)
    return schemas.BookingRequestResponse.model_validate(data)


def _guard(row: Dict[str, Any], action: str, viewer: CurrentUser) -> None:
    try:
        ensure_request_action(row, action, viewer.id, viewer.role)
    except InvalidTransitionError as exc:
        raise error_response(exc.message, {"status": str(exc.current_status)}, status.HTTP_409_CONFLICT)


async def _load_for_party(request_id: str, viewer: CurrentUser) -> Dict[str, Any]:
    row = await crud_booking_request.get_booking_request(viewer.remote, request_id)
    if not row or viewer.id not in (row.get("planner_id"), row.get("artist_user_id")):
        raise error_response("Booking request not found", {"request_id": "not_found"}, status.HTTP_404_NOT_FOUND)
    return row


async def _resolve_created(viewer: CurrentUser, created: Any) -> Optional[Dict[str, Any]]:
    """The create procedure may return the row, a one-row list or just the id."""
    if isinstance(created, list):
        created = created[0] if created else None
    if isinstance(created, dict) and created.get("status"):
        return created
    request_id = created.get("id") if isinstance(created, dict) else created
    if not request_id:
        return None
    return await crud_booking_request.get_booking_request(viewer.remote, str(request_id))


@router.post("/", response_model=schemas.BookingRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_booking_request(
    payload: schemas.BookingRequestCreate,
    current_user: CurrentUser = Depends(get_current_planner),
):
    """Send a booking request to an artist with an active subscription."""
    remote = current_user.remote
    artist = await crud_artist.get_artist_profile(remote, payload.artist_id)
    if not artist:
        raise error_response("Artist not found", {"artist_id": "not_found"}, status.HTTP_404_NOT_FOUND)
    subscription = await crud_subscription.get_subscription_for_artist(remote, artist["id"])
    if not is_active(subscription):
        raise error_response(NOT_ACCEPTING, {"artist_id": "no_active_subscription"}, status.HTTP_409_CONFLICT)
    try:
        created = await crud_booking_request.create_booking_request(remote, payload, artist["user_id"])
    except RemoteError as exc:
        raise remote_error_response(exc)
    row = await _resolve_created(current_user, created)
    if row is None:
        raise error_response("Booking request could not be loaded", {}, status.HTTP_502_BAD_GATEWAY)
    logger.info("Booking request %s sent by %s to artist %s", row.get("id"), current_user.id, artist["id"])
    return _present(row, current_user)


@router.get("/me", response_model=List[schemas.BookingRequestResponse])
async def read_my_booking_requests(current_user: CurrentUser = Depends(get_current_planner)):
    rows = await crud_booking_request.get_booking_requests_by_planner(current_user.remote, current_user.id)
    return [_present(row, current_user) for row in rows]


@router.get("/inbox", response_model=List[schemas.BookingRequestResponse])
async def read_booking_request_inbox(
    status_filter: Optional[BookingRequestStatus] = Query(None, alias="status"),
    current_user: CurrentUser = Depends(get_current_artist),
):
    """Requests addressed to the signed-in artist, newest first."""
    rows = await crud_booking_request.get_booking_requests_by_artist(
        current_user.remote, current_user.id, status_filter
    )
    return [_present(row, current_user) for row in rows]


@router.get("/{request_id}", response_model=schemas.BookingRequestResponse)
async def read_booking_request(request_id: str, current_user: CurrentUser = Depends(get_current_user)):
    row = await _load_for_party(request_id, current_user)
    return _present(row, current_user)


@router.patch("/{request_id}", response_model=schemas.BookingRequestResponse)
async def update_booking_request(
    request_id: str,
    payload: schemas.BookingRequestUpdate,
    current_user: CurrentUser = Depends(get_current_planner),
):
    row = await _load_for_party(request_id, current_user)
    _guard(row, RequestAction.EDIT, current_user)
    values = payload.model_dump(exclude_unset=True)
    if values:
        updated = await crud_booking_request.update_booking_request(current_user.remote, request_id, values)
        if updated is None:
            # Status moved on between the read and the write
            raise error_response("Booking request is no longer pending", {"status": "changed"}, status.HTTP_409_CONFLICT)
    row = await crud_booking_request.get_booking_request(current_user.remote, request_id)
    return _present(row, current_user)


@router.post("/{request_id}/cancel", response_model=schemas.BookingRequestResponse)
async def cancel_booking_request(request_id: str, current_user: CurrentUser = Depends(get_current_planner)):
    row = await _load_for_party(request_id, current_user)
    _guard(row, RequestAction.CANCEL, current_user)
    updated = await crud_booking_request.update_booking_request(
        current_user.remote, request_id, {"status": BookingRequestStatus.CANCELLED}
    )
    if updated is None:
        raise error_response("Booking request is no longer pending", {"status": "changed"}, status.HTTP_409_CONFLICT)
    row = await crud_booking_request.get_booking_request(current_user.remote, request_id)
    return _present(row, current_user)


@router.post("/{request_id}/accept", response_model=schemas.AcceptBookingResponse)
async def accept_booking_request(
    request_id: str,
    payload: schemas.AcceptBookingRequest,
    current_user: CurrentUser = Depends(get_current_artist),
):
    """Accept a pending request; the remote procedure creates the booking."""
    row = await _load_for_party(request_id, current_user)
    _guard(row, RequestAction.ACCEPT, current_user)
    try:
        await crud_booking_request.accept_booking_request(current_user.remote, request_id, payload)
    except RemoteError as exc:
        raise remote_error_response(exc)
    row = await crud_booking_request.get_booking_request(current_user.remote, request_id)
    booking = await crud_booking.get_booking_for_request(current_user.remote, request_id)
    booking_out = present_booking(booking) if booking else None
    return schemas.AcceptBookingResponse(request=_present(row, current_user), booking=booking_out)


@router.post("/{request_id}/decline", response_model=schemas.BookingRequestResponse)
async def decline_booking_request(
    request_id: str,
    payload: Optional[schemas.DeclineBookingRequest] = None,
    current_user: CurrentUser = Depends(get_current_artist),
):
    row = await _load_for_party(request_id, current_user)
    _guard(row, RequestAction.DECLINE, current_user)
    message = payload.response_message if payload else None
    try:
        await crud_booking_request.decline_booking_request(current_user.remote, request_id, message)
    except RemoteError as exc:
        raise remote_error_response(exc)
    row = await crud_booking_request.get_booking_request(current_user.remote, request_id)
    return _present(row, current_user)
