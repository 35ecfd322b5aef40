from typing import Any, Dict, List, Optional

from .. import schemas
from ..models import BookingRequestStatus
from ..remote import RemoteClient
from . import crud_profile

# --- BookingRequest reads and planner-side edits ---


async def get_booking_request(remote: RemoteClient, request_id: str) -> Optional[Dict[str, Any]]:
    result = await remote.table("booking_requests").select("*").eq("id", request_id).maybe_single().execute()
    row = result.raise_for_error()
    if row:
        await crud_profile.attach_parties(remote, [row], id_key="planner_id", as_key="planner")
        await crud_profile.attach_parties(remote, [row], id_key="artist_user_id", as_key="artist")
    return row


async def get_booking_requests_by_planner(remote: RemoteClient, planner_id: str) -> List[Dict[str, Any]]:
    result = (
        await remote.table("booking_requests")
        .select("*")
        .eq("planner_id", planner_id)
        .order("created_at", desc=True)
        .execute()
    )
    rows = result.raise_for_error() or []
    return await crud_profile.attach_parties(remote, rows, id_key="artist_user_id", as_key="artist")


async def get_booking_requests_by_artist(
    remote: RemoteClient,
    artist_user_id: str,
    status: Optional[BookingRequestStatus] = None,
) -> List[Dict[str, Any]]:
    query = remote.table("booking_requests").select("*").eq("artist_user_id", artist_user_id)
    if status is not None:
        query = query.eq("status", status)
    result = await query.order("created_at", desc=True).execute()
    rows = result.raise_for_error() or []
    return await crud_profile.attach_parties(remote, rows, id_key="planner_id", as_key="planner")


async def create_booking_request(
    remote: RemoteClient,
    payload: schemas.BookingRequestCreate,
    artist_user_id: str,
) -> Any:
    """Create a pending request through the remote procedure.

    Returns whatever the procedure returns: the new row or its id.
    """
    result = await remote.rpc(
        "create_booking_request",
        {
            "p_artist_user_id": artist_user_id,
            "p_event_name": payload.event_name,
            "p_event_date": payload.event_date,
            "p_event_location": payload.event_location,
            "p_message": payload.message,
            "p_start_time": payload.start_time,
            "p_end_time": payload.end_time,
        },
    )
    return result.raise_for_error()


async def update_booking_request(remote: RemoteClient, request_id: str, values: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    result = (
        await remote.table("booking_requests")
        .update(values)
        .eq("id", request_id)
        .eq("status", BookingRequestStatus.PENDING)
        .maybe_single()
        .execute()
    )
    return result.raise_for_error()


async def accept_booking_request(remote: RemoteClient, request_id: str, payload: schemas.AcceptBookingRequest) -> Any:
    result = await remote.rpc(
        "accept_booking_request",
        {
            "p_request_id": request_id,
            "p_start_time": payload.start_time,
            "p_end_time": payload.end_time,
            "p_response_message": payload.response_message,
        },
    )
    return result.raise_for_error()


async def decline_booking_request(remote: RemoteClient, request_id: str, response_message: Optional[str]) -> Any:
    result = await remote.rpc(
        "decline_booking_request",
        {"p_request_id": request_id, "p_response_message": response_message},
    )
    return result.raise_for_error()
