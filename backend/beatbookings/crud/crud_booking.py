from datetime import date
from typing import Any, Dict, List, Optional

from ..models import BookingStatus
from ..remote import RemoteClient
from . import crud_artist, crud_profile


async def _attach_artist_parties(remote: RemoteClient, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Bookings reference artist profiles; show the artist's stage name."""
    artists = await crud_artist.get_artist_profiles_by_ids(remote, (row.get("artist_id") for row in rows))
    for row in rows:
        artist = artists.get(row.get("artist_id"))
        if artist:
            row["artist"] = {
                "id": artist.get("user_id") or artist["id"],
                "name": artist.get("stage_name"),
                "image_url": artist.get("image_url"),
            }
            row["artist_user_id"] = artist.get("user_id")
    return rows


async def _decorate(remote: RemoteClient, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    await crud_profile.attach_parties(remote, rows, id_key="planner_id", as_key="planner")
    return await _attach_artist_parties(remote, rows)


async def get_booking(remote: RemoteClient, booking_id: str) -> Optional[Dict[str, Any]]:
    result = await remote.table("bookings").select("*").eq("id", booking_id).maybe_single().execute()
    row = result.raise_for_error()
    if row:
        await _decorate(remote, [row])
    return row


async def get_booking_for_request(remote: RemoteClient, request_id: str) -> Optional[Dict[str, Any]]:
    result = (
        await remote.table("bookings")
        .select("*")
        .eq("booking_request_id", request_id)
        .order("created_at", desc=True)
        .limit(1)
        .maybe_single()
        .execute()
    )
    row = result.raise_for_error()
    if row:
        await _decorate(remote, [row])
    return row


async def list_bookings(
    remote: RemoteClient,
    *,
    artist_id: Optional[str] = None,
    planner_id: Optional[str] = None,
    status: Optional[BookingStatus] = None,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> List[Dict[str, Any]]:
    query = remote.table("bookings").select("*")
    if artist_id:
        query = query.eq("artist_id", artist_id)
    if planner_id:
        query = query.eq("planner_id", planner_id)
    if status is not None:
        query = query.eq("status", status)
    if start is not None:
        query = query.gte("event_date", start)
    if end is not None:
        query = query.lte("event_date", end)
    result = await query.order("event_date").execute()
    return await _decorate(remote, result.raise_for_error() or [])


async def cancel_confirmed_booking(remote: RemoteClient, booking_id: str) -> Any:
    result = await remote.rpc("cancel_confirmed_booking", {"p_booking_id": booking_id})
    return result.raise_for_error()
