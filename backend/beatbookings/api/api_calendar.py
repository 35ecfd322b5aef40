import asyncio
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status

from .. import schemas
from ..crud import crud_availability, crud_booking, crud_event
from ..models import BookingStatus, EventStatus
from ..services.calendar_service import group_by_date, parse_month
from ..utils.errors import error_response
from .dependencies import CurrentUser, get_current_artist, get_current_planner

router = APIRouter(tags=["calendar"])


@router.get("/artist", response_model=schemas.CalendarMonth)
async def artist_calendar(
    month: Optional[str] = Query(None, description="YYYY-MM"),
    current_user: CurrentUser = Depends(get_current_artist),
):
    """Confirmed bookings and manual entries for one month, by day."""
    start, end, label = parse_month(month)
    artist_id = current_user.artist_profile["id"]
    bookings, availability = await asyncio.gather(
        crud_booking.list_bookings(
            current_user.remote, artist_id=artist_id, status=BookingStatus.ACCEPTED, start=start, end=end
        ),
        crud_availability.list_availability(current_user.remote, artist_id, start=start, end=end),
    )
    return group_by_date(label, bookings=bookings, availability=availability)


@router.get("/planner", response_model=schemas.CalendarMonth)
async def planner_calendar(
    month: Optional[str] = Query(None, description="YYYY-MM"),
    current_user: CurrentUser = Depends(get_current_planner),
):
    start, end, label = parse_month(month)
    remote = current_user.remote
    bookings, events, attending = await asyncio.gather(
        crud_booking.list_bookings(
            remote, planner_id=current_user.id, status=BookingStatus.ACCEPTED, start=start, end=end
        ),
        crud_event.list_events_by_creator(
            remote, current_user.id, status=EventStatus.PUBLISHED, from_date=start, to_date=end
        ),
        crud_event.list_attending_events(remote, current_user.id, from_date=start, to_date=end),
    )
    return group_by_date(label, bookings=bookings, events=events, attending=attending)


# --- Manual availability entries ---

async def _own_entry(entry_id: str, current_user: CurrentUser) -> dict:
    entry = await crud_availability.get_entry(current_user.remote, entry_id)
    if not entry or entry.get("artist_id") != current_user.artist_profile["id"]:
        raise error_response("Calendar entry not found", {"entry_id": "not_found"}, status.HTTP_404_NOT_FOUND)
    return entry


@router.get("/availability", response_model=List[schemas.AvailabilityResponse])
async def list_availability(
    month: Optional[str] = Query(None, description="YYYY-MM"),
    current_user: CurrentUser = Depends(get_current_artist),
):
    start = end = None
    if month:
        start, end, _ = parse_month(month)
    return await crud_availability.list_availability(
        current_user.remote, current_user.artist_profile["id"], start=start, end=end
    )


@router.post("/availability", response_model=schemas.AvailabilityResponse, status_code=status.HTTP_201_CREATED)
async def create_availability(
    payload: schemas.AvailabilityCreate,
    current_user: CurrentUser = Depends(get_current_artist),
):
    return await crud_availability.create_entry(
        current_user.remote, current_user.artist_profile["id"], payload.model_dump()
    )


@router.patch("/availability/{entry_id}", response_model=schemas.AvailabilityResponse)
async def update_availability(
    entry_id: str,
    payload: schemas.AvailabilityUpdate,
    current_user: CurrentUser = Depends(get_current_artist),
):
    await _own_entry(entry_id, current_user)
    return await crud_availability.update_entry(current_user.remote, entry_id, payload.model_dump(exclude_unset=True))


@router.delete("/availability/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_availability(
    entry_id: str,
    current_user: CurrentUser = Depends(get_current_artist),
):
    await _own_entry(entry_id, current_user)
    await crud_availability.delete_entry(current_user.remote, entry_id)
