from pydantic import BaseModel, Field
from typing import Optional, List
import datetime as dt
from datetime import date, datetime, time

from .booking import BookingResponse
from .event import EventResponse


class AvailabilityBase(BaseModel):
    title: str = Field(..., min_length=1)
    event_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    notes: Optional[str] = None


class AvailabilityCreate(AvailabilityBase):
    pass


class AvailabilityUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1)
    event_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    notes: Optional[str] = None


class AvailabilityResponse(AvailabilityBase):
    id: str
    artist_id: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "ignore"}


class CalendarDay(BaseModel):
    date: dt.date
    bookings: List[BookingResponse] = []
    availability: List[AvailabilityResponse] = []
    events: List[EventResponse] = []
    attending: List[EventResponse] = []


class CalendarMonth(BaseModel):
    month: str
    days: List[CalendarDay] = []
