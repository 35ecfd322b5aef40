from pydantic import BaseModel, Field
from typing import Optional
from datetime import date, datetime, time

from ..models import EventStatus


class EventBase(BaseModel):
    title: Optional[str] = None
    type: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    venue: Optional[str] = None
    event_date: Optional[date] = None
    event_end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    cost: Optional[str] = None
    description: Optional[str] = None
    external_link: Optional[str] = None
    ticket_link: Optional[str] = None


class EventCreate(EventBase):
    title: str = Field(..., min_length=1)
    event_date: date


class EventUpdate(EventBase):
    pass


class EventResponse(EventBase):
    id: str
    creator_id: str
    status: EventStatus
    cover_image: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "ignore"}


class PublishResult(BaseModel):
    published: bool
    requires_payment: bool = False
    checkout_url: Optional[str] = None
    session_id: Optional[str] = None
    event: Optional[EventResponse] = None


class AttendanceResponse(BaseModel):
    event_id: str
    going: bool


class AnnouncementCreate(BaseModel):
    title: str = Field(..., min_length=1)
    body: Optional[str] = None
    is_active: bool = True


class AnnouncementResponse(AnnouncementCreate):
    id: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "ignore"}
