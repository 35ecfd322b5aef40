from pydantic import BaseModel, Field, model_validator
from typing import Optional, List
from datetime import date, datetime, time

from ..models import BookingRequestStatus, BookingStatus
from .user import PartySummary


class BookingRequestBase(BaseModel):
    event_name: str = Field(..., min_length=1)
    event_date: date
    event_location: str = Field(..., min_length=1)
    message: Optional[str] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None


class BookingRequestCreate(BookingRequestBase):
    artist_id: str = Field(..., description="Artist profile id")


class BookingRequestUpdate(BaseModel):
    """Fields a planner may edit while the request is pending."""

    event_name: Optional[str] = Field(default=None, min_length=1)
    event_date: Optional[date] = None
    event_location: Optional[str] = Field(default=None, min_length=1)
    message: Optional[str] = None


class BookingRequestResponse(BaseModel):
    id: str
    event_name: Optional[str] = None
    event_date: Optional[date] = None
    event_location: Optional[str] = None
    message: Optional[str] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    planner_id: str
    artist_user_id: str
    artist_id: Optional[str] = None
    status: BookingRequestStatus
    response_message: Optional[str] = None
    created_at: Optional[datetime] = None
    planner: Optional[PartySummary] = None
    artist: Optional[PartySummary] = None
    available_actions: List[str] = []

    model_config = {"from_attributes": True, "extra": "ignore"}


class AcceptBookingRequest(BaseModel):
    start_time: time
    end_time: time
    response_message: Optional[str] = None

    @model_validator(mode="after")
    def check_times(self):
        if self.end_time == self.start_time:
            raise ValueError("end_time must differ from start_time")
        return self


class DeclineBookingRequest(BaseModel):
    response_message: Optional[str] = None


class ConfirmAction(BaseModel):
    """Body for destructive actions that need an explicit confirmation."""

    confirm: bool = False


class BookingResponse(BaseModel):
    id: str
    artist_id: str
    planner_id: str
    booking_request_id: Optional[str] = None
    event_name: Optional[str] = None
    event_location: Optional[str] = None
    event_date: date
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    status: BookingStatus
    created_at: Optional[datetime] = None
    planner: Optional[PartySummary] = None
    artist: Optional[PartySummary] = None
    available_actions: List[str] = []

    model_config = {"from_attributes": True, "extra": "ignore"}


class AcceptBookingResponse(BaseModel):
    request: BookingRequestResponse
    booking: Optional[BookingResponse] = None
