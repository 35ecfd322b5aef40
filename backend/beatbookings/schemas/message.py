from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime

from ..models import AdminSender


class MessageCreate(BaseModel):
    recipient_id: str
    booking_id: Optional[str] = None
    content: str = Field(..., max_length=5000)

    @field_validator("content")
    @classmethod
    def content_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()


class MessageResponse(BaseModel):
    id: str
    sender_id: str
    recipient_id: str
    booking_id: Optional[str] = None
    content: str
    created_at: datetime

    model_config = {"from_attributes": True, "extra": "ignore"}


class SupportMessageCreate(BaseModel):
    message: str = Field(..., max_length=5000)

    @field_validator("message")
    @classmethod
    def message_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("Message cannot be empty")
        return v.strip()


class SupportMessageResponse(BaseModel):
    id: str
    user_id: str
    sender: AdminSender
    message: str
    read_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True, "extra": "ignore"}


class ConversationSummary(BaseModel):
    """One row of the admin's support inbox."""

    user_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    last_message: Optional[str] = None
    last_message_at: Optional[datetime] = None
    unread_count: int = 0

    model_config = {"extra": "ignore"}


class UnreadCount(BaseModel):
    count: int
