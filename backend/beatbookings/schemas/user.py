from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

from ..models import UserRole


class ProfileBase(BaseModel):
    name: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None


class ProfileUpdate(ProfileBase):
    """Editable profile fields. Role and admin flag are not user-editable."""
    pass


class Profile(ProfileBase):
    id: str
    email: Optional[str] = None
    role: Optional[UserRole] = None
    is_admin: bool = False
    image_url: Optional[str] = None
    agreed_terms: Optional[bool] = None
    last_active_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "ignore"}


class PartySummary(BaseModel):
    """Display fields of the other party on a request, booking or message."""

    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    image_url: Optional[str] = None


class SessionResponse(BaseModel):
    user: Profile
    role: Optional[UserRole] = None
    is_admin: bool = False
    dashboard_path: str = Field(..., description="Where this user lands after sign-in")
