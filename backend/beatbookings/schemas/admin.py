from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import date, datetime


class PlatformStats(BaseModel):
    """Aggregate counters from the stats procedure, rendered as returned."""

    total_users: Optional[int] = None
    total_artists: Optional[int] = None
    total_planners: Optional[int] = None
    total_events: Optional[int] = None
    total_bookings: Optional[int] = None
    active_subscriptions: Optional[int] = None

    model_config = ConfigDict(extra="allow")


class AdminUserRow(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: Optional[str] = None
    is_admin: bool = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(extra="allow")


class AdminEventRow(BaseModel):
    id: str
    title: Optional[str] = None
    status: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    event_date: Optional[date] = None
    creator_name: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class AdminSubscriptionRow(BaseModel):
    id: str
    artist_id: Optional[str] = None
    stage_name: Optional[str] = None
    email: Optional[str] = None
    subscription_tier: Optional[str] = None
    entitlement_tier: Optional[str] = None
    status: Optional[str] = None

    model_config = ConfigDict(extra="allow")
