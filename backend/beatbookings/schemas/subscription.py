from pydantic import BaseModel
from typing import Optional
from datetime import datetime

from ..models import SubscriptionStatus, SubscriptionTier


class SubscriptionResponse(BaseModel):
    id: str
    artist_id: str
    subscription_tier: Optional[str] = None
    entitlement_tier: Optional[str] = None
    status: SubscriptionStatus
    started_at: Optional[datetime] = None
    ends_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "ignore"}


class SubscriptionCheckoutRequest(BaseModel):
    plan: SubscriptionTier


class SubscriptionCheckoutResult(BaseModel):
    plan: SubscriptionTier
    activated: bool
    checkout_url: Optional[str] = None
    redirect: Optional[str] = None
