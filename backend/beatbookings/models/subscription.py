import enum
from typing import Any, Mapping, Optional


class SubscriptionStatus(str, enum.Enum):
    PENDING = "pending"
    ACTIVE = "active"
    INACTIVE = "inactive"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


class SubscriptionTier(str, enum.Enum):
    FREE_FOREVER = "free_forever"
    STANDARD = "standard"
    PREMIUM = "premium"


class EntitlementTier(str, enum.Enum):
    STANDARD = "standard"
    PREMIUM = "premium"


def is_active(subscription: Optional[Mapping[str, Any]]) -> bool:
    """An active subscription makes an artist discoverable and bookable."""
    if not subscription:
        return False
    return subscription.get("status") == SubscriptionStatus.ACTIVE.value


def is_premium(subscription: Optional[Mapping[str, Any]]) -> bool:
    """Active and entitled to premium placement."""
    return is_active(subscription) and subscription.get("entitlement_tier") == EntitlementTier.PREMIUM.value


def is_paid(subscription: Optional[Mapping[str, Any]]) -> bool:
    """Active on a plan above the free tier (lifts the photo limit)."""
    if not is_active(subscription):
        return False
    return subscription.get("subscription_tier") in (
        SubscriptionTier.STANDARD.value,
        SubscriptionTier.PREMIUM.value,
    )
