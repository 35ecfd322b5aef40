"""Paid flows: event publishing and artist subscription checkout.

Artists always publish for free. Planners get ``FREE_EVENT_PUBLISHES`` free
publishes; beyond that a checkout session is created through the payment
function and the event is published by the payment provider's callback.

Artists pick a plan through the subscription checkout function. Free Forever
is activated by the function straight away while spots remain; paid plans
come back as a checkout URL and are activated by the subscription webhook.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import httpx

from ..core.config import Settings
from ..models import SubscriptionTier, UserRole
from ..remote import RemoteClient, RemoteError
from ..crud import crud_event, crud_subscription

logger = logging.getLogger(__name__)


@dataclass
class PublishEligibility:
    allowed: bool
    requires_payment: bool
    published_count: int = 0


async def check_eligibility(
    remote: RemoteClient,
    *,
    creator_id: str,
    creator_role: Optional[UserRole],
    settings: Settings,
) -> PublishEligibility:
    if creator_role == UserRole.ARTIST:
        return PublishEligibility(allowed=True, requires_payment=False)
    published = await crud_event.count_published_by_creator(remote, creator_id)
    if published < settings.FREE_EVENT_PUBLISHES:
        return PublishEligibility(allowed=True, requires_payment=False, published_count=published)
    return PublishEligibility(allowed=False, requires_payment=True, published_count=published)


async def _call_payment_function(
    http: httpx.AsyncClient,
    settings: Settings,
    url: str,
    *,
    access_token: str,
    payload: Dict[str, Any],
    what: str,
) -> Dict[str, Any]:
    headers = {
        "Authorization": f"Bearer {access_token}",
        "apikey": settings.SUPABASE_ANON_KEY,
        "Origin": settings.FRONTEND_URL,
    }
    try:
        response = await http.post(url, json=payload, headers=headers)
    except httpx.HTTPError as exc:
        logger.error("Checkout request for %s failed: %s", what, exc)
        raise RemoteError(f"Checkout unavailable: {exc}", code="unavailable", status_code=503)
    if response.is_error:
        error = RemoteError.from_response(response)
        logger.error("Checkout for %s rejected: %s", what, error)
        raise error
    return response.json()


async def create_checkout_session(
    http: httpx.AsyncClient,
    settings: Settings,
    *,
    access_token: str,
    event_id: str,
) -> Dict[str, Any]:
    """Ask the payment function for a checkout session for ``event_id``.

    Returns ``{"checkout_url": ..., "session_id": ...}``. Errors from the
    function are raised as ``RemoteError`` with its message.
    """
    body = await _call_payment_function(
        http,
        settings,
        settings.checkout_url,
        access_token=access_token,
        payload={"event_id": event_id},
        what=f"event {event_id}",
    )
    if not body.get("checkout_url"):
        raise RemoteError("Checkout session did not return a URL", status_code=502)
    return {"checkout_url": body["checkout_url"], "session_id": body.get("session_id")}


@dataclass
class SubscriptionCheckout:
    plan: SubscriptionTier
    activated: bool
    checkout_url: Optional[str] = None
    redirect: Optional[str] = None


async def free_forever_spots_left(remote: RemoteClient, settings: Settings) -> int:
    taken = await crud_subscription.count_by_tier(remote, SubscriptionTier.FREE_FOREVER.value)
    return max(settings.FREE_FOREVER_SPOTS - taken, 0)


async def start_subscription_checkout(
    http: httpx.AsyncClient,
    settings: Settings,
    *,
    access_token: str,
    plan: SubscriptionTier,
) -> SubscriptionCheckout:
    """Start checkout for ``plan`` on behalf of the signed-in artist."""
    body = await _call_payment_function(
        http,
        settings,
        settings.subscription_checkout_url,
        access_token=access_token,
        payload={"plan": plan.value},
        what=f"{plan.value} plan",
    )
    if body.get("url"):
        return SubscriptionCheckout(plan=plan, activated=False, checkout_url=body["url"])
    if body.get("success"):
        return SubscriptionCheckout(plan=plan, activated=True, redirect=body.get("redirect"))
    raise RemoteError("Subscription checkout did not return a URL", status_code=502)
