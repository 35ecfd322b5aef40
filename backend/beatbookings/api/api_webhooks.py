"""Payment-provider callbacks that keep subscription rows in sync."""

import hashlib
import hmac
import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Tuple

import httpx
import orjson
from fastapi import APIRouter, Depends, Header, Request, Response, status

from ..core.config import Settings
from ..crud import crud_subscription
from ..models import SubscriptionStatus
from ..remote import RemoteClient, service_client
from .dependencies import get_http_client, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["webhooks"])


def _parse_signature(header: str) -> Tuple[Optional[int], list]:
    timestamp = None
    signatures = []
    for part in header.split(","):
        key, _, value = part.strip().partition("=")
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                return None, []
        elif key == "v1" and value:
            signatures.append(value)
    return timestamp, signatures


def verify_signature(
    payload: bytes,
    header: Optional[str],
    secret: str,
    tolerance: int,
    now: Optional[float] = None,
) -> bool:
    """Check a ``t=<ts>,v1=<sig>`` header against HMAC-SHA256 of ``"<ts>.<body>"``."""
    if not header or not secret:
        return False
    timestamp, signatures = _parse_signature(header)
    if timestamp is None or not signatures:
        return False
    current = time.time() if now is None else now
    if tolerance and abs(current - timestamp) > tolerance:
        return False
    signed = f"{timestamp}.".encode("utf-8") + payload
    expected = hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()
    return any(hmac.compare_digest(expected, sig) for sig in signatures)


async def _checkout_completed(remote: RemoteClient, session: Dict[str, Any]) -> None:
    if session.get("mode") != "subscription":
        return
    subscription_id = (session.get("metadata") or {}).get("subscription_id")
    if not subscription_id:
        logger.warning("Checkout session %s has no subscription metadata", session.get("id"))
        return
    await crud_subscription.update_subscription(
        remote,
        subscription_id,
        {
            "status": SubscriptionStatus.ACTIVE,
            "stripe_subscription_id": session.get("subscription"),
            "stripe_customer_id": session.get("customer"),
            "started_at": datetime.now(timezone.utc),
        },
    )
    logger.info("Subscription %s activated", subscription_id)


async def _subscription_deleted(remote: RemoteClient, subscription: Dict[str, Any]) -> None:
    provider_id = subscription.get("id")
    if not provider_id:
        return
    await crud_subscription.update_by_provider_subscription(
        remote,
        provider_id,
        {"status": SubscriptionStatus.CANCELLED, "ends_at": datetime.now(timezone.utc)},
    )
    logger.info("Provider subscription %s cancelled", provider_id)


async def _payment_failed(remote: RemoteClient, invoice: Dict[str, Any]) -> None:
    provider_id = invoice.get("subscription")
    if not provider_id:
        return
    await crud_subscription.update_by_provider_subscription(
        remote, provider_id, {"status": SubscriptionStatus.EXPIRED}
    )
    logger.info("Provider subscription %s expired after failed payment", provider_id)


HANDLERS = {
    "checkout.session.completed": _checkout_completed,
    "customer.subscription.deleted": _subscription_deleted,
    "invoice.payment_failed": _payment_failed,
}


@router.post("/subscriptions")
async def subscription_webhook(
    request: Request,
    signature: Optional[str] = Header(default=None, alias="Stripe-Signature"),
    http: httpx.AsyncClient = Depends(get_http_client),
    cfg: Settings = Depends(get_settings),
):
    """Verify the signature, then apply the subscription state change.

    Unknown event types are acknowledged. Each handler writes absolute
    values, so a replayed event leaves the row unchanged.
    """
    raw = await request.body()
    if not verify_signature(raw, signature, cfg.PAYMENT_WEBHOOK_SECRET, cfg.PAYMENT_WEBHOOK_TOLERANCE_SECONDS):
        logger.warning("Subscription webhook signature mismatch")
        return Response("Invalid signature", status_code=status.HTTP_400_BAD_REQUEST)
    try:
        event = orjson.loads(raw)
    except orjson.JSONDecodeError:
        event = None
    if not isinstance(event, dict):
        return Response("Invalid payload", status_code=status.HTTP_400_BAD_REQUEST)

    event_type = event.get("type")
    handler = HANDLERS.get(event_type)
    if handler is None:
        logger.debug("Ignoring webhook event %s", event_type)
        return {"received": True}
    obj = ((event.get("data") or {}).get("object")) or {}
    await handler(service_client(http, cfg), obj)
    return {"received": True}
