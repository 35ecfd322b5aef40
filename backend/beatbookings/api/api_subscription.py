import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, status

from .. import schemas
from ..core.config import Settings
from ..crud import crud_subscription
from ..models import SubscriptionTier
from ..models.subscription import is_active
from ..remote import RemoteError, service_client
from ..services import publishing
from ..utils.errors import error_response, remote_error_response
from .dependencies import CurrentUser, get_current_artist, get_http_client, get_settings

logger = logging.getLogger(__name__)

router = APIRouter(tags=["subscriptions"])


@router.get("/me", response_model=Optional[schemas.SubscriptionResponse])
async def read_my_subscription(current_user: CurrentUser = Depends(get_current_artist)):
    """Subscription status card; null when the artist never subscribed."""
    return await crud_subscription.get_subscription_for_artist(
        current_user.remote, current_user.artist_profile["id"]
    )


@router.post("/checkout", response_model=schemas.SubscriptionCheckoutResult)
async def start_subscription_checkout(
    payload: schemas.SubscriptionCheckoutRequest,
    current_user: CurrentUser = Depends(get_current_artist),
    http: httpx.AsyncClient = Depends(get_http_client),
    cfg: Settings = Depends(get_settings),
):
    """Pick a plan: Free Forever activates at once, paid plans return a checkout URL."""
    current = await crud_subscription.get_subscription_for_artist(
        current_user.remote, current_user.artist_profile["id"]
    )
    if is_active(current) and current.get("subscription_tier") == payload.plan.value:
        raise error_response(
            "You are already subscribed to this plan",
            {"plan": payload.plan.value},
            status.HTTP_409_CONFLICT,
        )
    if payload.plan == SubscriptionTier.FREE_FOREVER:
        spots = await publishing.free_forever_spots_left(service_client(http, cfg), cfg)
        if spots <= 0:
            raise error_response("Free Forever spots are no longer available", {"plan": "sold_out"})
    try:
        checkout = await publishing.start_subscription_checkout(
            http, cfg, access_token=current_user.token, plan=payload.plan
        )
    except RemoteError as exc:
        raise remote_error_response(exc, status.HTTP_502_BAD_GATEWAY, field="plan")
    logger.info(
        "Artist %s started %s checkout (activated=%s)",
        current_user.artist_profile["id"],
        payload.plan.value,
        checkout.activated,
    )
    return schemas.SubscriptionCheckoutResult(
        plan=checkout.plan,
        activated=checkout.activated,
        checkout_url=checkout.checkout_url,
        redirect=checkout.redirect,
    )
