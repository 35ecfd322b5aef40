import asyncio
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Query, UploadFile, status

from .. import schemas
from ..core.config import Settings
from ..crud import crud_artist, crud_media, crud_profile, crud_review, crud_subscription
from ..models import MediaType, UserRole
from ..models.subscription import is_active, is_paid, is_premium
from ..remote import RemoteClient
from ..services import discovery
from ..services.media_service import ARTIST_MEDIA_PREFIX, remove_by_url, store_upload
from ..utils.errors import error_response, require_confirmation
from .dependencies import (
    CurrentUser,
    forbidden,
    get_anon_remote,
    get_current_artist,
    get_current_planner,
    get_current_user,
    get_settings,
)

logger = logging.getLogger(__name__)

router = APIRouter(tags=["artists"])

ANALYTICS_RANGES = (7, 30, 90)


async def _discoverable_cards(remote: RemoteClient) -> List[dict]:
    profiles = await crud_artist.list_artist_profiles(remote)
    ids = [p["id"] for p in profiles]
    subscriptions, socials, ratings = await asyncio.gather(
        crud_subscription.get_subscriptions_for_artists(remote, ids),
        crud_artist.get_social_links(remote, ids),
        crud_review.rating_summary(remote, ids),
    )
    return discovery.build_cards(profiles, subscriptions, socials, ratings)


@router.get("/", response_model=List[schemas.ArtistCard])
async def list_artists(
    search: Optional[str] = Query(None, description="Stage name contains"),
    genre: Optional[str] = Query(None),
    category: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    city: Optional[str] = Query(None),
    socials: List[str] = Query([], description="Platforms that must be linked"),
    remote: RemoteClient = Depends(get_anon_remote),
):
    """Discoverable artists, premium first, narrowed by the given filters."""
    try:
        f = discovery.ArtistFilter.build(
            search=search, genre=genre, category=category, state=state, city=city, socials=socials
        )
    except ValueError:
        raise error_response("Unknown social platform", {"socials": ",".join(socials)})
    cards = await _discoverable_cards(remote)
    return discovery.premium_first(discovery.apply_filter(cards, f))


@router.get("/genres", response_model=List[str])
async def list_genres(remote: RemoteClient = Depends(get_anon_remote)):
    return discovery.distinct_genres(await _discoverable_cards(remote))


@router.post("/me", response_model=schemas.ArtistProfileResponse, status_code=status.HTTP_201_CREATED)
async def create_my_artist_profile(
    payload: schemas.ArtistProfileCreate,
    current_user: CurrentUser = Depends(get_current_user),
):
    """Onboarding: one artist profile per artist account."""
    if current_user.role != UserRole.ARTIST:
        raise forbidden("Only artists can create an artist profile.", current_user)
    existing = await crud_artist.get_artist_profile_by_user(current_user.remote, current_user.id)
    if existing:
        raise error_response("Artist profile already exists", {"user_id": "duplicate"}, status.HTTP_409_CONFLICT)
    return await crud_artist.create_artist_profile(current_user.remote, current_user.id, payload.model_dump())


@router.put("/me/social-links", response_model=dict[str, str])
async def replace_my_social_links(
    payload: schemas.SocialLinksUpdate,
    current_user: CurrentUser = Depends(get_current_artist),
):
    links = [{"platform": link.platform.value, "url": str(link.url)} for link in payload.links]
    return await crud_artist.replace_social_links(current_user.remote, current_user.artist_profile["id"], links)


@router.post("/me/media", response_model=schemas.MediaResponse, status_code=status.HTTP_201_CREATED)
async def upload_my_media(
    file: UploadFile = File(...),
    current_user: CurrentUser = Depends(get_current_artist),
    cfg: Settings = Depends(get_settings),
):
    """Upload a photo or video. Free-tier artists hold a limited number of photos."""
    remote = current_user.remote
    artist_id = current_user.artist_profile["id"]
    if (file.content_type or "").lower().startswith("image/"):
        subscription = await crud_subscription.get_subscription_for_artist(remote, artist_id)
        if not is_paid(subscription):
            photos = await crud_media.count_media(remote, artist_id, MediaType.IMAGE)
            if photos >= cfg.FREE_TIER_PHOTO_LIMIT:
                raise error_response(
                    f"Free plan includes up to {cfg.FREE_TIER_PHOTO_LIMIT} photos",
                    {"file": "photo_limit_reached"},
                    status.HTTP_409_CONFLICT,
                )
    stored = await store_upload(remote, cfg, file, prefix=ARTIST_MEDIA_PREFIX, owner_id=artist_id)
    return await crud_media.create_media(remote, artist_id, stored.media_type, stored.public_url)


@router.delete("/me/media/{media_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_my_media(
    media_id: str,
    confirm: bool = Query(False),
    current_user: CurrentUser = Depends(get_current_artist),
):
    require_confirmation(confirm, "delete this media")
    media = await crud_media.get_media(current_user.remote, media_id)
    if not media or media.get("artist_id") != current_user.artist_profile["id"]:
        raise error_response("Media not found", {"media_id": "not_found"}, status.HTTP_404_NOT_FOUND)
    await remove_by_url(current_user.remote, media.get("url"))
    await crud_media.delete_media(current_user.remote, media_id)


@router.get("/me/analytics", response_model=schemas.ArtistAnalytics)
async def read_my_analytics(
    days: int = Query(30, description="One of 7, 30 or 90"),
    current_user: CurrentUser = Depends(get_current_artist),
):
    """Profile views, booking and review totals. Premium only."""
    if days not in ANALYTICS_RANGES:
        raise error_response("Unsupported analytics range", {"days": "must be 7, 30 or 90"})
    artist_id = current_user.artist_profile["id"]
    subscription = await crud_subscription.get_subscription_for_artist(current_user.remote, artist_id)
    if not is_premium(subscription):
        raise error_response(
            "Analytics are available on the Premium plan",
            {"subscription": "premium_required"},
            status.HTTP_403_FORBIDDEN,
        )
    data = await crud_artist.get_artist_analytics(current_user.remote, artist_id, days)
    return {**{k: v for k, v in data.items() if v is not None}, "days": days}


@router.get("/{artist_id}", response_model=schemas.ArtistDetail)
async def read_artist(artist_id: str, remote: RemoteClient = Depends(get_anon_remote)):
    """Profile page: profile, owner, links, media, reviews and subscription."""
    profile = await crud_artist.get_artist_profile(remote, artist_id)
    if not profile:
        raise error_response("Artist not found", {"artist_id": "not_found"}, status.HTTP_404_NOT_FOUND)
    owners, socials, media, reviews, subscription, ratings = await asyncio.gather(
        crud_profile.get_profiles_by_ids(remote, [profile["user_id"]]),
        crud_artist.get_social_links(remote, [artist_id]),
        crud_media.list_media(remote, artist_id),
        crud_review.list_reviews(remote, artist_id),
        crud_subscription.get_subscription_for_artist(remote, artist_id),
        crud_review.rating_summary(remote, [artist_id]),
    )
    subs = {artist_id: subscription} if subscription else {}
    cards = discovery.build_cards([profile], subs, socials, ratings)
    card = cards[0] if cards else {**profile, "socials": dict(socials.get(artist_id, {}))}
    return {
        "profile": card,
        "owner": owners.get(profile["user_id"]),
        "media": media,
        "reviews": reviews,
        "subscription": subscription,
        "accepting_bookings": is_active(subscription),
    }


@router.patch("/{artist_id}", response_model=schemas.ArtistProfileResponse)
async def update_artist(
    artist_id: str,
    payload: schemas.ArtistProfileUpdate,
    current_user: CurrentUser = Depends(get_current_user),
):
    profile = await crud_artist.get_artist_profile(current_user.remote, artist_id)
    if not profile:
        raise error_response("Artist not found", {"artist_id": "not_found"}, status.HTTP_404_NOT_FOUND)
    if profile.get("user_id") != current_user.id and not current_user.is_admin:
        raise forbidden("You can only edit your own artist profile.", current_user)
    return await crud_artist.update_artist_profile(
        current_user.remote, artist_id, payload.model_dump(exclude_unset=True)
    )


@router.get("/{artist_id}/media", response_model=List[schemas.MediaResponse])
async def list_artist_media(artist_id: str, remote: RemoteClient = Depends(get_anon_remote)):
    return await crud_media.list_media(remote, artist_id)


@router.get("/{artist_id}/reviews", response_model=List[schemas.ReviewResponse])
async def list_artist_reviews(artist_id: str, remote: RemoteClient = Depends(get_anon_remote)):
    return await crud_review.list_reviews(remote, artist_id)


@router.put("/{artist_id}/review", response_model=schemas.ReviewResponse)
async def review_artist(
    artist_id: str,
    payload: schemas.ReviewCreate,
    current_user: CurrentUser = Depends(get_current_planner),
):
    """One review per planner per artist; a second submission replaces the first."""
    profile = await crud_artist.get_artist_profile(current_user.remote, artist_id)
    if not profile:
        raise error_response("Artist not found", {"artist_id": "not_found"}, status.HTTP_404_NOT_FOUND)
    return await crud_review.upsert_review(
        current_user.remote, artist_id, current_user.id, payload.rating, payload.review_text
    )
