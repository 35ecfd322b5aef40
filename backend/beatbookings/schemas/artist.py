from pydantic import BaseModel, Field, HttpUrl
from typing import Optional, List, Annotated
from datetime import date, datetime

from ..models import MediaType, SocialPlatform
from .subscription import SubscriptionResponse
from .user import PartySummary


class ArtistProfileBase(BaseModel):
    stage_name: Optional[str] = None
    genre: Optional[str] = None
    category: Optional[str] = None
    bio: Optional[str] = None
    location: Optional[str] = None
    country: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    image_url: Optional[str] = None


class ArtistProfileCreate(ArtistProfileBase):
    stage_name: str = Field(..., min_length=1)
    genre: str = Field(..., min_length=1)


class ArtistProfileUpdate(ArtistProfileBase):
    pass


class ArtistProfileResponse(ArtistProfileBase):
    id: str
    user_id: str
    is_featured: bool = False
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "ignore"}


class SocialLink(BaseModel):
    platform: SocialPlatform
    url: HttpUrl


class SocialLinksUpdate(BaseModel):
    links: List[SocialLink] = []


class ArtistCard(ArtistProfileResponse):
    """Listing entry used by discovery."""

    socials: dict[str, str] = {}
    is_premium: bool = False
    average_rating: Optional[float] = None
    review_count: int = 0


class MediaResponse(BaseModel):
    id: str
    artist_id: str
    media_type: MediaType
    url: str
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "ignore"}


class ReviewCreate(BaseModel):
    rating: Annotated[int, Field(ge=1, le=5)]
    review_text: Optional[str] = None


class ReviewResponse(ReviewCreate):
    id: str
    artist_id: str
    planner_id: str
    planner: Optional[PartySummary] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "ignore"}


class ArtistDetail(BaseModel):
    profile: ArtistCard
    owner: Optional[PartySummary] = None
    media: List[MediaResponse] = []
    reviews: List[ReviewResponse] = []
    subscription: Optional[SubscriptionResponse] = None
    accepting_bookings: bool = False


class FavouriteToggleResponse(BaseModel):
    favourited: bool


class FavouriteResponse(BaseModel):
    id: str
    artist_id: str
    planner_id: str
    artist: Optional[ArtistProfileResponse] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "extra": "ignore"}


class ViewsByDay(BaseModel):
    date: date
    views: int = 0


class ArtistAnalytics(BaseModel):
    """Premium dashboard numbers over the last ``days`` days."""

    days: int
    total_views: int = 0
    unique_viewers: int = 0
    total_booking_requests: int = 0
    accepted_bookings: int = 0
    pending_bookings: int = 0
    total_reviews: int = 0
    average_rating: float = 0.0
    views_by_day: List[ViewsByDay] = []
