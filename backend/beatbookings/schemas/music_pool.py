from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime

from .user import PartySummary


class MusicPoolLinkUpdate(BaseModel):
    link_url: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None

    @field_validator("link_url")
    @classmethod
    def check_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Please enter a valid URL")
        if not v.startswith(("http://", "https://")):
            raise ValueError("URL must start with http:// or https://")
        return v

    @field_validator("title", "description")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return v.strip() or None


class MusicPoolLinkCreate(MusicPoolLinkUpdate):
    link_url: str


class MusicPoolArtist(BaseModel):
    id: str
    stage_name: Optional[str] = None
    image_url: Optional[str] = None
    genre: Optional[str] = None
    category: Optional[str] = None


class MusicPoolLinkResponse(BaseModel):
    id: str
    user_id: str
    artist_id: Optional[str] = None
    link_url: str
    title: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
    owner: Optional[PartySummary] = None
    artist: Optional[MusicPoolArtist] = None
    is_owner: bool = False

    model_config = {"from_attributes": True, "extra": "ignore"}
