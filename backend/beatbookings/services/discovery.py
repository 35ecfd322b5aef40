"""Artist discovery filters.

Everything here is pure and synchronous. The candidate set is fetched once
per request and narrowed in memory, so applying the same filter twice gives
the same result.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence

from ..models import SocialPlatform
from ..models.subscription import is_active, is_premium

ALL_GENRES = "All Genres"
ALL_CATEGORIES = "All Categories"
ALL_STATES = "All States"

_SENTINELS = {ALL_GENRES, ALL_CATEGORIES, ALL_STATES}


def _constraint(value: Optional[str]) -> Optional[str]:
    """Normalise a filter value: blanks and the "All ..." sentinels mean no constraint."""
    if value is None:
        return None
    value = value.strip()
    if not value or value in _SENTINELS:
        return None
    return value


@dataclass(frozen=True)
class ArtistFilter:
    search: Optional[str] = None
    genre: Optional[str] = None
    category: Optional[str] = None
    state: Optional[str] = None
    city: Optional[str] = None
    socials: frozenset = field(default_factory=frozenset)

    @classmethod
    def build(
        cls,
        *,
        search: Optional[str] = None,
        genre: Optional[str] = None,
        category: Optional[str] = None,
        state: Optional[str] = None,
        city: Optional[str] = None,
        socials: Iterable[str] = (),
    ) -> "ArtistFilter":
        platforms = frozenset(SocialPlatform(s.strip().lower()).value for s in socials if s and s.strip())
        return cls(
            search=_constraint(search),
            genre=_constraint(genre),
            category=_constraint(category),
            state=_constraint(state),
            city=_constraint(city),
            socials=platforms,
        )

    @property
    def is_empty(self) -> bool:
        return not any((self.search, self.genre, self.category, self.state, self.city, self.socials))


def _contains(haystack: Any, needle: str) -> bool:
    return needle.lower() in str(haystack or "").lower()


def matches(artist: Mapping[str, Any], f: ArtistFilter) -> bool:
    """True when ``artist`` satisfies every active constraint of ``f``."""
    if f.genre and artist.get("genre") != f.genre:
        return False
    if f.category and artist.get("category") != f.category:
        return False
    if f.state and artist.get("state") != f.state:
        return False
    if f.search and not _contains(artist.get("stage_name"), f.search):
        return False
    if f.city and not _contains(artist.get("city"), f.city):
        return False
    if f.socials:
        links = artist.get("socials") or {}
        if any(not links.get(platform) for platform in f.socials):
            return False
    return True


def apply_filter(artists: Sequence[Mapping[str, Any]], f: ArtistFilter) -> List[Mapping[str, Any]]:
    if f.is_empty:
        return list(artists)
    return [a for a in artists if matches(a, f)]


def premium_first(artists: Sequence[Mapping[str, Any]]) -> List[Mapping[str, Any]]:
    """Stable sort: premium artists first, original order otherwise kept."""
    return sorted(artists, key=lambda a: 0 if a.get("is_premium") else 1)


def build_cards(
    profiles: Iterable[Dict[str, Any]],
    subscriptions: Mapping[str, Mapping[str, Any]],
    socials: Mapping[str, Mapping[str, str]],
    ratings: Optional[Mapping[str, tuple]] = None,
) -> List[Dict[str, Any]]:
    """Join profiles with their subscription, links and ratings.

    Artists without an active subscription are not discoverable and are
    dropped here.
    """
    ratings = ratings or {}
    cards: List[Dict[str, Any]] = []
    for profile in profiles:
        sub = subscriptions.get(profile["id"])
        if not is_active(sub):
            continue
        avg, count = ratings.get(profile["id"], (None, 0))
        cards.append(
            {
                **profile,
                "socials": dict(socials.get(profile["id"], {})),
                "is_premium": is_premium(sub),
                "average_rating": avg,
                "review_count": count,
            }
        )
    return cards


def distinct_genres(artists: Iterable[Mapping[str, Any]]) -> List[str]:
    return sorted({a["genre"] for a in artists if a.get("genre")})
