import pytest

from beatbookings.services.discovery import (
    ALL_CATEGORIES,
    ALL_GENRES,
    ALL_STATES,
    ArtistFilter,
    apply_filter,
    build_cards,
    distinct_genres,
    matches,
    premium_first,
)


def card(name, *, genre="House", category="DJ", state="NSW", city="Sydney", socials=None, premium=False):
    return {
        "id": name.lower().replace(" ", "-"),
        "stage_name": name,
        "genre": genre,
        "category": category,
        "state": state,
        "city": city,
        "socials": socials or {},
        "is_premium": premium,
    }


ARTISTS = [
    card("DJ Nova", socials={"instagram": "https://instagram.com/nova"}),
    card("Techno Kid", genre="Techno", city="Parramatta", premium=True),
    card("Yarra Strings", genre="Jazz", category="Band", state="VIC", city="Melbourne"),
    card("Nova Brass", genre="Jazz", category="Band", socials={"youtube": "https://youtube.com/nb", "instagram": "x"}),
    card("Deep Sea", premium=True, city="Bondi"),
]


def names(rows):
    return [r["stage_name"] for r in rows]


def test_sentinels_and_blanks_mean_no_constraint():
    f = ArtistFilter.build(genre=ALL_GENRES, category=ALL_CATEGORIES, state=ALL_STATES, search="  ", city="")
    assert f.is_empty
    assert apply_filter(ARTISTS, f) == ARTISTS


def test_filters_combine_with_and():
    f = ArtistFilter.build(search="nova", genre="Jazz")
    assert names(apply_filter(ARTISTS, f)) == ["Nova Brass"]


def test_search_and_city_are_case_insensitive_substrings():
    assert names(apply_filter(ARTISTS, ArtistFilter.build(search="NOVA"))) == ["DJ Nova", "Nova Brass"]
    assert names(apply_filter(ARTISTS, ArtistFilter.build(city="melb"))) == ["Yarra Strings"]


def test_genre_category_state_are_exact():
    assert apply_filter(ARTISTS, ArtistFilter.build(genre="jazz")) == []
    assert names(apply_filter(ARTISTS, ArtistFilter.build(state="VIC"))) == ["Yarra Strings"]
    assert names(apply_filter(ARTISTS, ArtistFilter.build(category="Band"))) == ["Yarra Strings", "Nova Brass"]


def test_every_checked_social_must_be_linked():
    f = ArtistFilter.build(socials=["Instagram", "youtube"])
    assert names(apply_filter(ARTISTS, f)) == ["Nova Brass"]
    assert matches(ARTISTS[0], ArtistFilter.build(socials=["instagram"]))


def test_unknown_social_is_rejected():
    with pytest.raises(ValueError):
        ArtistFilter.build(socials=["myspace"])


@pytest.mark.parametrize(
    "f",
    [
        ArtistFilter.build(),
        ArtistFilter.build(search="nova"),
        ArtistFilter.build(genre="Jazz", category="Band"),
        ArtistFilter.build(socials=["instagram"]),
    ],
)
def test_filter_is_idempotent(f):
    once = apply_filter(ARTISTS, f)
    assert apply_filter(once, f) == once


def test_premium_first_is_stable():
    ordered = premium_first(ARTISTS)
    assert names(ordered) == ["Techno Kid", "Deep Sea", "DJ Nova", "Yarra Strings", "Nova Brass"]
    flags = [a["is_premium"] for a in ordered]
    assert flags == sorted(flags, reverse=True)


def test_build_cards_drops_artists_without_active_subscription():
    profiles = [{"id": "a"}, {"id": "b"}, {"id": "c"}, {"id": "d"}]
    subs = {
        "a": {"status": "active", "entitlement_tier": "premium"},
        "b": {"status": "active", "entitlement_tier": "standard"},
        "c": {"status": "inactive", "entitlement_tier": "premium"},
    }
    cards = build_cards(profiles, subs, {"b": {"spotify": "https://spotify.com/b"}}, {"a": (4.5, 2)})
    assert [c["id"] for c in cards] == ["a", "b"]
    assert cards[0]["is_premium"] is True
    assert cards[0]["average_rating"] == 4.5 and cards[0]["review_count"] == 2
    assert cards[1]["is_premium"] is False
    assert cards[1]["socials"] == {"spotify": "https://spotify.com/b"}
    assert cards[1]["review_count"] == 0


def test_distinct_genres():
    assert distinct_genres(ARTISTS) == ["House", "Jazz", "Techno"]
