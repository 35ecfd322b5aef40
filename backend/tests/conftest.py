from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, Optional

import httpx
import pytest
from dotenv import load_dotenv
from jose import jwt

# Load environment variables for tests
load_dotenv(Path(__file__).resolve().parents[1] / '.env.test')

from fastapi.testclient import TestClient  # noqa: E402

from beatbookings.api.dependencies import get_http_client  # noqa: E402
from beatbookings.core.config import settings  # noqa: E402
from beatbookings.main import app  # noqa: E402
from fake_remote import FakeRemote  # noqa: E402


def make_token(user_id: str, *, secret: Optional[str] = None, expires_in: int = 3600) -> str:
    claims = {
        "sub": user_id,
        "aud": settings.JWT_AUDIENCE,
        "role": "authenticated",
        "exp": datetime.now(timezone.utc) + timedelta(seconds=expires_in),
    }
    return jwt.encode(claims, secret or settings.SUPABASE_JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def auth_headers(profile: Dict[str, Any]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {make_token(profile['id'])}"}


def add_user(fake: FakeRemote, role: Optional[str], name: str, *, is_admin: bool = False) -> Dict[str, Any]:
    email = f"{name.lower().replace(' ', '.')}@example.com"
    return fake.add("profiles", name=name, email=email, role=role, is_admin=is_admin, agreed_terms=True)


def add_artist(
    fake: FakeRemote,
    stage_name: str,
    *,
    subscription: Optional[str] = "active",
    tier: str = "standard",
    entitlement: str = "standard",
    **profile: Any,
) -> Dict[str, Any]:
    """Seed an artist account, its artist profile and (optionally) a subscription.

    Returns the artist profile row with the owner under ``user``.
    """
    user = add_user(fake, "artist", f"{stage_name} Owner")
    values = {"genre": "House", "category": "DJ", "state": "NSW", "city": "Sydney", **profile}
    artist = fake.add("artist_profiles", user_id=user["id"], stage_name=stage_name, **values)
    if subscription:
        fake.add(
            "subscriptions",
            artist_id=artist["id"],
            status=subscription,
            subscription_tier=tier,
            entitlement_tier=entitlement,
        )
    return {**artist, "user": user}


@pytest.fixture
def fake():
    return FakeRemote(base_url=settings.SUPABASE_URL, bucket=settings.MEDIA_BUCKET)


@pytest.fixture
def client(fake):
    """API client whose outbound calls all land on the in-memory remote."""
    http = httpx.AsyncClient(transport=fake.transport())
    app.dependency_overrides[get_http_client] = lambda: http
    app.state.http = http
    yield TestClient(app)
    app.dependency_overrides.clear()
    del app.state.http


@pytest.fixture
def planner(fake):
    return add_user(fake, "planner", "Pat Planner")


@pytest.fixture
def admin(fake):
    return add_user(fake, None, "Ada Admin", is_admin=True)


@pytest.fixture
def artist(fake):
    return add_artist(fake, "DJ Nova")
