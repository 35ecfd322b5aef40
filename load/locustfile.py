"""
Locust load script for BeatBookings Live discovery and dashboards.

Simulates realistic traffic:
- Anonymous planners browsing discovery (/api/v1/artists/) with filters
- Opening an artist page
- Signed-in users polling the support badge with ETag caching
- Planners loading their requests and calendar
- Optionally open the support SSE stream briefly (connect, read, close)

Sessions are issued by the hosted auth service, so the script does not log
in; hand it access tokens instead.

Configure with env vars or Locust UI:
- HOST: pass via `--host https://api.beatbookings.live`
- BEATBOOKINGS_TOKENS: CSV of access tokens for signed-in users
- BEATBOOKINGS_ENABLE_SSE_CHECK=1 to enable short SSE connectivity checks

Run:
  locust -f load/locustfile.py --host http://localhost:8000
"""

from __future__ import annotations

import logging
import os
import random
from datetime import date
from typing import Dict, List, Optional

from locust import HttpUser, between, events, task

GENRES = ["All Genres", "House", "Jazz", "Hip Hop"]
STATES = ["All States", "NSW", "VIC", "QLD"]
SEARCHES = ["", "", "dj", "band", "nova"]


def _load_tokens() -> List[str]:
    raw = os.getenv("BEATBOOKINGS_TOKENS", "").strip()
    return [t.strip() for t in raw.split(",") if t.strip()]


TOKENS = _load_tokens()
ENABLE_SSE_CHECK = os.getenv("BEATBOOKINGS_ENABLE_SSE_CHECK", "0").strip().lower() in {"1", "true", "yes"}


def _auth_header(token: Optional[str]) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"} if token else {}


class BrowsingPlanner(HttpUser):
    """Anonymous visitor on the discovery pages."""

    wait_time = between(1, 4)
    artist_ids: List[str] = []

    @task(6)
    def discover(self):
        params = {"genre": random.choice(GENRES), "state": random.choice(STATES)}
        search = random.choice(SEARCHES)
        if search:
            params["search"] = search
        r = self.client.get("/api/v1/artists/", params=params, name="/artists")
        if r.status_code == 200:
            self.artist_ids = [a["id"] for a in r.json()][:20]

    @task(3)
    def artist_page(self):
        if not self.artist_ids:
            return
        artist_id = random.choice(self.artist_ids)
        self.client.get(f"/api/v1/artists/{artist_id}", name="/artists/[id]")

    @task(1)
    def homepage(self):
        self.client.get("/api/v1/announcements/", name="/announcements")
        self.client.get("/api/v1/events/", params={"limit": 12}, name="/events")


class SignedInUser(HttpUser):
    """Dashboard user polling badges and loading their lists."""

    wait_time = between(1, 3)
    token: Optional[str] = None
    etag_unread: Optional[str] = None
    role: Optional[str] = None

    def on_start(self):
        if not TOKENS:
            return
        self.token = random.choice(TOKENS)
        r = self.client.get("/auth/session", headers=_auth_header(self.token), name="/auth/session")
        if r.status_code == 200:
            self.role = r.json().get("role")
        else:
            self.token = None

    @task(6)
    def support_unread(self):
        if not self.token:
            return
        headers = _auth_header(self.token)
        if self.etag_unread:
            headers["If-None-Match"] = self.etag_unread
        r = self.client.get("/api/v1/support/unread", headers=headers, name="/support/unread")
        if r.status_code == 200:
            self.etag_unread = r.headers.get("ETag")

    @task(3)
    def my_requests(self):
        if not self.token:
            return
        path = "/api/v1/booking-requests/inbox" if self.role == "artist" else "/api/v1/booking-requests/me"
        self.client.get(path, headers=_auth_header(self.token), name="/booking-requests")

    @task(2)
    def calendar(self):
        if not self.token or self.role not in ("artist", "planner"):
            return
        today = date.today()
        self.client.get(
            f"/api/v1/calendar/{self.role}",
            params={"month": f"{today.year:04d}-{today.month:02d}"},
            headers=_auth_header(self.token),
            name="/calendar",
        )

    @task(1)
    def sse_check(self):
        if not ENABLE_SSE_CHECK or not self.token:
            return
        with self.client.get(
            "/api/v1/support/stream",
            headers={**_auth_header(self.token), "Accept": "text/event-stream"},
            stream=True,
            timeout=10,
            name="/support/stream/check",
            catch_response=True,
        ) as resp:
            for _ in resp.iter_content(chunk_size=64):
                break
            resp.success()


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    logging.getLogger("locust").info("Starting test with %d signed-in tokens", len(TOKENS))


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    logging.getLogger("locust").info("Test finished")
