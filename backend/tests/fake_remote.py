"""In-memory stand-in for the backend-as-a-service used by the API tests.

It speaks enough of the REST dialect (filters, ordering, Prefer headers,
Content-Range counts), the stored procedures, object storage and auth to
exercise every call the API makes. Mount it with ``httpx.MockTransport``.
"""

import csv
import json
import re
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import unquote

import httpx
from jose import JWTError, jwt

RESERVED_PARAMS = {"select", "order", "limit", "offset", "on_conflict", "columns"}

TABLE_DEFAULTS: Dict[str, Dict[str, Any]] = {
    "profiles": {"is_admin": False, "role": None, "image_url": None},
    "artist_profiles": {"is_featured": False, "image_url": None},
    "booking_requests": {"status": "pending", "response_message": None},
    "bookings": {"status": "accepted"},
    "events": {"status": "draft", "cover_image": None},
    "messages": {"booking_id": None},
    "admin_messages": {"read_at": None},
    "admin_announcements": {"is_active": True, "body": None},
    "event_attendance": {"status": "going"},
    "notifications": {"is_read": False, "link": None},
    "music_pool_links": {"artist_id": None, "title": None, "description": None},
}

BASE_TS = datetime(2025, 1, 1, tzinfo=timezone.utc)


def _text(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _parse_list(raw: str) -> List[str]:
    inner = raw[1:-1] if raw.startswith("(") and raw.endswith(")") else raw
    if not inner:
        return []
    return next(csv.reader([inner], escapechar="\\"))


def _ilike(pattern: str) -> re.Pattern:
    parts = [re.escape(p) for p in pattern.split("%")]
    return re.compile("^" + ".*".join(parts) + "$", re.IGNORECASE)


def _compare(stored: Any, raw: str) -> int:
    a, b = _text(stored), raw
    try:
        fa, fb = float(a), float(b)
    except ValueError:
        return (a > b) - (a < b)
    return (fa > fb) - (fa < fb)


def _matches(row: Dict[str, Any], column: str, expr: str) -> bool:
    op, _, raw = expr.partition(".")
    if op == "not":
        return not _matches(row, column, raw)
    value = row.get(column)
    if op == "eq":
        return _text(value) == raw
    if op == "neq":
        return _text(value) != raw
    if op == "is":
        if raw == "null":
            return value is None
        return _text(value) == raw
    if op == "in":
        return _text(value) in _parse_list(raw)
    if op == "ilike":
        return value is not None and bool(_ilike(raw).match(str(value)))
    if value is None:
        return False
    cmp = _compare(value, raw)
    return {"gt": cmp > 0, "gte": cmp >= 0, "lt": cmp < 0, "lte": cmp <= 0}[op]


def _json(data: Any, status_code: int = 200, headers: Optional[Dict[str, str]] = None) -> httpx.Response:
    return httpx.Response(
        status_code,
        content=json.dumps(data).encode(),
        headers={"Content-Type": "application/json", **(headers or {})},
    )


def _error(message: str, status_code: int = 400, code: str = "P0001") -> httpx.Response:
    return _json({"message": message, "code": code, "details": None, "hint": None}, status_code)


class FakeRemote:
    def __init__(self, base_url: str = "https://remote.test", bucket: str = "media") -> None:
        self.base_url = base_url
        self.bucket = bucket
        self.tables: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        self.objects: Dict[str, Dict[str, Any]] = {}
        self.requests: List[httpx.Request] = []
        self.signed_out: List[Optional[str]] = []
        self.failures: Dict[str, httpx.Response] = {}
        self.checkout_response: httpx.Response = _json(
            {"checkout_url": "https://checkout.test/pay/cs_test_1", "session_id": "cs_test_1"}
        )
        self.checkout_calls: List[Dict[str, Any]] = []
        self.subscription_checkout_response: httpx.Response = _json({"url": "https://checkout.test/sub/cs_sub_1"})
        self.analytics: Dict[str, Any] = {}
        self._seq = 0
        self.procedures: Dict[str, Callable[[Dict[str, Any], Optional[str]], httpx.Response]] = {
            "create_booking_request": self._create_booking_request,
            "accept_booking_request": self._accept_booking_request,
            "decline_booking_request": self._decline_booking_request,
            "cancel_confirmed_booking": self._cancel_confirmed_booking,
            "admin_deactivate_subscription": self._admin_deactivate_subscription,
            "admin_delete_subscription": self._admin_delete_subscription,
            "get_platform_stats": self._get_platform_stats,
            "get_all_users": self._get_all_users,
            "get_all_events": self._get_all_events,
            "get_all_subscriptions": self._get_all_subscriptions,
            "get_admin_conversations": self._get_admin_conversations,
            "get_artist_analytics": self._get_artist_analytics,
        }

    # ── seeding and inspection ────────────────────────────────────────────
    def _stamp(self) -> str:
        self._seq += 1
        return (BASE_TS + timedelta(seconds=self._seq)).isoformat()

    def add(self, table: str, **values: Any) -> Dict[str, Any]:
        row = {**TABLE_DEFAULTS.get(table, {}), **values}
        row.setdefault("id", str(uuid.uuid4()))
        row.setdefault("created_at", self._stamp())
        self.tables[table].append(row)
        return row

    def rows(self, table: str, **filters: Any) -> List[Dict[str, Any]]:
        return [r for r in self.tables[table] if all(r.get(k) == v for k, v in filters.items())]

    def get(self, table: str, row_id: str) -> Optional[Dict[str, Any]]:
        found = self.rows(table, id=row_id)
        return found[0] if found else None

    def fail(self, key: str, message: str, status_code: int = 400, code: str = "P0001") -> None:
        """Make the table or procedure named ``key`` return an error."""
        self.failures[key] = _error(message, status_code, code)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    # ── request routing ──────────────────────────────────────────────────
    def _caller(self, request: httpx.Request) -> Optional[str]:
        auth = request.headers.get("authorization", "")
        token = auth[7:] if auth.lower().startswith("bearer ") else ""
        try:
            return jwt.get_unverified_claims(token).get("sub")
        except JWTError:
            return None

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith("/rest/v1/rpc/"):
            return self._rpc(request, path.rsplit("/", 1)[-1])
        if path.startswith("/rest/v1/"):
            table = path[len("/rest/v1/"):]
            if not table:
                return _json({})
            return self._table(request, table)
        if path.startswith("/storage/v1/object/"):
            return self._storage(request, path[len("/storage/v1/object/"):])
        if path == "/auth/v1/user":
            uid = self._caller(request)
            return _json({"id": uid}) if uid else _error("invalid JWT", 401, "bad_jwt")
        if path == "/auth/v1/logout":
            self.signed_out.append(self._caller(request))
            return httpx.Response(204)
        if path.startswith("/functions/v1/"):
            body = json.loads(request.content or b"{}")
            name = path.rsplit("/", 1)[-1]
            self.checkout_calls.append({"function": name, "headers": dict(request.headers), "body": body})
            if name == "create-subscription-checkout":
                return self._subscription_checkout(body, self._caller(request))
            return self.checkout_response
        return _error(f"No route for {path}", 404, "not_found")

    # ── tables ───────────────────────────────────────────────────────────
    def _table(self, request: httpx.Request, table: str) -> httpx.Response:
        if table in self.failures:
            return self.failures[table]
        params = request.url.params.multi_items()
        filters = [(k, v) for k, v in params if k not in RESERVED_PARAMS]
        options = {k: v for k, v in params if k in RESERVED_PARAMS}
        prefer = request.headers.get("prefer", "")
        method = request.method

        if method in ("GET", "HEAD"):
            rows = self._select(table, filters, options)
            total = len(rows)
            offset = int(options.get("offset", 0))
            if "limit" in options:
                rows = rows[offset:offset + int(options["limit"])]
            elif offset:
                rows = rows[offset:]
            headers = {}
            if "count=exact" in prefer:
                headers["Content-Range"] = f"0-{len(rows) - 1}/{total}" if rows else f"*/{total}"
            if method == "HEAD":
                return httpx.Response(200, headers=headers)
            return _json(self._project(rows, options.get("select", "*")), headers=headers)

        payload = json.loads(request.content) if request.content else None
        if method == "POST":
            rows = payload if isinstance(payload, list) else [payload]
            if "on_conflict" in options:
                written = [self._upsert(table, r, options["on_conflict"].split(",")) for r in rows]
            else:
                written = [self.add(table, **r) for r in rows]
            if "return=minimal" in prefer:
                return httpx.Response(201)
            return _json(written, 201)

        targets = self._select(table, filters, {})
        if method == "PATCH":
            for row in targets:
                row.update(payload or {})
        elif method == "DELETE":
            ids = {id(row) for row in targets}
            self.tables[table] = [r for r in self.tables[table] if id(r) not in ids]
        if "return=minimal" in prefer:
            return httpx.Response(204)
        return _json([dict(r) for r in targets])

    def _select(self, table: str, filters, options) -> List[Dict[str, Any]]:
        rows = [r for r in self.tables[table] if all(_matches(r, col, expr) for col, expr in filters)]
        order = options.get("order")
        if order:
            for spec in reversed(order.split(",")):
                column, _, direction = spec.partition(".")
                rows.sort(
                    key=lambda r: (r.get(column) is None, _text(r.get(column))),
                    reverse=direction.startswith("desc"),
                )
        return rows

    @staticmethod
    def _project(rows: List[Dict[str, Any]], select: str) -> List[Dict[str, Any]]:
        if select in ("", "*"):
            return [dict(r) for r in rows]
        columns = [c.strip() for c in select.split(",")]
        return [{c: r.get(c) for c in columns} for r in rows]

    def _upsert(self, table: str, row: Dict[str, Any], keys: List[str]) -> Dict[str, Any]:
        for existing in self.tables[table]:
            if all(existing.get(k) == row.get(k) for k in keys):
                existing.update(row)
                return dict(existing)
        return self.add(table, **row)

    # ── storage ──────────────────────────────────────────────────────────
    def _storage(self, request: httpx.Request, rest: str) -> httpx.Response:
        if "storage" in self.failures:
            return self.failures["storage"]
        if request.method == "POST":
            bucket, _, path = rest.partition("/")
            path = unquote(path)
            self.objects[path] = {
                "bucket": bucket,
                "content": request.content,
                "content_type": request.headers.get("content-type"),
            }
            return _json({"Key": f"{bucket}/{path}"})
        if request.method == "DELETE":
            prefixes = json.loads(request.content).get("prefixes", [])
            removed = [p for p in prefixes if self.objects.pop(p, None) is not None]
            return _json([{"name": p} for p in removed])
        return _error("Unsupported storage call", 400)

    # ── stored procedures ────────────────────────────────────────────────
    def _rpc(self, request: httpx.Request, name: str) -> httpx.Response:
        if name in self.failures:
            return self.failures[name]
        proc = self.procedures.get(name)
        if proc is None:
            return _error(f"Could not find the function public.{name}", 404, "PGRST202")
        params = json.loads(request.content) if request.content else {}
        return proc(params, self._caller(request))

    def _create_booking_request(self, params: Dict[str, Any], uid: Optional[str]) -> httpx.Response:
        row = self.add(
            "booking_requests",
            planner_id=uid,
            artist_user_id=params["p_artist_user_id"],
            event_name=params["p_event_name"],
            event_date=params["p_event_date"],
            event_location=params["p_event_location"],
            message=params.get("p_message"),
            start_time=params.get("p_start_time"),
            end_time=params.get("p_end_time"),
        )
        return _json(row["id"])

    def _pending_request(self, request_id: str, uid: Optional[str]):
        req = self.get("booking_requests", request_id)
        if req is None:
            return None, _error("Booking request not found", 404)
        if req.get("artist_user_id") != uid:
            return None, _error("Not allowed", 403, "42501")
        if req.get("status") != "pending":
            return None, _error("Booking request is no longer pending")
        return req, None

    def _accept_booking_request(self, params: Dict[str, Any], uid: Optional[str]) -> httpx.Response:
        req, err = self._pending_request(params["p_request_id"], uid)
        if err is not None:
            return err
        artist = self.rows("artist_profiles", user_id=req["artist_user_id"])
        req.update(
            status="accepted",
            start_time=params["p_start_time"],
            end_time=params["p_end_time"],
            response_message=params.get("p_response_message"),
        )
        booking = self.add(
            "bookings",
            artist_id=artist[0]["id"] if artist else None,
            planner_id=req["planner_id"],
            booking_request_id=req["id"],
            event_name=req["event_name"],
            event_location=req["event_location"],
            event_date=req["event_date"],
            start_time=params["p_start_time"],
            end_time=params["p_end_time"],
        )
        return _json(booking["id"])

    def _decline_booking_request(self, params: Dict[str, Any], uid: Optional[str]) -> httpx.Response:
        req, err = self._pending_request(params["p_request_id"], uid)
        if err is not None:
            return err
        req.update(status="declined", response_message=params.get("p_response_message"))
        return _json(None)

    def _cancel_confirmed_booking(self, params: Dict[str, Any], uid: Optional[str]) -> httpx.Response:
        booking = self.get("bookings", params["p_booking_id"])
        if booking is None:
            return _error("Booking not found", 404)
        booking["status"] = "cancelled"
        return _json(None)

    def _admin_deactivate_subscription(self, params: Dict[str, Any], uid: Optional[str]) -> httpx.Response:
        sub = self.get("subscriptions", params["p_subscription_id"])
        if sub is None:
            return _error("Subscription not found", 404)
        sub["status"] = "inactive"
        return _json(None)

    def _admin_delete_subscription(self, params: Dict[str, Any], uid: Optional[str]) -> httpx.Response:
        sub_id = params["p_subscription_id"]
        self.tables["subscriptions"] = [s for s in self.tables["subscriptions"] if s["id"] != sub_id]
        return _json(None)

    def _get_platform_stats(self, params: Dict[str, Any], uid: Optional[str]) -> httpx.Response:
        profiles = self.tables["profiles"]
        return _json(
            [
                {
                    "total_users": len(profiles),
                    "total_artists": len([p for p in profiles if p.get("role") == "artist"]),
                    "total_planners": len([p for p in profiles if p.get("role") == "planner"]),
                    "total_events": len(self.tables["events"]),
                    "total_bookings": len(self.tables["bookings"]),
                    "active_subscriptions": len(self.rows("subscriptions", status="active")),
                }
            ]
        )

    def _get_all_users(self, params: Dict[str, Any], uid: Optional[str]) -> httpx.Response:
        return _json([dict(p) for p in self.tables["profiles"]])

    def _get_all_events(self, params: Dict[str, Any], uid: Optional[str]) -> httpx.Response:
        out = []
        for event in self.tables["events"]:
            creator = self.get("profiles", event.get("creator_id")) or {}
            out.append({**event, "creator_name": creator.get("name")})
        return _json(out)

    def _get_all_subscriptions(self, params: Dict[str, Any], uid: Optional[str]) -> httpx.Response:
        out = []
        for sub in self.tables["subscriptions"]:
            artist = self.get("artist_profiles", sub.get("artist_id")) or {}
            owner = self.get("profiles", artist.get("user_id")) or {}
            out.append({**sub, "stage_name": artist.get("stage_name"), "email": owner.get("email")})
        return _json(out)

    def _get_admin_conversations(self, params: Dict[str, Any], uid: Optional[str]) -> httpx.Response:
        threads: Dict[str, List[Dict[str, Any]]] = defaultdict(list)
        for msg in self.tables["admin_messages"]:
            threads[msg["user_id"]].append(msg)
        out = []
        for user_id, msgs in threads.items():
            profile = self.get("profiles", user_id) or {}
            last = max(msgs, key=lambda m: m["created_at"])
            out.append(
                {
                    "user_id": user_id,
                    "name": profile.get("name"),
                    "email": profile.get("email"),
                    "role": profile.get("role"),
                    "last_message": last["message"],
                    "last_message_at": last["created_at"],
                    "unread_count": len([m for m in msgs if m["sender"] == "user" and m.get("read_at") is None]),
                }
            )
        out.sort(key=lambda c: c["last_message_at"], reverse=True)
        return _json(out)

    def _get_artist_analytics(self, params: Dict[str, Any], uid: Optional[str]) -> httpx.Response:
        artist_id = params["p_artist_id"]
        artist = self.get("artist_profiles", artist_id) or {}
        requests = self.rows("booking_requests", artist_user_id=artist.get("user_id"))
        reviews = self.rows("artist_reviews", artist_id=artist_id)
        ratings = [r["rating"] for r in reviews if r.get("rating") is not None]
        return _json(
            {
                "total_booking_requests": len(requests),
                "accepted_bookings": len([r for r in requests if r["status"] == "accepted"]),
                "pending_bookings": len([r for r in requests if r["status"] == "pending"]),
                "total_reviews": len(reviews),
                "average_rating": round(sum(ratings) / len(ratings), 2) if ratings else None,
                **self.analytics,
            }
        )

    # ── edge functions ───────────────────────────────────────────────────
    def _subscription_checkout(self, body: Dict[str, Any], uid: Optional[str]) -> httpx.Response:
        if body.get("plan") != "free_forever":
            return self.subscription_checkout_response
        [artist] = self.rows("artist_profiles", user_id=uid)
        self._upsert(
            "subscriptions",
            {
                "artist_id": artist["id"],
                "subscription_tier": "free_forever",
                "entitlement_tier": "premium",
                "status": "active",
            },
            ["artist_id"],
        )
        return _json({"success": True, "redirect": "/artist/dashboard?sub=success"})
