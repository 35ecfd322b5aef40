# backend/beatbookings/main.py

import logging
import os
import time
from typing import Iterable

import httpx
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.gzip import GZipMiddleware

# Routers under beatbookings/api/
from .api import (
    api_admin,
    api_announcement,
    api_artist,
    api_booking,
    api_booking_request,
    api_calendar,
    api_event,
    api_favourite,
    api_message,
    api_music_pool,
    api_notification,
    api_profile,
    api_subscription,
    api_support,
    api_webhooks,
    auth,
)
from .core.config import settings
from .core.observability import setup_logging
from .middleware.security_headers import SecurityHeadersMiddleware
from .remote import RemoteClient, RemoteError

setup_logging()
logger = logging.getLogger(__name__)

_BOOT_TS = time.time()

app = FastAPI(title="BeatBookings Live API", default_response_class=ORJSONResponse)


# With cookies, Access-Control-Allow-Origin cannot be "*" unless explicitly allowed.

def _merge_origins(*groups: Iterable[str]) -> list[str]:
    merged: list[str] = []
    for group in groups:
        for origin in group:
            if not origin:
                continue
            normalized = origin.rstrip("/")
            if normalized not in merged:
                merged.append(normalized)
    return merged


ALLOWED_ORIGINS = _merge_origins(settings.CORS_ORIGINS, [settings.FRONTEND_URL])
if settings.CORS_ALLOW_ALL:
    ALLOWED_ORIGINS = ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=not settings.CORS_ALLOW_ALL,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["ETag", "X-Total-Count"],
)
logger.info("CORS origins set to: %s", ALLOWED_ORIGINS)

app.add_middleware(SecurityHeadersMiddleware)
# Event streams must not be buffered; GZip skips text/event-stream
app.add_middleware(GZipMiddleware, minimum_size=1024)


@app.middleware("http")
async def catch_exceptions(request: Request, call_next):
    """Return JSON responses for HTTP errors and log them."""
    try:
        response = await call_next(request)
    except StarletteHTTPException as exc:  # return the original status and detail
        logger.error(
            "HTTP error %s at %s: %s", exc.status_code, request.url.path, exc.detail
        )
        response = ORJSONResponse(
            status_code=exc.status_code, content={"detail": exc.detail}
        )
    except Exception as exc:  # pragma: no cover - generic handler
        logger.exception("Unhandled error: %s", exc)
        response = ORJSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal Server Error"},
        )

    # Ensure the CORS headers are present even when an exception occurs
    origin = request.headers.get("origin")
    if origin and origin in ALLOWED_ORIGINS:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Access-Control-Allow-Credentials"] = "true"
        if "Vary" not in response.headers:
            response.headers["Vary"] = "Origin"

    return response


@app.exception_handler(RemoteError)
async def remote_exception_handler(request: Request, exc: RemoteError):
    """Remote failures nobody handled closer to the call site."""
    logger.error("Remote error at %s: %s", request.url.path, exc.to_dict())
    code = status.HTTP_503_SERVICE_UNAVAILABLE if exc.status_code == 503 else status.HTTP_502_BAD_GATEWAY
    return ORJSONResponse(
        status_code=code,
        content={"detail": {"message": exc.message, "code": exc.code}},
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Return validation errors with details and log them for debugging.

    A multipart upload without its file gets a readable message.
    """
    errors = exc.errors()
    logger.warning("Validation error at %s: %s", request.url.path, errors)

    for err in errors:
        if tuple(err.get("loc") or ()) == ("body", "file"):
            return ORJSONResponse(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                content={
                    "detail": {
                        "message": "No file provided",
                        "field_errors": {"file": "required"},
                    }
                },
            )

    return ORJSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"detail": _jsonable_errors(errors)},
    )


def _jsonable_errors(errors: list) -> list:
    # pydantic may put the raw exception into ctx
    cleaned = []
    for err in errors:
        err = dict(err)
        ctx = err.get("ctx")
        if isinstance(ctx, dict):
            err["ctx"] = {k: str(v) for k, v in ctx.items()}
        cleaned.append(err)
    return cleaned


@app.on_event("startup")
async def open_http_client() -> None:
    """One pooled outbound client for the backend-as-a-service."""
    app.state.http = httpx.AsyncClient(timeout=settings.REMOTE_TIMEOUT_SECONDS)
    logger.info("Remote backend: %s", settings.SUPABASE_URL)


@app.on_event("shutdown")
async def close_http_client() -> None:
    http = getattr(app.state, "http", None)
    if http is not None:
        logger.info("Closing outbound HTTP client")
        await http.aclose()


@app.get("/healthz/live", tags=["health"])
async def health_live():
    """Liveness check: process can respond; does not touch the remote."""
    return {
        "status": "ok",
        "kind": "live",
        "uptime_s": round(time.time() - _BOOT_TS, 1),
        "pid": os.getpid(),
    }


@app.get("/healthz/ready", tags=["health"])
async def health_ready(request: Request):
    """Readiness check: one round trip to the remote REST gateway."""
    http = getattr(request.app.state, "http", None)
    if http is None:
        return ORJSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "error", "kind": "ready", "ready": False, "reason": "starting"},
            headers={"Cache-Control": "no-store"},
        )
    started = time.perf_counter()
    result = await RemoteClient(http, settings).ping()
    ping_ms = round((time.perf_counter() - started) * 1000.0, 1)
    ready = result.ok
    return ORJSONResponse(
        status_code=200 if ready else 503,
        content={
            "status": "ok" if ready else "error",
            "kind": "ready",
            "ready": ready,
            "reason": "ok" if ready else "remote_unavailable",
            "error": None if ready else result.error.message,
            "remote_ping_ms": ping_ms,
            "uptime_s": round(time.time() - _BOOT_TS, 1),
        },
        headers={"Cache-Control": "no-store"},
    )


api_prefix = settings.API_V1_STR  # usually something like "/api/v1"


# ─── AUTH ROUTES (no version prefix) ────────────────────────────────────────────────
app.include_router(auth.router, prefix="/auth", tags=["auth"])

# ─── ADMIN CONSOLE AND PROVIDER CALLBACKS (no version prefix) ──────────────────────
app.include_router(api_admin.router, prefix="", tags=["admin"])
app.include_router(api_webhooks.router, prefix="/webhooks", tags=["webhooks"])


# ─── BOOKING LIFECYCLE ───────────────────────────────────────────────────────────────
app.include_router(
    api_booking_request.router,
    prefix=f"{api_prefix}/booking-requests",
    tags=["booking-requests"],
)
app.include_router(api_booking.router, prefix=f"{api_prefix}/bookings", tags=["bookings"])
app.include_router(api_calendar.router, prefix=f"{api_prefix}/calendar", tags=["calendar"])


# ─── MESSAGING ───────────────────────────────────────────────────────────────────────
app.include_router(api_message.router, prefix=f"{api_prefix}/messages", tags=["messages"])
app.include_router(api_support.router, prefix=f"{api_prefix}/support", tags=["support"])
app.include_router(
    api_notification.router,
    prefix=f"{api_prefix}/notifications",
    tags=["notifications"],
)


# ─── DISCOVERY, PROFILES AND MEDIA ───────────────────────────────────────────────────
app.include_router(api_artist.router, prefix=f"{api_prefix}/artists", tags=["artists"])
app.include_router(api_profile.router, prefix=f"{api_prefix}/profiles", tags=["profiles"])
app.include_router(api_favourite.router, prefix=f"{api_prefix}/favourites", tags=["favourites"])
app.include_router(api_music_pool.router, prefix=f"{api_prefix}/music-pool", tags=["music-pool"])
app.include_router(
    api_subscription.router,
    prefix=f"{api_prefix}/subscriptions",
    tags=["subscriptions"],
)


# ─── EVENTS AND ANNOUNCEMENTS ────────────────────────────────────────────────────────
app.include_router(api_event.router, prefix=f"{api_prefix}/events", tags=["events"])
app.include_router(
    api_announcement.router,
    prefix=f"{api_prefix}/announcements",
    tags=["announcements"],
)


# ─── A simple root check ─────────────────────────────────────────────────────────────
@app.get("/")
async def root():
    return {"message": "Welcome to BeatBookings Live API"}
