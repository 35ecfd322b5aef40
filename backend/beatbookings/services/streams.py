"""Unread counters: conditional GET and Server-Sent Events.

The web client refreshed unread badges every few seconds. Here the same
cadence runs server side: one poll loop per open stream, owned by that
stream and stopped when the client goes away.
"""

import asyncio
import hashlib
import json
import logging
import time
from typing import AsyncIterator, Awaitable, Callable, Optional

from fastapi import Request, Response, status
from fastapi.responses import StreamingResponse

from ..remote import RemoteError

logger = logging.getLogger(__name__)

UNREAD_HEADERS = {
    "Cache-Control": "no-cache, private",
    "Vary": "If-None-Match, Authorization",
}


def change_token(*parts: object) -> str:
    basis = ":".join(str(p) for p in parts)
    return f'W/"{hashlib.sha1(basis.encode()).hexdigest()}"'


def unread_response(scope: str, count: int, if_none_match: Optional[str]) -> Response:
    """JSON ``{"count": n}`` with a weak ETag; 304 when the client is current."""
    etag_value = change_token(scope, int(count))
    headers = {"ETag": etag_value, **UNREAD_HEADERS}
    if if_none_match and if_none_match.strip() == etag_value:
        return Response(status_code=status.HTTP_304_NOT_MODIFIED, headers=headers)
    return Response(content=json.dumps({"count": int(count)}), media_type="application/json", headers=headers)


async def _poll_or_keep(poll: Callable[[], Awaitable[int]], last: Optional[int]) -> Optional[int]:
    try:
        return await poll()
    except RemoteError as exc:
        logger.warning("Unread poll failed, keeping %s: %s", last, exc)
        return last


async def unread_events(
    poll: Callable[[], Awaitable[int]],
    *,
    interval: float,
    heartbeat: float,
    request: Optional[Request] = None,
    max_polls: Optional[int] = None,
) -> AsyncIterator[str]:
    """Yield ``hello`` then an ``update`` whenever the polled count changes.

    A failed poll keeps the last known count; ``hello`` carries ``null`` when
    the very first poll fails.
    """
    count = await _poll_or_keep(poll, None)
    yield f"event: hello\ndata: {json.dumps({'count': count})}\n\n"
    last_emit_ts = time.monotonic()
    polls = 0
    while max_polls is None or polls < max_polls:
        await asyncio.sleep(interval)
        if request is not None and await request.is_disconnected():
            logger.debug("Unread stream closed by client")
            return
        polls += 1
        new_count = await _poll_or_keep(poll, count)
        if new_count != count:
            count = new_count
            yield f"event: update\ndata: {json.dumps({'count': count})}\n\n"
            last_emit_ts = time.monotonic()
        elif time.monotonic() - last_emit_ts >= heartbeat:
            yield f": keepalive {int(time.time())}\n\n"
            last_emit_ts = time.monotonic()


def sse_response(events: AsyncIterator[str]) -> StreamingResponse:
    return StreamingResponse(
        events,
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache, private",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",
            "Vary": "Authorization, Cookie",
        },
    )
