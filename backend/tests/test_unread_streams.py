import asyncio
import json

from beatbookings.remote import RemoteError
from beatbookings.services.streams import change_token, unread_events, unread_response


def collect(events):
    async def run():
        return [chunk async for chunk in events]

    return asyncio.run(run())


def test_unread_response_sets_etag_and_honours_if_none_match():
    resp = unread_response("support:u1", 3, None)
    assert resp.status_code == 200
    assert json.loads(resp.body) == {"count": 3}
    etag = resp.headers["etag"]
    assert etag.startswith('W/"')
    assert resp.headers["cache-control"] == "no-cache, private"

    cached = unread_response("support:u1", 3, etag)
    assert cached.status_code == 304
    assert cached.headers["etag"] == etag
    assert not cached.body

    changed = unread_response("support:u1", 4, etag)
    assert changed.status_code == 200
    assert changed.headers["etag"] != etag


def test_change_token_depends_on_scope():
    assert change_token("support:u1", 1) != change_token("support:u2", 1)
    assert change_token("admin", 1) == change_token("admin", 1)


def test_stream_sends_hello_then_updates_only_on_change():
    counts = iter([0, 0, 2, 2, 1])

    async def poll():
        return next(counts)

    chunks = collect(unread_events(poll, interval=0, heartbeat=3600, max_polls=4))
    assert chunks[0] == 'event: hello\ndata: {"count": 0}\n\n'
    assert chunks[1:] == [
        'event: update\ndata: {"count": 2}\n\n',
        'event: update\ndata: {"count": 1}\n\n',
    ]


def test_stream_emits_keepalive_when_idle():
    async def poll():
        return 5

    chunks = collect(unread_events(poll, interval=0, heartbeat=0, max_polls=2))
    assert chunks[0].startswith("event: hello")
    assert all(c.startswith(": keepalive") for c in chunks[1:])
    assert len(chunks) == 3


def test_stream_survives_a_failed_poll():
    results = iter([3, RemoteError("timeout", code="unavailable", status_code=503), 3, 4])

    async def poll():
        value = next(results)
        if isinstance(value, Exception):
            raise value
        return value

    chunks = collect(unread_events(poll, interval=0, heartbeat=3600, max_polls=3))
    assert chunks == [
        'event: hello\ndata: {"count": 3}\n\n',
        'event: update\ndata: {"count": 4}\n\n',
    ]


def test_stream_hello_is_null_when_first_poll_fails():
    results = iter([RemoteError("down", status_code=503), 2])

    async def poll():
        value = next(results)
        if isinstance(value, Exception):
            raise value
        return value

    chunks = collect(unread_events(poll, interval=0, heartbeat=3600, max_polls=1))
    assert chunks == [
        'event: hello\ndata: {"count": null}\n\n',
        'event: update\ndata: {"count": 2}\n\n',
    ]
