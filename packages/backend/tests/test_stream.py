"""SSE subscriber stream lifecycle tests.

Learn: subscriber_stream() is driven directly here rather than through
HTTP, because an in-process ASGI transport buffers the whole body and an
SSE body never ends. aclose() simulates the browser disconnecting. The
GET /events handler is called directly for the same reason.
"""

import json

import pytest

from relayhook.api.events import events
from relayhook.realtime.broadcast import Broadcaster
from relayhook.realtime.handle import HEARTBEAT_FRAME
from relayhook.realtime.stream import CONNECTED_MESSAGE, subscriber_stream
from relayhook.schemas.message import InboundMessage


def _decode(frame: str) -> dict:
    assert frame.startswith("data: ") and frame.endswith("\n\n")
    return json.loads(frame[len("data: "):])


@pytest.mark.asyncio
async def test_stream_registers_and_sends_confirmation(registry):
    stream = subscriber_stream(registry)

    event = _decode(await stream.__anext__())
    assert event["type"] == "connection"
    assert event["message"] == CONNECTED_MESSAGE
    assert "timestamp" in event
    assert registry.count() == 1

    await stream.aclose()


@pytest.mark.asyncio
async def test_confirmation_goes_only_to_new_subscriber(registry, handle_factory):
    existing = handle_factory()
    registry.register(existing)

    stream = subscriber_stream(registry)
    await stream.__anext__()

    assert existing.frames == []
    await stream.aclose()


@pytest.mark.asyncio
async def test_stream_relays_broadcasts(registry):
    stream = subscriber_stream(registry)
    await stream.__anext__()

    Broadcaster(registry).broadcast(
        InboundMessage.model_validate({"message": "hello", "from": "n8n", "sessionId": "s-1"})
    )

    event = _decode(await stream.__anext__())
    assert event["message"] == "hello"
    assert event["from"] == "n8n"
    assert event["sessionId"] == "s-1"

    await stream.aclose()


@pytest.mark.asyncio
async def test_disconnect_unregisters(registry):
    stream = subscriber_stream(registry)
    await stream.__anext__()
    assert registry.count() == 1

    await stream.aclose()
    assert registry.count() == 0


@pytest.mark.asyncio
async def test_shutdown_ends_stream(registry):
    """close_all() makes every open stream finish on its own."""
    streams = [subscriber_stream(registry) for _ in range(3)]
    for s in streams:
        await s.__anext__()
    assert registry.count() == 3

    registry.close_all()

    for s in streams:
        with pytest.raises(StopAsyncIteration):
            await s.__anext__()
    assert registry.count() == 0


@pytest.mark.asyncio
async def test_overflowing_stream_is_dropped_and_ends(registry):
    stream = subscriber_stream(registry, queue_size=1)
    await stream.__anext__()

    engine = Broadcaster(registry)
    engine.broadcast(InboundMessage(text="fills the buffer"))
    engine.broadcast(InboundMessage(text="overflows"))
    assert registry.count() == 0

    with pytest.raises(StopAsyncIteration):
        await stream.__anext__()


@pytest.mark.asyncio
async def test_idle_stream_sends_heartbeat(registry):
    stream = subscriber_stream(registry, heartbeat_seconds=0.01)
    await stream.__anext__()

    assert await stream.__anext__() == HEARTBEAT_FRAME
    await stream.aclose()


@pytest.mark.asyncio
async def test_subscribers_get_distinct_ids(registry):
    a = subscriber_stream(registry)
    b = subscriber_stream(registry)
    await a.__anext__()
    await b.__anext__()

    ids = [cid for cid, _ in registry.snapshot()]
    assert len(set(ids)) == 2

    await a.aclose()
    await b.aclose()


# ─── GET /events route ───────────────────────────────────


@pytest.mark.asyncio
async def test_events_route_returns_sse_response(registry, settings):
    response = await events(registry=registry, settings=settings)

    assert response.media_type == "text/event-stream"
    assert response.headers["content-type"].startswith("text/event-stream")
    assert response.headers["cache-control"] == "no-cache"
    assert response.headers["connection"] == "keep-alive"

    body = response.body_iterator
    event = _decode(await body.__anext__())
    assert event["type"] == "connection"
    assert registry.count() == 1

    await body.aclose()
    assert registry.count() == 0


@pytest.mark.asyncio
async def test_events_route_uses_subscriber_settings(registry, settings):
    tuned = settings.model_copy(update={"subscriber_queue_size": 1, "heartbeat_seconds": 0.01})
    response = await events(registry=registry, settings=tuned)
    body = response.body_iterator
    await body.__anext__()

    assert await body.__anext__() == HEARTBEAT_FRAME

    engine = Broadcaster(registry)
    engine.broadcast(InboundMessage(text="fills the buffer"))
    engine.broadcast(InboundMessage(text="overflows"))
    assert registry.count() == 0

    await body.aclose()
