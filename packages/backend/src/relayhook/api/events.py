"""SSE endpoint — the subscription side of the relay.

Learn: GET /events returns a never-ending text/event-stream response.
The body is produced by subscriber_stream(), which registers the
connection, sends the confirmation event and then relays broadcasts.
When the browser disconnects Starlette cancels the generator, whose
`finally` block unregisters the connection.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import StreamingResponse

from relayhook.api.deps import get_registry, get_settings
from relayhook.config import Settings
from relayhook.realtime.registry import ConnectionRegistry
from relayhook.realtime.stream import subscriber_stream

router = APIRouter()

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # nginx: don't buffer the stream
}


@router.get("/events")
async def events(
    registry: ConnectionRegistry = Depends(get_registry),
    settings: Settings = Depends(get_settings),
):
    """Server-Sent Events stream for the chat UI."""
    stream = subscriber_stream(
        registry,
        queue_size=settings.subscriber_queue_size,
        heartbeat_seconds=settings.heartbeat_seconds,
    )
    return StreamingResponse(stream, media_type="text/event-stream", headers=SSE_HEADERS)
