"""SSE subscriber stream — one generator per connected browser.

Learn: The generator owns the whole connection lifecycle:
1. Register a fresh handle (the subscriber is now live)
2. Write the confirmation event to that handle only
3. Yield frames until the handle is closed (shutdown, failed write)
   or the client goes away (Starlette cancels the generator)
4. Always unregister + close in `finally`

Registration happens inside the generator, so a response that is never
started never leaves a dangling registry entry.
"""

from collections.abc import AsyncIterator
from contextlib import aclosing
from typing import Optional

import structlog

from relayhook.realtime.handle import QueueHandle, encode_event
from relayhook.realtime.registry import ConnectionRegistry
from relayhook.schemas.message import utc_now_iso

logger = structlog.get_logger()

CONNECTED_MESSAGE = "Connected to the relay server"


def connection_event() -> dict:
    return {
        "type": "connection",
        "message": CONNECTED_MESSAGE,
        "timestamp": utc_now_iso(),
    }


async def subscriber_stream(
    registry: ConnectionRegistry,
    *,
    queue_size: int = 100,
    heartbeat_seconds: Optional[float] = None,
) -> AsyncIterator[str]:
    handle = QueueHandle(maxsize=queue_size)
    connection_id = registry.register(handle)
    try:
        handle.write(encode_event(connection_event()))
        async with aclosing(handle.frames(heartbeat_seconds=heartbeat_seconds)) as frames:
            async for frame in frames:
                yield frame
    except Exception as e:
        # A broken stream is just another way of disconnecting.
        logger.warning("relay.stream_error", connection_id=connection_id, error=str(e))
    finally:
        registry.unregister(connection_id)
        handle.close()
