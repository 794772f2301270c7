"""Subscriber handles — the writable end of one SSE connection.

Learn: A handle is what the registry stores for each subscriber. Writers
(the broadcaster, the confirmation message) call write(); exactly one
reader (the SSE response generator) drains it via frames().

QueueHandle buffers frames in a bounded asyncio.Queue:
- write() never awaits — put_nowait() either succeeds or raises
- a full buffer means the subscriber is too slow, so the write fails
  and the broadcaster drops that subscriber instead of blocking
- close() wakes the reader with a sentinel so the stream ends cleanly
"""

import asyncio
import json
from collections.abc import AsyncIterator
from typing import Any, Optional, Protocol

HEARTBEAT_FRAME = ": keep-alive\n\n"

_CLOSED = object()


class HandleClosedError(Exception):
    pass


class SubscriberOverflowError(Exception):
    pass


def encode_event(payload: dict[str, Any]) -> str:
    """Serialize a payload as one SSE data frame."""
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"


class SubscriberHandle(Protocol):
    """Anything the registry can write frames to and close."""

    @property
    def closed(self) -> bool: ...

    def write(self, frame: str) -> None: ...

    def close(self) -> None: ...


class QueueHandle:
    """Bounded in-memory buffer between writers and one SSE response."""

    def __init__(self, maxsize: int = 100):
        self._queue: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def pending(self) -> int:
        return self._queue.qsize()

    def write(self, frame: str) -> None:
        if self._closed:
            raise HandleClosedError("subscriber handle is closed")
        try:
            self._queue.put_nowait(frame)
        except asyncio.QueueFull:
            raise SubscriberOverflowError(
                f"subscriber buffer full ({self._queue.maxsize} frames pending)"
            ) from None

    def close(self) -> None:
        """Mark closed and wake the reader. Idempotent."""
        if self._closed:
            return
        self._closed = True
        # Pending frames are discarded so the sentinel always fits.
        while not self._queue.empty():
            self._queue.get_nowait()
        self._queue.put_nowait(_CLOSED)

    async def frames(self, heartbeat_seconds: Optional[float] = None) -> AsyncIterator[str]:
        """Yield buffered frames until the handle is closed.

        When heartbeat_seconds is set and nothing arrives in that window,
        a comment frame is yielded so proxies keep the connection open.
        """
        while True:
            try:
                item = await asyncio.wait_for(self._queue.get(), timeout=heartbeat_seconds)
            except asyncio.TimeoutError:
                yield HEARTBEAT_FRAME
                continue
            if item is _CLOSED:
                return
            yield item
