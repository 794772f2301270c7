"""Broadcast engine — fan one message out to every registered subscriber.

Learn: Delivery is fire-and-forget, at most once per subscriber:
1. Take a snapshot of the registry (synchronous, so it is consistent)
2. Encode the message once as an SSE frame
3. Write it to each handle inside its own try/except

A failed write (closed handle, full buffer, anything else) removes and
closes that subscriber, then moves on. The producer never sees delivery
errors. The return value counts attempts, not confirmed deliveries.
"""

from typing import Any

import structlog

from relayhook.realtime.handle import SubscriberHandle, encode_event
from relayhook.realtime.registry import ConnectionRegistry
from relayhook.schemas.message import InboundMessage

logger = structlog.get_logger()


class Broadcaster:
    def __init__(self, registry: ConnectionRegistry):
        self.registry = registry

    def broadcast(self, message: InboundMessage) -> int:
        """Deliver an inbound message to all subscribers. Returns attempts made."""
        return self.broadcast_payload(message.to_event())

    def broadcast_payload(self, payload: dict[str, Any]) -> int:
        frame = encode_event(payload)
        entries = self.registry.snapshot()
        failed = 0

        for connection_id, handle in entries:
            try:
                handle.write(frame)
            except Exception as e:
                failed += 1
                logger.warning(
                    "relay.delivery_failed",
                    connection_id=connection_id,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                self._discard(connection_id, handle)

        logger.info(
            "relay.broadcast",
            attempted=len(entries),
            failed=failed,
        )
        return len(entries)

    def _discard(self, connection_id: str, handle: SubscriberHandle) -> None:
        """Drop a subscriber whose write failed and end its stream."""
        self.registry.unregister(connection_id)
        try:
            handle.close()
        except Exception as e:
            logger.warning("relay.close_failed", connection_id=connection_id, error=str(e))
