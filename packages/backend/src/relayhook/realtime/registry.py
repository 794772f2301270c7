"""Connection registry — the authoritative set of live subscribers.

Learn: The registry maps a connection ID to its handle. An ID is present
only while its handle is open and has not failed a write. Every method is
synchronous: under a single event loop nothing else can run while one of
them executes, so a snapshot never sees a half-applied register/unregister.

There is no capacity limit. In practice the ceiling is the number of
concurrent HTTP connections uvicorn and the process file-descriptor limit
(`ulimit -n`) allow.
"""

import uuid

import structlog

from relayhook.realtime.handle import SubscriberHandle

logger = structlog.get_logger()


class ConnectionRegistry:
    """Live subscriber connections keyed by a process-unique ID."""

    def __init__(self):
        self._connections: dict[str, SubscriberHandle] = {}

    def register(self, handle: SubscriberHandle) -> str:
        """Store handle as active and return its new connection ID."""
        connection_id = str(uuid.uuid4())
        self._connections[connection_id] = handle
        logger.info(
            "relay.subscriber_connected",
            connection_id=connection_id,
            total_connections=len(self._connections),
        )
        return connection_id

    def unregister(self, connection_id: str) -> bool:
        """Remove the entry if present. Returns False when it was already gone."""
        handle = self._connections.pop(connection_id, None)
        if handle is None:
            return False
        logger.info(
            "relay.subscriber_disconnected",
            connection_id=connection_id,
            total_connections=len(self._connections),
        )
        return True

    def snapshot(self) -> list[tuple[str, SubscriberHandle]]:
        return list(self._connections.items())

    def count(self) -> int:
        return len(self._connections)

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._connections

    def close_all(self) -> int:
        """Close every handle and empty the registry. Returns how many were closed.

        Best-effort: a handle that fails to close is logged and skipped.
        """
        entries = self.snapshot()
        self._connections.clear()
        for connection_id, handle in entries:
            try:
                handle.close()
            except Exception as e:
                logger.warning(
                    "relay.close_failed",
                    connection_id=connection_id,
                    error=str(e),
                )
        if entries:
            logger.info("relay.connections_closed", count=len(entries))
        return len(entries)
