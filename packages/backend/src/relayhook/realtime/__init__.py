"""Real-time infrastructure — connection registry + SSE fan-out.

Learn: Messages flow through three pieces:
1. ConnectionRegistry — who is connected right now
2. Broadcaster — writes one message to every registered handle
3. subscriber_stream — drains one handle into an SSE response

Everything here runs on a single event loop. Registry mutations and
broadcasts never await, so no locks are needed.
"""

from relayhook.realtime.broadcast import Broadcaster
from relayhook.realtime.handle import QueueHandle, SubscriberHandle
from relayhook.realtime.registry import ConnectionRegistry

__all__ = ["Broadcaster", "ConnectionRegistry", "QueueHandle", "SubscriberHandle"]
