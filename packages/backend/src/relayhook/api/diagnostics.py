"""Direct test broadcast — push a message without a producer.

Learn: Handy for checking the UI wiring: POST /test-message (optionally
with {"message": "..."}) and every connected browser should show it,
attributed to "Server".
"""

from typing import Optional

from fastapi import APIRouter, Depends

from relayhook.api.deps import get_broadcaster
from relayhook.realtime.broadcast import Broadcaster
from relayhook.schemas.message import DirectBroadcastRequest

router = APIRouter()


@router.post("/test-message")
async def send_test_message(
    body: Optional[DirectBroadcastRequest] = None,
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Broadcast a synthesized message from the relay itself."""
    message = (body or DirectBroadcastRequest()).to_message()
    notified = broadcaster.broadcast(message)
    return {
        "success": True,
        "message": "Test message sent",
        "data": message.to_event(),
        "clientsNotified": notified,
    }
