"""Outbound send — forward a user message to the external sink.

Learn: The chat UI posts here instead of calling the sink directly, so
the sink URL lives in server config (RELAY_OUTBOUND_WEBHOOK_URL) and
never has to be exposed to the browser.
"""

from fastapi import APIRouter, Depends, HTTPException

from relayhook.api.deps import get_forwarder
from relayhook.schemas.message import SendRequest
from relayhook.services.forwarder import (
    ForwardError,
    ForwarderNotConfiguredError,
    OutboundForwarder,
)

router = APIRouter()


@router.post("/send")
async def send_message(
    body: SendRequest,
    forwarder: OutboundForwarder = Depends(get_forwarder),
):
    """Forward a user-originated message to the configured webhook sink."""
    try:
        status = await forwarder.forward(
            body.message,
            session_id=body.session_id,
            user_id=body.user_id,
        )
    except ForwarderNotConfiguredError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except ForwardError as e:
        raise HTTPException(status_code=502, detail=str(e))

    return {"success": True, "status": status}
