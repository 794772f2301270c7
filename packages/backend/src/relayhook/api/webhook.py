"""Webhook receiver — the ingestion side of the relay.

Learn: The producer (an n8n workflow, a bot, curl) POSTs
{message, from?, timestamp?, sessionId?}. The handler:
1. Parses the body and validates it into an InboundMessage
2. Rejects anything without a usable `message` (400, nothing broadcast)
3. Broadcasts to every SSE subscriber
4. Reports how many subscribers a write was attempted for

The body is parsed by hand instead of via a typed parameter so that
invalid payloads get the relay's {error, received} shape rather than
FastAPI's 422 format.
"""

import json

import structlog
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from relayhook.api.deps import get_broadcaster
from relayhook.realtime.broadcast import Broadcaster
from relayhook.schemas.message import InboundMessage

logger = structlog.get_logger()
router = APIRouter()


def _bad_request(error: str, received) -> JSONResponse:
    return JSONResponse(status_code=400, content={"error": error, "received": received})


@router.post("/webhook")
async def receive_webhook(
    request: Request,
    broadcaster: Broadcaster = Depends(get_broadcaster),
):
    """Receive a message from the producer and relay it to all subscribers."""
    try:
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            return _bad_request("Request body must be a JSON object", None)

        logger.info("webhook.received", body=body)

        if not isinstance(body, dict):
            return _bad_request("Request body must be a JSON object", body)
        text = body.get("message")
        if not text or (isinstance(text, str) and not text.strip()):
            return _bad_request("Message is required", body)

        try:
            message = InboundMessage.model_validate(body)
        except ValidationError as e:
            logger.info("webhook.invalid", error=str(e))
            return _bad_request("Invalid message payload", body)

        notified = broadcaster.broadcast(message)
        logger.info(
            "webhook.relayed",
            clients_notified=notified,
            sender=message.sender,
            session_id=message.session_id,
        )

        return {
            "success": True,
            "message": "Message received and relayed to subscribers",
            "clientsNotified": notified,
        }

    except Exception as e:
        logger.exception("webhook.error")
        return JSONResponse(
            status_code=500,
            content={"error": "Internal server error", "details": str(e)},
        )
