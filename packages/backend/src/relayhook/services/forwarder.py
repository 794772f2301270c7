"""Outbound forwarder — user messages → external webhook sink.

Learn: This is the other half of the relay. The chat UI posts what the
user typed, and the relay forwards it to the configured sink (typically
an n8n "receive message" webhook). The sink's reply comes back later
through POST /webhook and reaches the UI over SSE.

A fresh httpx.AsyncClient is opened per call; forwarding is rare enough
that pooling buys nothing. Tests inject an httpx.MockTransport.
"""

import time
from typing import Optional

import httpx
import structlog

from relayhook.schemas.message import utc_now_iso

logger = structlog.get_logger()

DEFAULT_USER_ID = "user-001"


class ForwarderNotConfiguredError(Exception):
    pass


class ForwardError(Exception):
    pass


class OutboundForwarder:
    def __init__(
        self,
        url: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.url = url
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.url)

    def build_payload(
        self,
        text: str,
        *,
        session_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> dict:
        return {
            "message": text,
            "timestamp": utc_now_iso(),
            "userId": user_id or DEFAULT_USER_ID,
            "sessionId": session_id or f"session-{int(time.time() * 1000)}",
        }

    async def forward(
        self,
        text: str,
        *,
        session_id: Optional[str] = None,
        user_id: Optional[str] = None,
    ) -> int:
        """POST the message to the sink. Returns the sink's status code."""
        if not self.configured:
            raise ForwarderNotConfiguredError("No outbound webhook URL configured")

        payload = self.build_payload(text, session_id=session_id, user_id=user_id)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout, transport=self._transport
            ) as client:
                resp = await client.post(self.url, json=payload)
        except httpx.HTTPError as e:
            logger.warning("forwarder.unreachable", url=self.url, error=str(e))
            raise ForwardError(f"Sink unreachable: {e}") from e

        if resp.is_error:
            logger.warning(
                "forwarder.rejected", url=self.url, status=resp.status_code
            )
            raise ForwardError(f"Sink responded with HTTP {resp.status_code}")

        logger.info(
            "forwarder.sent",
            url=self.url,
            status=resp.status_code,
            session_id=payload["sessionId"],
        )
        return resp.status_code
