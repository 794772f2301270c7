"""Pydantic schemas for relayed messages.

Learn: The wire format uses the producer's field names (`message`, `from`,
`sessionId`); Python code uses `text`, `sender`, `session_id`. Aliases map
between the two.

InboundMessage is frozen and only exists once validation has passed:
- `message` must be a non-blank string
- missing/empty `from` and `timestamp` get their defaults at construction
- `sessionId` is passed through untouched
"""

from datetime import datetime, timezone
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_SENDER = "Bot"
SERVER_SENDER = "Server"
DEFAULT_TEST_MESSAGE = "Test message from the relay server"


def utc_now_iso() -> str:
    """Current UTC time as `2024-05-01T12:00:00.000Z` (JS toISOString shape)."""
    now = datetime.now(timezone.utc).isoformat(timespec="milliseconds")
    return now.replace("+00:00", "Z")


# ─── Inbound (producer → relay → subscribers) ───────────


class InboundMessage(BaseModel):
    """A validated message ready to broadcast."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    text: str = Field(..., alias="message")
    sender: str = Field(DEFAULT_SENDER, alias="from")
    timestamp: str = Field(default_factory=utc_now_iso)
    session_id: Optional[Any] = Field(None, alias="sessionId")  # opaque, passed through

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("message must not be blank")
        return v

    @field_validator("sender", mode="before")
    @classmethod
    def default_sender(cls, v: Any) -> Any:
        return v or DEFAULT_SENDER

    @field_validator("timestamp", mode="before")
    @classmethod
    def default_timestamp(cls, v: Any) -> Any:
        return v or utc_now_iso()

    def to_event(self) -> dict[str, Any]:
        """SSE payload: {message, from, timestamp, sessionId?}."""
        return self.model_dump(by_alias=True, exclude_none=True)


# ─── Direct test broadcast ──────────────────────────────


class DirectBroadcastRequest(BaseModel):
    """Body of POST /test-message; every field is optional."""

    message: Optional[str] = None

    def to_message(self) -> InboundMessage:
        text = self.message if (self.message or "").strip() else DEFAULT_TEST_MESSAGE
        return InboundMessage(
            text=text,
            sender=SERVER_SENDER,
        )


# ─── Outbound (user → relay → sink) ─────────────────────


class SendRequest(BaseModel):
    """User-originated message to forward to the external sink."""

    model_config = ConfigDict(populate_by_name=True)

    message: str = Field(..., min_length=1)
    session_id: Optional[str] = Field(None, alias="sessionId")
    user_id: Optional[str] = Field(None, alias="userId")
