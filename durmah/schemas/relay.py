"""Relay Event Schemas.

Pydantic schemas for the Socket.IO events routed by the relay, so the
payloads the browser widget receives keep a consistent shape.

Event Types:
- welcome: one-time greeting sent to a newly authenticated connection
- chat_message (in): free-text message from the student
- typing (out): bare boolean indicator
- response (out): canned acknowledgment of a chat message
- mood_update (in): bare mood string
- mood_response (out): supportive reply for a mood
- error (out): bare string describing a per-event failure
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict


class ChatMessageIn(BaseModel):
    """Inbound `chat_message` payload."""

    model_config = ConfigDict(extra="ignore", strict=True)

    message: str


class TimestampedMessage(BaseModel):
    """Outbound `{message, timestamp}` payload shared by welcome/response/mood_response."""

    message: str
    timestamp: str


def _now_iso(timestamp: Optional[datetime] = None) -> str:
    if timestamp is None:
        timestamp = datetime.now(timezone.utc)
    return timestamp.isoformat().replace("+00:00", "Z")


def create_message_event(message: str, timestamp: Optional[datetime] = None) -> Dict[str, Any]:
    """Create a `{message, timestamp}` event dict.

    Args:
        message: Text shown to the student
        timestamp: Event timestamp (defaults to now, UTC)

    Returns:
        Dictionary ready for JSON serialization
    """
    return TimestampedMessage(message=message, timestamp=_now_iso(timestamp)).model_dump()
