"""Request/response schemas for the realtime-session and TTS proxies."""

from typing import Optional

from pydantic import BaseModel, ConfigDict


class RealtimeSessionRequest(BaseModel):
    """Optional overrides for the realtime session."""

    model_config = ConfigDict(extra="ignore")

    model: Optional[str] = None
    voice: Optional[str] = None


class RealtimeSessionResponse(BaseModel):
    """Only what the browser needs; the provider payload is never forwarded."""

    token: Optional[str] = None
    model: str
    voice: str
    expires_at: Optional[int] = None


class TTSRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    text: Optional[str] = None
