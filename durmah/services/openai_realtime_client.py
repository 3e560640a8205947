"""
OpenAI Realtime API client

Lightweight helper for issuing ephemeral realtime sessions so the browser
can open its audio session directly with OpenAI without ever seeing the
primary API key.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx
from durmah.core.config import settings
from durmah.core.errors import ConfigurationError, ProviderError
from durmah.core.logging import get_logger
from durmah.core.voice_constants import (
    DURMAH_PERSONA_INSTRUCTIONS,
    INPUT_AUDIO_TRANSCRIPTION,
    REALTIME_MODALITIES,
    TURN_DETECTION,
)

logger = get_logger(__name__)


class OpenAIRealtimeClient:
    """Minimal async client for the OpenAI Realtime sessions endpoint."""

    def __init__(
        self,
        *,
        api_key: Optional[str] = None,
        sessions_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else settings.OPENAI_API_KEY
        self.sessions_url = sessions_url or settings.REALTIME_SESSIONS_URL
        self.timeout = timeout or settings.OPENAI_TIMEOUT_SEC

    def is_enabled(self) -> bool:
        """Return True when realtime access is configured."""

        return bool(self.api_key)

    def build_session_payload(self, *, model: str, voice: str) -> Dict[str, Any]:
        """Fixed session request: persona, modalities and turn detection."""

        return {
            "model": model,
            "voice": voice,
            "modalities": list(REALTIME_MODALITIES),
            "instructions": DURMAH_PERSONA_INSTRUCTIONS,
            "turn_detection": dict(TURN_DETECTION),
            "input_audio_transcription": dict(INPUT_AUDIO_TRANSCRIPTION),
        }

    async def create_session(self, *, model: str, voice: str) -> Dict[str, Any]:
        """Create an ephemeral realtime session.

        Args:
            model: Realtime model id
            voice: Provider voice id

        Returns:
            Parsed JSON payload from the OpenAI Realtime session endpoint

        Raises:
            ConfigurationError: OPENAI_API_KEY is not set
            ProviderError: OpenAI answered with a non-success status
        """

        if not self.is_enabled():
            raise ConfigurationError("Missing OPENAI_API_KEY")

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(
                self.sessions_url,
                headers={
                    "Authorization": f"Bearer {self.api_key}",
                    "Content-Type": "application/json",
                    "OpenAI-Beta": "realtime=v1",
                },
                json=self.build_session_payload(model=model, voice=voice),
            )

        if not 200 <= response.status_code < 300:
            logger.error(
                "realtime_session_create_failed",
                status_code=response.status_code,
                model=model,
            )
            raise ProviderError("openai", response.status_code, response.text)

        data = response.json()
        logger.info("realtime_session_created", model=model, voice=voice)
        return data


def extract_client_secret(session: Dict[str, Any]) -> tuple[Optional[str], Optional[int]]:
    """Pull the short-lived credential and its expiry out of a session payload."""

    client_secret = session.get("client_secret") or {}
    if not isinstance(client_secret, dict):
        client_secret = {}
    token = client_secret.get("value")
    expires_at = session.get("expires_at") or client_secret.get("expires_at")
    return token, expires_at
