"""
ElevenLabs TTS Service

Thin proxy to the ElevenLabs text-to-speech endpoint. Tuning is fixed for
low-latency playback in the widget (see voice_constants); nothing is
cached because every synthesis is unique to its input text.
"""

import time
from dataclasses import dataclass
from typing import Dict, Optional

import httpx
from durmah.core.config import settings
from durmah.core.errors import ConfigurationError, ProviderError
from durmah.core.logging import get_logger
from durmah.core.voice_constants import (
    ELEVENLABS_OPTIMIZE_STREAMING_LATENCY,
    ELEVENLABS_OUTPUT_FORMAT,
    ELEVENLABS_VOICE_SETTINGS,
)

logger = get_logger(__name__)


@dataclass
class TTSSynthesisResult:
    """Result of TTS synthesis."""

    audio_data: bytes
    content_type: str
    characters_used: int = 0
    latency_ms: Optional[int] = None
    voice_id: str = ""


class ElevenLabsService:
    """
    ElevenLabs TTS service.

    Both the API key and the voice id are required; either one missing is
    a configuration error for the request, not a silent fallback.
    """

    TTS_ENDPOINT = "/text-to-speech"

    def __init__(
        self,
        api_key: Optional[str] = None,
        voice_id: Optional[str] = None,
        model_id: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.ELEVENLABS_API_KEY
        self.voice_id = voice_id if voice_id is not None else settings.ELEVENLABS_VOICE_ID
        self.model_id = model_id or settings.ELEVENLABS_MODEL
        self.base_url = base_url or settings.ELEVENLABS_BASE_URL
        self.timeout = timeout or settings.ELEVENLABS_TIMEOUT_SEC

    def is_enabled(self) -> bool:
        """Check if ElevenLabs is configured."""
        return bool(self.api_key) and bool(self.voice_id)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "xi-api-key": self.api_key or "",
            "Content-Type": "application/json",
            "Accept": "audio/mpeg",
        }

    def _check_configuration(self) -> None:
        missing = [
            name
            for name, value in (("ELEVENLABS_API_KEY", self.api_key), ("ELEVENLABS_VOICE_ID", self.voice_id))
            if not value
        ]
        if missing:
            raise ConfigurationError(f"Missing {', '.join(missing)}")

    async def synthesize(self, text: str) -> TTSSynthesisResult:
        """
        Synthesize text to speech (non-streaming).

        Args:
            text: Text to synthesize

        Returns:
            TTSSynthesisResult with MP3 audio data

        Raises:
            ConfigurationError: API key or voice id not configured
            ProviderError: ElevenLabs answered with a non-success status
        """
        self._check_configuration()

        start_time = time.time()
        url = f"{self.base_url}{self.TTS_ENDPOINT}/{self.voice_id}"
        payload = {
            "text": text,
            "model_id": self.model_id,
            "voice_settings": dict(ELEVENLABS_VOICE_SETTINGS),
        }
        params = {
            "optimize_streaming_latency": ELEVENLABS_OPTIMIZE_STREAMING_LATENCY,
            "output_format": ELEVENLABS_OUTPUT_FORMAT,
        }

        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(url, headers=self._get_headers(), json=payload, params=params)

        if not 200 <= response.status_code < 300:
            logger.error("elevenlabs_tts_failed", status_code=response.status_code, voice_id=self.voice_id)
            raise ProviderError("elevenlabs", response.status_code, response.text)

        audio_data = response.content
        latency_ms = int((time.time() - start_time) * 1000)

        logger.info(
            "elevenlabs_tts_complete",
            voice_id=self.voice_id,
            model_id=self.model_id,
            text_length=len(text),
            audio_size=len(audio_data),
            latency_ms=latency_ms,
        )

        return TTSSynthesisResult(
            audio_data=audio_data,
            content_type="audio/mpeg",
            characters_used=len(text),
            latency_ms=latency_ms,
            voice_id=self.voice_id,
        )
