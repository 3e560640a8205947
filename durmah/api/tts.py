"""
Text-to-speech proxy.

Forwards text to ElevenLabs and returns the MP3 audio base64-encoded, the
shape the widget's audio player decodes.
"""

import base64
from typing import Optional

from durmah.core.config import settings
from durmah.core.errors import CORS_HEADERS, ConfigurationError, ProviderError, cors_json
from durmah.core.limiter import limiter
from durmah.core.logging import get_logger
from durmah.core.request_id import get_request_id
from durmah.schemas.proxy import TTSRequest
from durmah.services.elevenlabs_service import ElevenLabsService
from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse, Response

router = APIRouter(tags=["tts"])
logger = get_logger(__name__)


@router.options("/tts", include_in_schema=False)
async def tts_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


@router.api_route("/tts", methods=["GET", "PUT", "PATCH", "DELETE"], include_in_schema=False)
async def tts_method_not_allowed() -> Response:
    return PlainTextResponse(
        "Method Not Allowed",
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        headers=CORS_HEADERS,
    )


@router.post(
    "/tts",
    summary="Synthesize speech from text",
    response_class=Response,
)
@limiter.limit(settings.RATE_LIMIT)
async def synthesize_speech(request: Request, payload: Optional[TTSRequest] = None):
    """
    Synthesize speech with ElevenLabs.

    Returns:
        200 with base64-encoded MP3 (`Content-Type: audio/mpeg`, not cached);
        400 for missing text; 500 for missing configuration; provider
        status passthrough on upstream failure.
    """
    text = payload.text if payload else None
    if not text or not text.strip():
        return cors_json({"error": "Missing text"}, status.HTTP_400_BAD_REQUEST)

    service = ElevenLabsService()

    try:
        result = await service.synthesize(text)
    except (ConfigurationError, ProviderError):
        raise
    except Exception as e:
        logger.error("tts_error", error=str(e), text_length=len(text), request_id=get_request_id(request))
        return cors_json({"error": str(e)}, status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(
        "tts_synthesized",
        voice_id=result.voice_id,
        characters=result.characters_used,
        latency_ms=result.latency_ms,
        request_id=get_request_id(request),
    )
    return Response(
        content=base64.b64encode(result.audio_data),
        media_type=result.content_type,
        headers={
            **CORS_HEADERS,
            "Cache-Control": "no-store",
            "Content-Transfer-Encoding": "base64",
        },
    )
