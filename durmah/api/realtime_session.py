"""
Realtime session issuer.

Exchanges the server-side OpenAI key for a short-lived client credential
the browser uses to open its audio session directly with OpenAI.
"""

from typing import Optional

from durmah.core.config import settings
from durmah.core.errors import CORS_HEADERS, ConfigurationError, ProviderError, cors_json
from durmah.core.limiter import limiter
from durmah.core.logging import get_logger
from durmah.core.request_id import get_request_id
from durmah.core.voice_constants import DEFAULT_REALTIME_MODEL, DEFAULT_REALTIME_VOICE
from durmah.schemas.proxy import RealtimeSessionRequest, RealtimeSessionResponse
from durmah.services.openai_realtime_client import OpenAIRealtimeClient, extract_client_secret
from fastapi import APIRouter, Request, status
from fastapi.responses import PlainTextResponse, Response

router = APIRouter(tags=["realtime"])
logger = get_logger(__name__)


@router.options("/realtime-session", include_in_schema=False)
async def realtime_session_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=CORS_HEADERS)


@router.api_route(
    "/realtime-session",
    methods=["GET", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
async def realtime_session_method_not_allowed() -> Response:
    return PlainTextResponse(
        "Method Not Allowed",
        status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
        headers=CORS_HEADERS,
    )


@router.post(
    "/realtime-session",
    summary="Issue an ephemeral realtime session token",
    response_model=RealtimeSessionResponse,
)
@limiter.limit(settings.RATE_LIMIT)
async def create_realtime_session(request: Request, payload: Optional[RealtimeSessionRequest] = None):
    """
    Create an OpenAI Realtime session and return only its client credential.

    Model/voice resolve as: request body > environment default > built-in fallback.

    Returns:
        {token, model, voice, expires_at}; provider failures pass through
        with the provider's status code.
    """
    payload = payload or RealtimeSessionRequest()
    client = OpenAIRealtimeClient(api_key=settings.OPENAI_API_KEY)
    if not client.is_enabled():
        raise ConfigurationError("Missing OPENAI_API_KEY")

    model = payload.model or settings.REALTIME_MODEL or DEFAULT_REALTIME_MODEL
    voice = payload.voice or settings.REALTIME_VOICE or DEFAULT_REALTIME_VOICE

    try:
        session = await client.create_session(model=model, voice=voice)
        token, expires_at = extract_client_secret(session)
        if not token:
            logger.warning("realtime_session_missing_client_secret", model=model)
        body = RealtimeSessionResponse(token=token, model=model, voice=voice, expires_at=expires_at)
    except (ConfigurationError, ProviderError):
        raise
    except Exception as e:
        logger.error(
            "realtime_session_error",
            error=str(e),
            model=model,
            request_id=get_request_id(request),
        )
        return cors_json(
            {"error": "Server error", "detail": str(e)},
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return cors_json(body.model_dump())
