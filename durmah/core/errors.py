"""
Error types and FastAPI exception handlers for the proxy endpoints.

Every failure is scoped to the request that raised it:
- ConfigurationError: missing provider key/voice, surfaced as 500
- ProviderError: upstream non-success, status and body passed through
- RequestValidationError: malformed client input, surfaced as 400
"""

from typing import Any, Dict, Optional

from durmah.core.logging import get_logger
from durmah.core.request_id import get_request_id
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = get_logger(__name__)

# Permissive cross-origin headers carried by every proxy response
CORS_HEADERS: Dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, Authorization",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


class AuthenticationError(Exception):
    """Credential missing, malformed, expired, or carrying a bad signature."""


class ConfigurationError(Exception):
    """A required server-side setting is absent. Fatal for the request, never retried."""


class ProviderError(Exception):
    """An external provider answered with a non-success status."""

    def __init__(self, provider: str, status_code: int, detail: str):
        super().__init__(f"{provider} request failed: {status_code}")
        self.provider = provider
        self.status_code = status_code
        self.detail = detail


def cors_json(content: Any, status_code: int = status.HTTP_200_OK, headers: Optional[Dict[str, str]] = None):
    """JSONResponse carrying the CORS headers."""
    return JSONResponse(content=content, status_code=status_code, headers={**CORS_HEADERS, **(headers or {})})


async def configuration_error_handler(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("configuration_error", path=request.url.path, error=str(exc), request_id=get_request_id(request))
    return cors_json({"error": str(exc)}, status.HTTP_500_INTERNAL_SERVER_ERROR)


async def provider_error_handler(request: Request, exc: ProviderError) -> JSONResponse:
    logger.warning(
        "provider_error",
        path=request.url.path,
        request_id=get_request_id(request),
        provider=exc.provider,
        status_code=exc.status_code,
    )
    label = {
        "openai": "OpenAI session create failed",
        "elevenlabs": "ElevenLabs TTS failed",
    }.get(exc.provider, f"{exc.provider} request failed")
    return cors_json({"error": label, "detail": exc.detail}, exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("request_validation_failed", path=request.url.path)
    errors = [{"loc": list(err.get("loc", ())), "msg": err.get("msg", "")} for err in exc.errors()]
    return cors_json({"error": "Invalid request body", "detail": errors}, status.HTTP_400_BAD_REQUEST)


def add_exception_handlers(app: FastAPI) -> None:
    """Register the proxy exception handlers on the application."""
    app.add_exception_handler(ConfigurationError, configuration_error_handler)
    app.add_exception_handler(ProviderError, provider_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
