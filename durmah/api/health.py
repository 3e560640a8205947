"""
Health check endpoints
"""

import time
from typing import Dict, Union

from durmah.core.config import settings
from durmah.core.limiter import limiter
from durmah.core.logging import get_logger
from fastapi import APIRouter, Request
from pydantic import BaseModel

router = APIRouter()
logger = get_logger(__name__)

_STARTED_AT = time.time()


class HealthResponse(BaseModel):
    """Health check response model"""

    status: str
    message: str
    version: str
    environment: str
    timestamp: float
    uptime: float
    services: Dict[str, bool]


class StatusResponse(BaseModel):
    """Detailed status response model"""

    status: str
    timestamp: float
    uptime: int
    relay: Dict[str, Union[int, float]]
    features: Dict[str, bool]


def _relay_stats(request: Request) -> Dict[str, int]:
    relay = getattr(request.app.state, "relay", None)
    if relay is None:
        return {"connections": 0, "channels": 0}
    return {"connections": len(relay.registry), "channels": relay.registry.channel_count}


@router.get("/health", response_model=HealthResponse)
@limiter.limit(settings.RATE_LIMIT)
async def health_check(request: Request):
    """
    Basic health check endpoint
    Returns 200 if the service is running, with which providers are configured
    """
    logger.debug("health_check_requested")
    return HealthResponse(
        status="healthy",
        message="Durmah Legal Buddy is running! 🦅",
        version=settings.APP_VERSION,
        environment=settings.ENVIRONMENT,
        timestamp=time.time(),
        uptime=round(time.time() - _STARTED_AT, 3),
        services={
            "openai": bool(settings.OPENAI_API_KEY),
            "elevenlabs": bool(settings.ELEVENLABS_API_KEY and settings.ELEVENLABS_VOICE_ID),
            "relay": getattr(request.app.state, "relay", None) is not None,
        },
    )


@router.get("/api/healthz")
@limiter.limit(settings.RATE_LIMIT)
async def healthz(request: Request):
    """Liveness probe for the hosting platform."""
    return {"status": "ok"}


@router.get("/api/status", response_model=StatusResponse)
@limiter.limit(settings.RATE_LIMIT)
async def system_status(request: Request):
    """Operational status for monitoring: uptime, relay load, enabled features."""
    return StatusResponse(
        status="operational",
        timestamp=time.time(),
        uptime=int(time.time() - _STARTED_AT),
        relay={
            **_relay_stats(request),
            "chat_ack_delay_sec": settings.RELAY_CHAT_ACK_DELAY_SEC,
        },
        features={
            "voice_realtime": bool(settings.OPENAI_API_KEY),
            "text_to_speech": bool(settings.ELEVENLABS_API_KEY and settings.ELEVENLABS_VOICE_ID),
        },
    )
