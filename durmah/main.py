"""
Main application

One ASGI process serves both surfaces:
- FastAPI: /realtime-session, /tts and the health endpoints
- Socket.IO relay at /socket.io

Uvicorn should point at `durmah.main:asgi_app`.
"""

from typing import Optional

import socketio
import uvicorn
from durmah.api import health, realtime_session, tts
from durmah.core.config import settings
from durmah.core.errors import add_exception_handlers
from durmah.core.limiter import limiter
from durmah.core.logging import configure_logging, get_logger
from durmah.core.request_id import RequestIDMiddleware
from durmah.core.security import TokenVerifier
from durmah.services.relay import RelayServer
from fastapi import FastAPI
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

# Configure structured logging
configure_logging()
logger = get_logger(__name__)


def create_relay() -> RelayServer:
    """Build the relay with its verification key injected from settings."""
    return RelayServer(
        TokenVerifier(settings.JWT_SECRET, settings.JWT_ALGORITHM),
        chat_ack_delay=settings.RELAY_CHAT_ACK_DELAY_SEC,
        cors_allowed_origins=settings.relay_cors_origins,
    )


def create_app(relay: Optional[RelayServer] = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        debug=settings.DEBUG,
        description="""
    Durmah - voice study companion backend

    ## Endpoints
    - `POST /realtime-session`: ephemeral OpenAI Realtime credential for the widget
    - `POST /tts`: ElevenLabs speech synthesis, base64 MP3
    - `/socket.io`: authenticated chat/mood relay
    """,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.state.limiter = limiter
    app.state.relay = relay
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    add_exception_handlers(app)

    app.add_middleware(RequestIDMiddleware)

    app.include_router(health.router, tags=["health"])
    app.include_router(realtime_session.router)
    app.include_router(tts.router)

    @app.on_event("startup")
    async def startup_event():
        logger.info(
            "application_startup",
            app_name=settings.APP_NAME,
            version=settings.APP_VERSION,
            environment=settings.ENVIRONMENT,
        )
        logger.info("rate_limiting_enabled", default_limit=settings.RATE_LIMIT)
        logger.info(
            "providers_configured",
            openai=bool(settings.OPENAI_API_KEY),
            elevenlabs=bool(settings.ELEVENLABS_API_KEY and settings.ELEVENLABS_VOICE_ID),
        )
        if not settings.OPENAI_API_KEY:
            logger.warning("openai_key_missing", endpoint="/realtime-session")

    @app.on_event("shutdown")
    async def shutdown_event():
        logger.info("application_shutdown", app_name=settings.APP_NAME, version=settings.APP_VERSION)
        if app.state.relay is not None:
            await app.state.relay.shutdown()

    return app


relay = create_relay()
app = create_app(relay)
asgi_app = socketio.ASGIApp(relay.sio, other_asgi_app=app, socketio_path="socket.io")


def run() -> None:
    """Console entry point."""
    uvicorn.run(
        "durmah.main:asgi_app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )


if __name__ == "__main__":
    run()
