"""
Application configuration
"""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    # Application
    APP_NAME: str = "Durmah Relay Gateway"
    APP_VERSION: str = "0.1.0"
    # SECURITY: never enable in production (exposes stack traces)
    DEBUG: bool = False
    ENVIRONMENT: str = "production"
    HOST: str = "0.0.0.0"  # nosec B104 - bound inside the container
    PORT: int = 3001

    # Security (relay handshake credentials)
    JWT_SECRET: str
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7  # 7 days, matches the login route

    # OpenAI Realtime (ephemeral session issuer)
    # IMPORTANT: provider keys are sensitive and must never be logged or returned
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_TIMEOUT_SEC: int = 30
    REALTIME_SESSIONS_URL: str = "https://api.openai.com/v1/realtime/sessions"
    REALTIME_MODEL: Optional[str] = None  # falls back to DEFAULT_REALTIME_MODEL
    REALTIME_VOICE: Optional[str] = None  # falls back to DEFAULT_REALTIME_VOICE

    # ElevenLabs TTS proxy
    ELEVENLABS_API_KEY: Optional[str] = None
    ELEVENLABS_VOICE_ID: Optional[str] = None
    ELEVENLABS_MODEL: str = "eleven_turbo_v2"  # Low-latency model
    ELEVENLABS_BASE_URL: str = "https://api.elevenlabs.io/v1"
    ELEVENLABS_TIMEOUT_SEC: int = 60

    # Realtime relay
    RELAY_CHAT_ACK_DELAY_SEC: float = 1.0
    RELAY_CORS_ALLOWED_ORIGINS: str = "*"  # comma-separated, or "*"
    RELAY_LOG_LEVEL: str = "STANDARD"  # MINIMAL | STANDARD | VERBOSE

    # Rate limiting (slowapi notation)
    RATE_LIMIT: str = "100/15minutes"

    @property
    def relay_cors_origins(self):
        """Origins accepted by the Socket.IO server."""
        if self.RELAY_CORS_ALLOWED_ORIGINS.strip() == "*":
            return "*"
        return [origin.strip() for origin in self.RELAY_CORS_ALLOWED_ORIGINS.split(",") if origin.strip()]

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True, extra="ignore")


# Global settings instance
settings = Settings()
