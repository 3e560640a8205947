"""
Structured logging configuration using structlog

Includes relay-specific logging with configurable verbosity levels:
- MINIMAL: Errors only
- STANDARD: + Connection lifecycle (connect/disconnect/refused)
- VERBOSE: + Every routed event
"""

import logging
import sys
from enum import IntEnum
from typing import Optional

import structlog
from durmah.core.config import settings


class RelayLogLevel(IntEnum):
    """Relay logging verbosity levels.

    Higher values include all lower level logs.
    """

    MINIMAL = 1  # Errors only
    STANDARD = 2  # + Connection lifecycle
    VERBOSE = 3  # + Routed events


_RELAY_LOG_LEVEL_MAP = {
    "MINIMAL": RelayLogLevel.MINIMAL,
    "STANDARD": RelayLogLevel.STANDARD,
    "VERBOSE": RelayLogLevel.VERBOSE,
}

_relay_log_level: RelayLogLevel = _RELAY_LOG_LEVEL_MAP.get(settings.RELAY_LOG_LEVEL.upper(), RelayLogLevel.STANDARD)


def get_relay_log_level() -> RelayLogLevel:
    """Get the current relay logging level."""
    return _relay_log_level


def set_relay_log_level(level: RelayLogLevel) -> None:
    """Set the relay logging level (useful for testing)."""
    global _relay_log_level
    _relay_log_level = level


def configure_logging():
    """Configure structured logging for the application"""
    log_level = logging.DEBUG if settings.DEBUG else logging.INFO

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=log_level,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer() if not settings.DEBUG else structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str = None):
    """
    Get a structured logger instance

    Args:
        name: Logger name (usually __name__ of the module)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)


# =============================================================================
# Relay-Specific Logging Utilities
# =============================================================================


class RelayLogger:
    """
    Relay logger with configurable verbosity levels.

    Usage:
        relay_log = get_relay_logger(__name__)

        # Always logged (errors)
        relay_log.error("relay_chat_failed", sid="abc", error=str(e))

        # Logged at STANDARD+
        relay_log.connected(sid="abc", user_id="user456", channel="user_user456")

        # Logged at VERBOSE only
        relay_log.event("mood_update", sid="abc", user_id="user456")
    """

    def __init__(self, name: str):
        self._logger = structlog.get_logger(name)
        self._name = name

    def _should_log(self, min_level: RelayLogLevel) -> bool:
        return _relay_log_level >= min_level

    # -------------------------------------------------------------------------
    # MINIMAL level - Errors (always logged)
    # -------------------------------------------------------------------------

    def error(self, event: str, sid: Optional[str] = None, **kwargs):
        """Log relay error (always logged at any level)."""
        self._logger.error(event, sid=sid, relay_log_level="MINIMAL", **kwargs)

    def exception(self, event: str, sid: Optional[str] = None, **kwargs):
        """Log relay error with the active traceback."""
        self._logger.exception(event, sid=sid, relay_log_level="MINIMAL", **kwargs)

    # -------------------------------------------------------------------------
    # STANDARD level - Connection lifecycle
    # -------------------------------------------------------------------------

    def connected(self, sid: str, user_id: str, channel: str, **kwargs):
        if not self._should_log(RelayLogLevel.STANDARD):
            return
        self._logger.info(
            "relay_connected",
            sid=sid,
            user_id=user_id,
            channel=channel,
            relay_log_level="STANDARD",
            **kwargs,
        )

    def disconnected(self, sid: str, user_id: Optional[str] = None, duration_ms: float = 0.0, **kwargs):
        if not self._should_log(RelayLogLevel.STANDARD):
            return
        self._logger.info(
            "relay_disconnected",
            sid=sid,
            user_id=user_id,
            duration_ms=round(duration_ms, 2),
            relay_log_level="STANDARD",
            **kwargs,
        )

    def refused(self, sid: str, reason: str, **kwargs):
        """Log a rejected handshake."""
        if not self._should_log(RelayLogLevel.STANDARD):
            return
        self._logger.warning("relay_handshake_refused", sid=sid, reason=reason, relay_log_level="STANDARD", **kwargs)

    # -------------------------------------------------------------------------
    # VERBOSE level - Routed events
    # -------------------------------------------------------------------------

    def event(self, name: str, sid: str, **kwargs):
        if not self._should_log(RelayLogLevel.VERBOSE):
            return
        self._logger.info("relay_event", event_name=name, sid=sid, relay_log_level="VERBOSE", **kwargs)


def get_relay_logger(name: str) -> RelayLogger:
    """Get a relay-specific logger instance."""
    return RelayLogger(name)
