"""
Request ID middleware for tracing proxy calls through the logs.

Adds a correlation ID to every HTTP request and binds it into the
structlog context so every log line emitted while handling the request
carries it.
"""
import uuid
from typing import Callable

import structlog
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware that adds a unique request ID to every request.

    The request ID is taken from the client's X-Request-ID header when
    present, generated otherwise, then stored on request.state, bound to
    the structlog contextvars and echoed in the response headers.
    """

    async def dispatch(self, request: Request, call_next: Callable):
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        structlog.contextvars.bind_contextvars(request_id=request_id)
        try:
            response = await call_next(request)
        finally:
            structlog.contextvars.unbind_contextvars("request_id")

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def get_request_id(request: Request) -> str:
    """Return the request ID for the current request, or "unknown"."""
    return getattr(request.state, "request_id", "unknown")
