"""
Shared slowapi rate limiter for the HTTP endpoints.
"""

from durmah.core.config import settings
from slowapi import Limiter
from slowapi.util import get_remote_address

limiter = Limiter(key_func=get_remote_address, default_limits=[settings.RATE_LIMIT])
