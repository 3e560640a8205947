from __future__ import annotations

import os

# Settings are read at import time; these defaults let the gateway import in
# tests without a real .env. They only apply when the caller/CI has not set them.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DEBUG", "false")
os.environ.setdefault("JWT_SECRET", "test-jwt-secret")
os.environ.setdefault("RATE_LIMIT", "10000/minute")
os.environ.setdefault("RELAY_CHAT_ACK_DELAY_SEC", "0.01")
