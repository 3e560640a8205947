"""Shared fixtures for the HTTP endpoint tests."""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from durmah.main import app
from fastapi.testclient import TestClient


@pytest.fixture
def client():
    """TestClient without lifespan, so no startup hooks run."""
    return TestClient(app, raise_server_exceptions=False)


@pytest.fixture
def mock_provider():
    """
    Replace httpx.AsyncClient; yields the client instance whose `post`
    the test configures with a response (or a side effect).
    """
    with patch("httpx.AsyncClient") as mock_httpx:
        mock_instance = AsyncMock()
        mock_httpx.return_value.__aenter__.return_value = mock_instance
        yield mock_instance


@pytest.fixture
def provider_response():
    """Factory for a canned upstream httpx response."""

    def _make(status_code=200, json_body=None, text="", content=b""):
        response = MagicMock(status_code=status_code, text=text, content=content)
        response.json.return_value = json_body if json_body is not None else {}
        return response

    return _make
