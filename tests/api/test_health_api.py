"""Tests for the health and status endpoints."""

from unittest.mock import patch

from durmah.core.config import settings
from fastapi import status


def test_health_endpoint_returns_healthy(client):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "healthy"
    assert data["version"] == settings.APP_VERSION
    assert isinstance(data["timestamp"], (int, float))
    assert data["uptime"] >= 0
    assert data["services"]["relay"] is True


def test_health_reports_configured_providers(client):
    with patch.object(settings, "OPENAI_API_KEY", "sk-test"), patch.object(
        settings, "ELEVENLABS_API_KEY", "xi-test"
    ), patch.object(settings, "ELEVENLABS_VOICE_ID", None):
        services = client.get("/health").json()["services"]

    assert services["openai"] is True
    # a key without a voice id cannot synthesize
    assert services["elevenlabs"] is False


def test_health_never_leaks_secrets(client):
    with patch.object(settings, "OPENAI_API_KEY", "sk-very-secret"):
        response = client.get("/health")

    assert "sk-very-secret" not in response.text


def test_healthz(client):
    response = client.get("/api/healthz")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "ok"}


def test_status_reports_relay_load(client):
    response = client.get("/api/status")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "operational"
    assert data["relay"]["connections"] == 0
    assert data["relay"]["channels"] == 0
    assert set(data["features"]) == {"voice_realtime", "text_to_speech"}


def test_responses_carry_request_id(client):
    response = client.get("/api/healthz", headers={"X-Request-ID": "probe-1"})

    assert response.headers["X-Request-ID"] == "probe-1"
