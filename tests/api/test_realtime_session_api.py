"""
Tests for POST /realtime-session.

The OpenAI call is mocked at httpx.AsyncClient; the primary key must
never appear in what the browser receives.
"""

import json
from unittest.mock import patch

import httpx
import pytest
from durmah.core.config import settings
from durmah.core.voice_constants import DEFAULT_REALTIME_MODEL, DEFAULT_REALTIME_VOICE
from fastapi import status

ENDPOINT = "/realtime-session"
PRIMARY_KEY = "sk-primary-secret"


@pytest.fixture(autouse=True)
def openai_settings():
    with patch.object(settings, "OPENAI_API_KEY", PRIMARY_KEY), patch.object(
        settings, "REALTIME_MODEL", None
    ), patch.object(settings, "REALTIME_VOICE", None):
        yield


class TestSuccess:
    def test_returns_only_the_client_credential(self, client, mock_provider, provider_response):
        mock_provider.post.return_value = provider_response(
            json_body={
                "id": "sess_1",
                "client_secret": {"value": "abc"},
                "expires_at": 123,
                "instructions": "not for the browser",
            }
        )

        response = client.post(ENDPOINT, json={})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "token": "abc",
            "model": DEFAULT_REALTIME_MODEL,
            "voice": DEFAULT_REALTIME_VOICE,
            "expires_at": 123,
        }
        assert PRIMARY_KEY not in response.text
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_primary_key_only_goes_upstream(self, client, mock_provider, provider_response):
        mock_provider.post.return_value = provider_response(json_body={"client_secret": {"value": "abc"}})

        client.post(ENDPOINT, json={})

        call = mock_provider.post.call_args
        assert call.args[0] == settings.REALTIME_SESSIONS_URL
        assert call.kwargs["headers"]["Authorization"] == f"Bearer {PRIMARY_KEY}"

    def test_body_overrides_model_and_voice(self, client, mock_provider, provider_response):
        mock_provider.post.return_value = provider_response(json_body={"client_secret": {"value": "abc"}})

        response = client.post(ENDPOINT, json={"model": "gpt-custom", "voice": "alloy"})

        sent = mock_provider.post.call_args.kwargs["json"]
        assert sent["model"] == "gpt-custom"
        assert sent["voice"] == "alloy"
        assert response.json()["model"] == "gpt-custom"
        assert response.json()["voice"] == "alloy"

    def test_environment_defaults_apply_when_body_is_silent(self, client, mock_provider, provider_response):
        mock_provider.post.return_value = provider_response(json_body={"client_secret": {"value": "abc"}})

        with patch.object(settings, "REALTIME_MODEL", "env-model"), patch.object(
            settings, "REALTIME_VOICE", "env-voice"
        ):
            response = client.post(ENDPOINT)

        assert response.json()["model"] == "env-model"
        assert response.json()["voice"] == "env-voice"

    def test_empty_body_is_accepted(self, client, mock_provider, provider_response):
        mock_provider.post.return_value = provider_response(json_body={"client_secret": {"value": "abc"}})

        response = client.post(ENDPOINT)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["expires_at"] is None

    def test_expiry_falls_back_to_client_secret(self, client, mock_provider, provider_response):
        mock_provider.post.return_value = provider_response(
            json_body={"client_secret": {"value": "abc", "expires_at": 456}}
        )

        response = client.post(ENDPOINT, json={})

        assert response.json()["expires_at"] == 456

    def test_fixed_session_parameters_are_sent(self, client, mock_provider, provider_response):
        mock_provider.post.return_value = provider_response(json_body={"client_secret": {"value": "abc"}})

        client.post(ENDPOINT, json={"instructions": "ignored", "turn_detection": None})

        sent = mock_provider.post.call_args.kwargs["json"]
        assert sent["turn_detection"]["type"] == "server_vad"
        assert sent["modalities"] == ["text", "audio"]
        assert sent["instructions"] != "ignored"


class TestFailures:
    def test_missing_key_fails_without_network_call(self, client, mock_provider):
        with patch.object(settings, "OPENAI_API_KEY", None):
            response = client.post(ENDPOINT, json={})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json() == {"error": "Missing OPENAI_API_KEY"}
        mock_provider.post.assert_not_called()

    @pytest.mark.parametrize("upstream_status", [400, 401, 429, 503])
    def test_provider_status_passes_through(self, client, mock_provider, provider_response, upstream_status):
        mock_provider.post.return_value = provider_response(
            status_code=upstream_status, text=json.dumps({"error": {"message": "nope"}})
        )

        response = client.post(ENDPOINT, json={})

        assert response.status_code == upstream_status
        body = response.json()
        assert body["error"] == "OpenAI session create failed"
        assert "nope" in body["detail"]
        assert response.headers["Access-Control-Allow-Origin"] == "*"

    def test_network_failure_is_server_error(self, client, mock_provider):
        mock_provider.post.side_effect = httpx.ConnectError("connection refused")

        response = client.post(ENDPOINT, json={})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["error"] == "Server error"
        assert "connection refused" in response.json()["detail"]

    @pytest.mark.parametrize(
        "session",
        [
            {"client_secret": {"value": "abc"}, "expires_at": 1735.5},
            {"client_secret": {"value": 12345}},
        ],
    )
    def test_unexpected_provider_payload_is_server_error(self, client, mock_provider, provider_response, session):
        mock_provider.post.return_value = provider_response(json_body=session)

        response = client.post(ENDPOINT, json={})

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.headers["content-type"].startswith("application/json")
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert response.json()["error"] == "Server error"
        assert isinstance(response.json()["detail"], str)

    def test_provider_failure_log_carries_request_id(self, client, mock_provider, provider_response):
        mock_provider.post.return_value = provider_response(status_code=401, text="bad key")

        with patch("durmah.core.errors.logger") as mock_logger:
            client.post(ENDPOINT, json={}, headers={"X-Request-ID": "trace-401"})

        assert mock_logger.warning.call_args.kwargs["request_id"] == "trace-401"

    def test_malformed_json_is_bad_request(self, client, mock_provider):
        response = client.post(
            ENDPOINT,
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        mock_provider.post.assert_not_called()


class TestMethods:
    def test_preflight(self, client):
        response = client.options(ENDPOINT)

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["Access-Control-Allow-Origin"] == "*"
        assert "POST" in response.headers["Access-Control-Allow-Methods"]
        assert "Authorization" in response.headers["Access-Control-Allow-Headers"]

    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    def test_other_methods_not_allowed(self, client, method):
        response = client.request(method, ENDPOINT)

        assert response.status_code == status.HTTP_405_METHOD_NOT_ALLOWED
        assert response.text == "Method Not Allowed"
