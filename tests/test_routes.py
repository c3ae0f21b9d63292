"""Tests for the HTTP relay route: status codes, JSON bodies, CORS headers."""

from __future__ import annotations

import pytest
from starlette.testclient import TestClient

from video_relay_mcp.server import app

from tests.conftest import FakeProvider

ROUTE = "/analyze-video"
VALID = {"prompt": "Summarize the session", "videoUrl": "https://example.com/test.mp4"}


@pytest.fixture()
def client():
    return TestClient(app.http_app())


def _assert_cors(response):
    assert response.headers["access-control-allow-origin"] == "*"
    assert "content-type" in response.headers["access-control-allow-headers"]
    assert "POST" in response.headers["access-control-allow-methods"]


class TestPreflight:
    def test_options_returns_cors_and_empty_body(self, client):
        response = client.options(ROUTE)

        assert response.status_code == 204
        assert response.content == b""
        _assert_cors(response)

    def test_options_succeeds_without_credential(self, client, no_api_key):
        response = client.options(ROUTE, headers={"Origin": "https://form.example"})

        assert response.status_code == 204
        _assert_cors(response)


class TestAnalyzeVideoRoute:
    def test_success(self, client, patch_default_provider):
        patch_default_provider(FakeProvider("Hello"))

        response = client.post(ROUTE, json=VALID)

        assert response.status_code == 200
        assert response.json() == {"result": "Hello"}
        _assert_cors(response)

    def test_missing_fields(self, client, patch_default_provider):
        provider = patch_default_provider(FakeProvider())

        response = client.post(ROUTE, json={"prompt": "only a prompt"})

        assert response.status_code == 400
        assert response.json() == {
            "error": "Missing prompt or videoUrl",
            "category": "INVALID_INPUT",
        }
        assert provider.calls == []
        _assert_cors(response)

    def test_malformed_json(self, client, patch_default_provider):
        provider = patch_default_provider(FakeProvider())

        response = client.post(
            ROUTE, content=b"{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["category"] == "INVALID_INPUT"
        assert provider.calls == []
        _assert_cors(response)

    def test_unreadable_body_is_json_with_cors(self, patch_default_provider):
        """Nesting deep enough to exhaust the JSON decoder still gets a JSON 500."""
        provider = patch_default_provider(FakeProvider())
        client = TestClient(app.http_app(), raise_server_exceptions=False)

        response = client.post(
            ROUTE,
            content=b"[" * 100_000 + b"]" * 100_000,
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 500
        body = response.json()
        assert body["category"] == "UNKNOWN"
        assert body["error"].startswith("Server error: ")
        assert provider.calls == []
        _assert_cors(response)

    def test_youtube_url(self, client, patch_default_provider):
        provider = patch_default_provider(FakeProvider())

        response = client.post(
            ROUTE, json={"prompt": "p", "videoUrl": "https://www.youtube.com/watch?v=abc"}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["category"] == "UNSUPPORTED_SOURCE"
        assert "YouTube URLs are not supported" in body["error"]
        assert provider.calls == []

    def test_unsupported_format(self, client, patch_default_provider):
        patch_default_provider(FakeProvider())

        response = client.post(
            ROUTE, json={"prompt": "p", "videoUrl": "https://example.com/video.gif"}
        )

        assert response.status_code == 400
        assert response.json()["category"] == "UNSUPPORTED_FORMAT"

    def test_missing_credential(self, client, no_api_key, patch_default_provider):
        provider = patch_default_provider(FakeProvider())

        response = client.post(ROUTE, json=VALID)

        assert response.status_code == 500
        assert response.json() == {
            "error": "Google API Key not configured",
            "category": "CONFIGURATION_ERROR",
        }
        assert provider.calls == []
        _assert_cors(response)

    def test_provider_overloaded(self, client, patch_default_provider):
        patch_default_provider(FakeProvider(status_code=503))

        response = client.post(ROUTE, json=VALID)

        assert response.status_code == 503
        assert response.json()["category"] == "PROVIDER_OVERLOADED"
        _assert_cors(response)

    def test_provider_error_status_propagated(self, client, patch_default_provider):
        patch_default_provider(FakeProvider(status_code=429, body="RESOURCE_EXHAUSTED"))

        response = client.post(ROUTE, json=VALID)

        assert response.status_code == 429
        assert response.json()["error"] == "Gemini API error: 429 - RESOURCE_EXHAUSTED"

    def test_unexpected_error(self, client, patch_default_provider):
        patch_default_provider(FakeProvider(error=RuntimeError("boom")))

        response = client.post(ROUTE, json=VALID)

        assert response.status_code == 500
        assert response.json() == {"error": "Server error: boom", "category": "UNKNOWN"}

    def test_get_not_allowed(self, client):
        assert client.get(ROUTE).status_code == 405


class TestHealthRoute:
    def test_health(self, client, no_api_key):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}
