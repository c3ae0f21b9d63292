"""Shared test fixtures for video-relay-mcp."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from video_relay_mcp.errors import EmptyProviderResponse, ProviderHTTPError
from video_relay_mcp.models.analysis import FileReference


def unwrap_tool(tool: Any) -> Any:
    """Extract the raw coroutine from a FastMCP FunctionTool, if wrapped.

    FastMCP 2.x wraps @server.tool functions in FunctionTool (not callable).
    FastMCP 3.x preserves the original function. This helper works with both.
    """
    return getattr(tool, "fn", tool)


class FakeProvider:
    """Test double for VideoProvider: canned text or a simulated failure.

    Records every call so tests can assert that validation failures never
    reach the provider.
    """

    def __init__(
        self,
        text: str = "Hello",
        *,
        status_code: int | None = None,
        body: str = "",
        empty: bool = False,
        error: Exception | None = None,
    ):
        self.text = text
        self.status_code = status_code
        self.body = body
        self.empty = empty
        self.error = error
        self.calls: list[tuple[str, FileReference]] = []

    async def generate(self, prompt: str, file_reference: FileReference) -> str:
        self.calls.append((prompt, file_reference))
        if self.error is not None:
            raise self.error
        if self.status_code is not None:
            raise ProviderHTTPError(self.status_code, self.body)
        if self.empty:
            raise EmptyProviderResponse()
        return self.text


@pytest.fixture(autouse=True)
def _set_dummy_api_key(monkeypatch):
    """Ensure tests never hit real Gemini API."""
    monkeypatch.setenv("GOOGLE_API_KEY", "test-key-not-real")
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


@pytest.fixture(autouse=True)
def _disable_tracing(monkeypatch):
    """Disable MLflow tracing in all tests to avoid real tracking-server calls."""
    monkeypatch.setenv("GEMINI_TRACING_ENABLED", "false")


@pytest.fixture(autouse=True)
def _isolate_dotenv(tmp_path, monkeypatch):
    """Prevent tests from loading the user's real ~/.config/video-relay-mcp/.env."""
    monkeypatch.setattr(
        "video_relay_mcp.dotenv.DEFAULT_ENV_PATH",
        tmp_path / "nonexistent.env",
    )


@pytest.fixture(autouse=True)
def clean_config():
    """Reset the config singleton so each test reads its own environment."""
    import video_relay_mcp.config as cfg_mod

    cfg_mod._config = None
    yield
    cfg_mod._config = None


@pytest.fixture()
def no_api_key(monkeypatch):
    """Remove every credential source."""
    monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


@pytest.fixture()
def fake_provider():
    """A FakeProvider that answers "Hello"."""
    return FakeProvider()


@pytest.fixture()
def patch_default_provider():
    """Make ``analyze`` use a given FakeProvider when no provider is passed.

    Usage::

        provider = patch_default_provider(FakeProvider(status_code=503))
    """
    patchers = []

    def _install(provider: FakeProvider) -> FakeProvider:
        p = patch("video_relay_mcp.relay.GeminiProvider", return_value=provider)
        p.start()
        patchers.append(p)
        return provider

    yield _install
    for p in patchers:
        p.stop()


@pytest.fixture()
def mock_gemini_client():
    """Patch GeminiClient.get() with a client whose generate_content is an AsyncMock."""
    with patch("video_relay_mcp.client.GeminiClient.get") as mock_get:
        client = MagicMock()
        client.aio.models.generate_content = AsyncMock()
        mock_get.return_value = client
        yield {
            "get": mock_get,
            "client": client,
            "generate_content": client.aio.models.generate_content,
        }
