"""Shared Gemini client pool: one ``genai.Client`` per API key."""

from __future__ import annotations

import logging

from google import genai

from .config import get_config

logger = logging.getLogger(__name__)


class GeminiClient:
    """Process-wide Gemini client pool (one client per API key)."""

    _clients: dict[str, genai.Client] = {}

    @classmethod
    def get(cls, api_key: str | None = None) -> genai.Client:
        """Return (or create) the shared client for *api_key*.

        Raises:
            ValueError: If no key is passed and none is configured.
        """
        key = api_key or get_config().gemini_api_key
        if not key:
            raise ValueError("No Gemini API key: set GOOGLE_API_KEY or GEMINI_API_KEY")
        if key not in cls._clients:
            cls._clients[key] = genai.Client(api_key=key)
            logger.info("Created Gemini client (key …%s)", key[-4:])
        return cls._clients[key]

    @classmethod
    async def close_all(cls) -> int:
        """Shut down all shared clients. Returns count closed."""
        count = 0
        for client in list(cls._clients.values()):
            try:
                await client.aio.aclose()
            except Exception:
                logger.debug("Async Gemini client close failed", exc_info=True)
            try:
                client.close()
            except Exception:
                logger.debug("Gemini client close failed", exc_info=True)
            count += 1
        cls._clients.clear()
        logger.info("Closed %d Gemini client(s)", count)
        return count
