"""Provider interface and the Gemini implementation.

The relay only depends on :class:`VideoProvider`. Implementations report
upstream failures by raising :class:`~video_relay_mcp.errors.ProviderHTTPError`
(non-2xx) or :class:`~video_relay_mcp.errors.EmptyProviderResponse` (2xx
without candidate content); anything else they raise is treated as an
unexpected error.
"""

from __future__ import annotations

import json
import logging
from typing import Protocol, runtime_checkable

from google.genai import errors as genai_errors
from google.genai import types

from .client import GeminiClient
from .config import ServerConfig, get_config
from .errors import EMPTY_RESPONSE_MESSAGE, EmptyProviderResponse, ProviderHTTPError
from .models.analysis import FileReference

logger = logging.getLogger(__name__)

SAFETY_CATEGORIES: tuple[types.HarmCategory, ...] = (
    types.HarmCategory.HARM_CATEGORY_HARASSMENT,
    types.HarmCategory.HARM_CATEGORY_HATE_SPEECH,
    types.HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT,
    types.HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT,
)
SAFETY_THRESHOLD = types.HarmBlockThreshold.BLOCK_MEDIUM_AND_ABOVE


@runtime_checkable
class VideoProvider(Protocol):
    """Anything that can turn a prompt plus a remote video into text."""

    async def generate(self, prompt: str, file_reference: FileReference) -> str: ...


def build_contents(prompt: str, file_reference: FileReference) -> types.Content:
    """Build one user Content: the prompt text, then the video by URI."""
    return types.Content(
        role="user",
        parts=[
            types.Part(text=prompt),
            types.Part(
                file_data=types.FileData(
                    file_uri=file_reference.uri,
                    mime_type=file_reference.mime_type,
                )
            ),
        ],
    )


def build_generate_config(cfg: ServerConfig) -> types.GenerateContentConfig:
    """Fixed sampling parameters and medium-and-above safety blocking."""
    return types.GenerateContentConfig(
        temperature=cfg.temperature,
        top_k=cfg.top_k,
        top_p=cfg.top_p,
        max_output_tokens=cfg.max_output_tokens,
        safety_settings=[
            types.SafetySetting(category=category, threshold=SAFETY_THRESHOLD)
            for category in SAFETY_CATEGORIES
        ],
    )


def _error_body(error: genai_errors.APIError) -> str:
    """Render the provider's error payload the way it came over the wire."""
    if error.details is None:
        return error.message or ""
    if isinstance(error.details, str):
        return error.details
    return json.dumps(error.details, default=str)


def extract_text(response: types.GenerateContentResponse) -> str:
    """Return the first candidate's first text part.

    Raises:
        EmptyProviderResponse: If there is no candidate or it carries no content.
    """
    candidates = response.candidates or []
    content = candidates[0].content if candidates else None
    if content is None or not content.parts:
        raise EmptyProviderResponse(EMPTY_RESPONSE_MESSAGE)
    return content.parts[0].text or ""


class GeminiProvider:
    """Production provider: one ``generate_content`` call per request, no retries."""

    def __init__(self, config: ServerConfig | None = None):
        self._config = config

    @property
    def config(self) -> ServerConfig:
        return self._config or get_config()

    async def generate(self, prompt: str, file_reference: FileReference) -> str:
        cfg = self.config
        client = GeminiClient.get(cfg.gemini_api_key)
        try:
            response = await client.aio.models.generate_content(
                model=cfg.model,
                contents=build_contents(prompt, file_reference),
                config=build_generate_config(cfg),
            )
        except genai_errors.APIError as exc:
            body = _error_body(exc)
            logger.error("Gemini API error: %s %s", exc.code, body)
            raise ProviderHTTPError(exc.code, body) from exc

        return extract_text(response)
