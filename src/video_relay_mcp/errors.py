"""Structured error handling: relay error categories, provider errors, and tool error model."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class ErrorCategory(str, Enum):
    """Client-facing failure categories."""

    INVALID_INPUT = "INVALID_INPUT"
    UNSUPPORTED_SOURCE = "UNSUPPORTED_SOURCE"
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    PROVIDER_OVERLOADED = "PROVIDER_OVERLOADED"
    INVALID_REQUEST_TO_PROVIDER = "INVALID_REQUEST_TO_PROVIDER"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    UNKNOWN = "UNKNOWN"


class RelayError(Exception):
    """A request-level failure with a category and the HTTP status to report."""

    def __init__(self, category: ErrorCategory, message: str, status_code: int = 400):
        super().__init__(message)
        self.category = category
        self.message = message
        self.status_code = status_code


class ProviderHTTPError(Exception):
    """Raised by a provider when the upstream API answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str = ""):
        super().__init__(f"{status_code} - {body}")
        self.status_code = status_code
        self.body = body


class EmptyProviderResponse(Exception):
    """Raised by a provider when a 2xx response carries no candidate content."""


OVERLOADED_MESSAGE = "The Gemini API is currently overloaded. Please try again in a few minutes."
INVALID_PROVIDER_REQUEST_MESSAGE = (
    "Invalid request. Please check that your video URL is accessible "
    "and in a supported format."
)
EMPTY_RESPONSE_MESSAGE = "No valid response from Gemini API"


def from_provider_error(error: ProviderHTTPError) -> RelayError:
    """Map an upstream HTTP failure to the relay error reported to the caller."""
    if error.status_code == 503:
        return RelayError(ErrorCategory.PROVIDER_OVERLOADED, OVERLOADED_MESSAGE, 503)
    if error.status_code == 400:
        return RelayError(
            ErrorCategory.INVALID_REQUEST_TO_PROVIDER, INVALID_PROVIDER_REQUEST_MESSAGE, 400
        )
    return RelayError(
        ErrorCategory.PROVIDER_ERROR,
        f"Gemini API error: {error.status_code} - {error.body}",
        error.status_code,
    )


class ToolError(BaseModel):
    """Structured error returned from the MCP tool."""

    error: str
    category: str
    hint: str
    status_code: int = 500
    retryable: bool = False
    retry_after_seconds: int | None = None


_HINTS: dict[ErrorCategory, str] = {
    ErrorCategory.INVALID_INPUT: "Provide both a prompt and a video URL",
    ErrorCategory.UNSUPPORTED_SOURCE: (
        "Video-hosting pages cannot be fetched; upload the file and pass a direct link"
    ),
    ErrorCategory.UNSUPPORTED_FORMAT: "Use a direct link ending in .mp4, .mov, .avi, or .webm",
    ErrorCategory.CONFIGURATION_ERROR: "Set GOOGLE_API_KEY (or GEMINI_API_KEY) on the server",
    ErrorCategory.PROVIDER_OVERLOADED: "Gemini is overloaded; wait a few minutes and resubmit",
    ErrorCategory.INVALID_REQUEST_TO_PROVIDER: (
        "Gemini rejected the request; check the video is public and in a supported format"
    ),
    ErrorCategory.PROVIDER_ERROR: "Upstream Gemini failure; see error for the provider status",
    ErrorCategory.EMPTY_RESPONSE: "Gemini returned no content; the output may have been blocked",
}


def make_tool_error(error: RelayError) -> dict:
    """Create a serialisable ToolError dict from a relay failure.

    Only an overloaded provider is worth retrying; everything else needs the
    caller to change the request or the server configuration first.
    """
    overloaded = error.category == ErrorCategory.PROVIDER_OVERLOADED
    return ToolError(
        error=error.message,
        category=error.category.value,
        hint=_HINTS.get(error.category, error.message),
        status_code=error.status_code,
        retryable=overloaded,
        retry_after_seconds=60 if overloaded else None,
    ).model_dump(mode="json")
