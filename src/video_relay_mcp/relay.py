"""The relay: validate a submission, call the provider once, normalize the outcome.

``analyze`` never raises. Validation runs in a fixed order and stops at the
first failure, before any provider call:

1. prompt and video URL present,
2. URL not on a video-hosting platform,
3. URL is a direct link to a recognized video file,
4. a Gemini credential is configured.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from .config import get_config
from .errors import (
    EMPTY_RESPONSE_MESSAGE,
    EmptyProviderResponse,
    ErrorCategory,
    ProviderHTTPError,
    RelayError,
    from_provider_error,
)
from .models.analysis import (
    AnalysisFailure,
    AnalysisRequest,
    AnalysisResult,
    AnalysisSuccess,
    FileReference,
)
from .provider import GeminiProvider, VideoProvider
from .tracing import record_request, trace
from .url_policy import validate_video_url

logger = logging.getLogger(__name__)

MISSING_INPUT_MESSAGE = "Missing prompt or videoUrl"
MISSING_CREDENTIAL_MESSAGE = "Google API Key not configured"


def parse_request(payload: AnalysisRequest | Mapping[str, Any] | None) -> AnalysisRequest:
    """Coerce a decoded JSON body into a complete AnalysisRequest.

    Raises:
        RelayError: ``INVALID_INPUT`` when the body isn't an object, a field
            has the wrong type, or either field is missing/blank.
    """
    if isinstance(payload, AnalysisRequest):
        request = payload
    elif isinstance(payload, Mapping):
        try:
            request = AnalysisRequest.model_validate(payload)
        except ValidationError as exc:
            logger.debug("Rejected request body: %s", exc)
            raise RelayError(ErrorCategory.INVALID_INPUT, MISSING_INPUT_MESSAGE, 400) from exc
    else:
        raise RelayError(ErrorCategory.INVALID_INPUT, MISSING_INPUT_MESSAGE, 400)

    if not request.is_complete:
        raise RelayError(ErrorCategory.INVALID_INPUT, MISSING_INPUT_MESSAGE, 400)
    return request


def _require_credential() -> None:
    if not get_config().has_credential:
        logger.error("Relay called without GOOGLE_API_KEY / GEMINI_API_KEY configured")
        raise RelayError(ErrorCategory.CONFIGURATION_ERROR, MISSING_CREDENTIAL_MESSAGE, 500)


def _failure(error: RelayError) -> AnalysisFailure:
    return AnalysisFailure(
        category=error.category,
        message=error.message,
        status_code=error.status_code,
    )


@trace(name="video_relay_analyze", span_type="CHAIN")
async def analyze(
    payload: AnalysisRequest | Mapping[str, Any] | None,
    *,
    provider: VideoProvider | None = None,
) -> AnalysisResult:
    """Run one submission through validation and the provider.

    Args:
        payload: An AnalysisRequest or the decoded JSON body
            (``{"prompt": ..., "videoUrl": ...}``).
        provider: Provider to call; defaults to :class:`GeminiProvider`.

    Returns:
        AnalysisSuccess with the model text, or AnalysisFailure carrying the
        category, message and HTTP status to report.
    """
    try:
        request = parse_request(payload)
        video_url = validate_video_url(request.video_url)
        _require_credential()

        logger.info("Analyzing video with Gemini: %s", video_url)
        logger.debug("Prompt: %s", request.prompt)
        record_request(video_url, request.prompt, get_config().model)
        provider = provider or GeminiProvider()
        text = await provider.generate(request.prompt, FileReference(uri=video_url))
        return AnalysisSuccess(text=text)
    except RelayError as exc:
        logger.info("Request rejected (%s): %s", exc.category.value, exc.message)
        return _failure(exc)
    except ProviderHTTPError as exc:
        logger.error("Provider returned %d: %s", exc.status_code, exc.body)
        return _failure(from_provider_error(exc))
    except EmptyProviderResponse as exc:
        logger.error("Provider returned no candidate content")
        return _failure(
            RelayError(ErrorCategory.EMPTY_RESPONSE, str(exc) or EMPTY_RESPONSE_MESSAGE, 500)
        )
    except Exception as exc:
        logger.exception("Unexpected error while relaying video analysis")
        return _failure(RelayError(ErrorCategory.UNKNOWN, f"Server error: {exc}", 500))
