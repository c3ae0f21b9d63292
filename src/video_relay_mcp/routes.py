"""HTTP routes for the browser submission form.

Registered on the FastMCP app with ``custom_route``. Every response, success
or error, carries permissive CORS headers so the browser can read the body.
"""

from __future__ import annotations

import json
import logging

from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from .errors import ErrorCategory
from .models.analysis import AnalysisFailure
from .relay import MISSING_INPUT_MESSAGE, analyze

logger = logging.getLogger(__name__)

CORS_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
}


async def analyze_video_route(request: Request) -> Response:
    """``OPTIONS`` → 204 pre-flight; ``POST`` → relay the JSON body."""
    if request.method == "OPTIONS":
        return Response(status_code=204, headers=CORS_HEADERS)

    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.info("Rejected request with malformed JSON body")
        result = AnalysisFailure(
            category=ErrorCategory.INVALID_INPUT,
            message=MISSING_INPUT_MESSAGE,
            status_code=400,
        )
    except Exception as exc:
        logger.exception("Failed to read request body")
        result = AnalysisFailure(
            category=ErrorCategory.UNKNOWN,
            message=f"Server error: {exc}",
            status_code=500,
        )
    else:
        result = await analyze(payload)

    return JSONResponse(result.to_body(), status_code=result.status_code, headers=CORS_HEADERS)


async def health_route(request: Request) -> Response:
    """Liveness check; says nothing about credentials."""
    return JSONResponse({"status": "ok"})
