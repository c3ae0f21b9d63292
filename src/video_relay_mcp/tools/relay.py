"""Video relay tool: 1 tool on a FastMCP sub-server."""

from __future__ import annotations

from fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..errors import RelayError, make_tool_error
from ..models.analysis import AnalysisRequest, AnalysisSuccess
from ..relay import analyze
from ..tracing import trace
from ..types import AnalysisPrompt, DirectVideoUrl

relay_server = FastMCP("relay")


@relay_server.tool(
    annotations=ToolAnnotations(
        readOnlyHint=True,
        destructiveHint=False,
        idempotentHint=False,
        openWorldHint=True,
    )
)
@trace(name="video_url_analyze", span_type="TOOL")
async def video_url_analyze(
    video_url: DirectVideoUrl,
    prompt: AnalysisPrompt,
) -> dict:
    """Analyze a publicly reachable video file with Gemini.

    Gemini fetches the file from the URL itself, so the link must point
    straight at a ``.mp4``, ``.mov``, ``.avi`` or ``.webm`` file. YouTube
    pages are rejected.

    Args:
        video_url: Direct link to the video file.
        prompt: What to analyze, e.g. a usability-test review brief.

    Returns:
        Dict with ``result`` and ``video_url`` on success, otherwise a
        ToolError dict with ``category``, ``hint`` and ``status_code``.
    """
    result = await analyze(AnalysisRequest(prompt=prompt, video_url=video_url))
    if isinstance(result, AnalysisSuccess):
        return {"result": result.text, "video_url": video_url.strip()}
    return make_tool_error(RelayError(result.category, result.message, result.status_code))
