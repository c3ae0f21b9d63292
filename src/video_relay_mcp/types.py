"""Shared type aliases for tool parameters."""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

DirectVideoUrl = Annotated[str, Field(
    description="Public URL of a video file ending in .mp4, .mov, .avi, or .webm "
    "(not a YouTube page)",
)]
AnalysisPrompt = Annotated[str, Field(
    description="What to analyze, e.g. 'map the user journey with timestamps', "
    "'list usability issues by severity'",
)]
