"""Request/response value objects exchanged between the form and the relay.

Both are request-scoped: built per submission, consumed once, never stored.
"""

from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..errors import ErrorCategory

VIDEO_MIME_TYPE = "video/mp4"


class AnalysisRequest(BaseModel):
    """A prompt plus the public video URL it should be run against.

    Accepts the browser's ``videoUrl`` key as well as ``video_url``.
    Values are stripped, so whitespace-only fields count as missing.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    prompt: str = ""
    video_url: str = Field(default="", alias="videoUrl")

    @field_validator("prompt", "video_url", mode="before")
    @classmethod
    def none_as_empty(cls, value: object) -> object:
        return "" if value is None else value

    @property
    def is_complete(self) -> bool:
        return bool(self.prompt) and bool(self.video_url)


class FileReference(BaseModel):
    """Remote file handed to the provider by URI; never downloaded or sniffed."""

    uri: str
    mime_type: str = VIDEO_MIME_TYPE


class AnalysisSuccess(BaseModel):
    """Model text for a request that made it through the provider."""

    kind: Literal["success"] = "success"
    text: str

    @property
    def status_code(self) -> int:
        return 200

    def to_body(self) -> dict:
        return {"result": self.text}


class AnalysisFailure(BaseModel):
    """A categorized failure plus the HTTP status it is reported with."""

    kind: Literal["failure"] = "failure"
    category: ErrorCategory
    message: str
    status_code: int = 500

    def to_body(self) -> dict:
        return {"error": self.message, "category": self.category.value}


AnalysisResult = Annotated[Union[AnalysisSuccess, AnalysisFailure], Field(discriminator="kind")]
