from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProcessTranscriptIn(BaseModel):
    """Raw request body for POST /api/process-transcript.

    Fields are typed loosely on purpose: presence is checked by `validate_request` and
    content by the sanitizer, so a wrong type degrades to an empty value instead of a
    framework validation error.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    transcript: Any = Field(default=None, description="Full video transcript text.")
    video_title: Any = Field(default=None, alias="videoTitle", description="Video title.")
    api_key: Any = Field(
        default=None,
        alias="apiKey",
        description="Caller's upstream API key. Forwarded once, never stored or logged.",
    )

    def __repr__(self) -> str:
        # Keep the credential out of reprs/tracebacks.
        return "ProcessTranscriptIn(transcript=..., video_title=..., api_key=***)"

    __str__ = __repr__


class ProcessTranscriptOut(BaseModel):
    success: bool = Field(examples=[True])
    markdown: str = Field(examples=["# Steps\n1. Do X"])


class ErrorOut(BaseModel):
    success: bool = Field(examples=[False])
    error: str = Field(examples=["Transcript is too short or invalid"])
