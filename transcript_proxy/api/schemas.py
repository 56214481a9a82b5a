from __future__ import annotations

from collections.abc import Mapping

from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, model_validator


class HealthOut(BaseModel):
    """Health check response."""

    status: str = Field(
        description="Service status indicator. `ok` means the API process is up and responding.",
        examples=["ok"],
    )
    timestamp: str = Field(
        description="Current server time (ISO 8601, UTC).",
        examples=["2024-05-01T12:00:00.000Z"],
    )


class EnvelopeOut(BaseModel):
    """Uniform response wrapper: exactly one of `markdown` / `error` is set."""

    success: bool
    markdown: str | None = Field(default=None, description="Generated markdown (success only).")
    error: str | None = Field(default=None, description="Client-safe error message.")

    @model_validator(mode="after")
    def _one_payload(self) -> EnvelopeOut:
        if self.success and (self.markdown is None or self.error is not None):
            raise ValueError("successful envelope must carry markdown only")
        if not self.success and (self.error is None or self.markdown is not None):
            raise ValueError("failed envelope must carry error only")
        return self


def success_response(markdown: str) -> JSONResponse:
    body = EnvelopeOut(success=True, markdown=markdown)
    return JSONResponse(status_code=200, content=body.model_dump(exclude_none=True))


def error_response(
    *,
    status_code: int,
    message: str,
    headers: Mapping[str, str] | None = None,
) -> JSONResponse:
    body = EnvelopeOut(success=False, error=message)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=dict(headers) if headers else None,
    )
