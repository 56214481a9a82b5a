from __future__ import annotations

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse

from transcript_proxy.api.schemas import success_response
from transcript_proxy.core.llm.deps import get_abacus_client
from transcript_proxy.core.settings import get_settings
from transcript_proxy.transcripts.schemas import (
    ErrorOut,
    ProcessTranscriptIn,
    ProcessTranscriptOut,
)
from transcript_proxy.transcripts.service import TranscriptService
from transcript_proxy.transcripts.validation import decode_body, read_body

router = APIRouter(prefix="/api", tags=["transcripts"])


@router.post(
    "/process-transcript",
    response_model=ProcessTranscriptOut,
    summary="Extract step-by-step instructions from a transcript",
    responses={
        status.HTTP_400_BAD_REQUEST: {"model": ErrorOut, "description": "Invalid request."},
        status.HTTP_403_FORBIDDEN: {"model": ErrorOut, "description": "Origin not allowed."},
        status.HTTP_413_CONTENT_TOO_LARGE: {"model": ErrorOut},
        status.HTTP_429_TOO_MANY_REQUESTS: {"model": ErrorOut},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorOut},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {
                "application/json": {
                    "schema": ProcessTranscriptIn.model_json_schema(by_alias=True),
                }
            },
        }
    },
)
async def process_transcript(
    request: Request,
    llm_client=Depends(get_abacus_client),
) -> JSONResponse:
    """
    Forward a transcript to the upstream LLM and return the generated markdown.

    Upstream error statuses are passed through to the caller. Nothing is stored.
    """

    settings = get_settings()
    request_id = getattr(request.state, "request_id", None)

    raw = await read_body(request.stream(), max_bytes=settings.max_body_bytes)
    payload = decode_body(raw, max_bytes=settings.max_body_bytes)
    svc = TranscriptService(llm_client=llm_client)
    markdown = await svc.extract_instructions(payload=payload, request_id=request_id)
    return success_response(markdown)
