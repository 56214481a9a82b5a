from __future__ import annotations

import logging
from typing import Any, Protocol

from transcript_proxy.domain.exceptions import TranscriptTooShortError, UpstreamError
from transcript_proxy.transcripts.prompt import UpstreamPrompt, build_instructions_prompt
from transcript_proxy.transcripts.sanitize import (
    MAX_OUTPUT_CHARS,
    MAX_TITLE_CHARS,
    MAX_TRANSCRIPT_CHARS,
    MIN_TRANSCRIPT_CHARS,
    sanitize,
)
from transcript_proxy.transcripts.schemas import ProcessTranscriptIn
from transcript_proxy.transcripts.validation import validate_request

logger = logging.getLogger("transcript_proxy.transcripts")


class LLMClient(Protocol):
    async def evaluate_prompt(self, *, prompt: UpstreamPrompt, api_key: str) -> Any: ...


class TranscriptService:
    def __init__(self, *, llm_client: LLMClient):
        self._llm = llm_client

    async def extract_instructions(
        self, *, payload: ProcessTranscriptIn, request_id: str | None = None
    ) -> str:
        """Validate, sanitize, call upstream once and return sanitized markdown.

        IMPORTANT: the API key is only handed to the client for this call; it is not
        logged or kept on the service.
        """

        validate_request(payload)

        transcript = sanitize(payload.transcript, MAX_TRANSCRIPT_CHARS)
        title = sanitize(payload.video_title, MAX_TITLE_CHARS)
        if len(transcript) < MIN_TRANSCRIPT_CHARS:
            raise TranscriptTooShortError()

        logger.info(
            "Processing transcript",
            extra={
                "request_id": request_id,
                "title_chars": len(title),
                "transcript_chars": len(transcript),
            },
        )

        prompt = build_instructions_prompt(title=title, transcript=transcript)
        try:
            generated = await self._llm.evaluate_prompt(
                prompt=prompt, api_key=str(payload.api_key)
            )
        except UpstreamError as exc:
            logger.warning(
                "Upstream returned an error",
                extra={
                    "request_id": request_id,
                    "upstream_status_code": exc.status_code,
                    "error": "upstream_error",
                },
            )
            raise

        markdown = sanitize(generated, MAX_OUTPUT_CHARS)
        logger.info(
            "Transcript processed",
            extra={"request_id": request_id, "output_chars": len(markdown)},
        )
        return markdown
