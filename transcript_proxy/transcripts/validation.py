from __future__ import annotations

import json
import re
from collections.abc import AsyncIterator
from typing import Any

from pydantic import ValidationError

from transcript_proxy.domain.exceptions import (
    InvalidFieldError,
    MalformedBodyError,
    MissingFieldError,
    PayloadTooLargeError,
)
from transcript_proxy.transcripts.schemas import ProcessTranscriptIn

# Checked in this order; the first absent one is reported.
REQUIRED_FIELDS: tuple[tuple[str, str], ...] = (
    ("transcript", "transcript"),
    ("videoTitle", "video_title"),
    ("apiKey", "api_key"),
)

# Printable ASCII, no surrounding whitespace: what the HTTP client will put on the wire.
_HEADER_VALUE = re.compile(r"[\x21-\x7e](?:[\x20-\x7e]*[\x21-\x7e])?")


def _is_blank(value: Any) -> bool:
    if isinstance(value, (list, dict)):
        return False
    return not value


async def read_body(chunks: AsyncIterator[bytes], *, max_bytes: int) -> bytes:
    """Buffer a request body, giving up as soon as it grows past `max_bytes`."""

    received: list[bytes] = []
    total = 0
    async for chunk in chunks:
        total += len(chunk)
        if total > max_bytes:
            raise PayloadTooLargeError()
        received.append(chunk)
    return b"".join(received)


def decode_body(raw: bytes, *, max_bytes: int) -> ProcessTranscriptIn:
    """Decode and size-check a raw JSON body."""

    if len(raw) > max_bytes:
        raise PayloadTooLargeError()
    try:
        data = json.loads(raw) if raw else {}
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise MalformedBodyError() from exc
    if not isinstance(data, dict):
        raise MalformedBodyError()
    try:
        return ProcessTranscriptIn.model_validate(data)
    except ValidationError as exc:
        raise MalformedBodyError() from exc


def validate_request(payload: ProcessTranscriptIn) -> None:
    """Raise MissingFieldError for the first required field that is absent or empty.

    The API key must also be usable as a header value; anything else is rejected here
    so it never reaches the HTTP client, whose errors quote header values.
    """

    for wire_name, attr in REQUIRED_FIELDS:
        if _is_blank(getattr(payload, attr)):
            raise MissingFieldError(wire_name)

    if not _HEADER_VALUE.fullmatch(str(payload.api_key)):
        raise InvalidFieldError("apiKey")
