"""Deterministic text cleanup applied to inbound fields and upstream output."""

from __future__ import annotations

import re
from typing import Any

# Inbound caps (transcript/title) and outbound cap (generated markdown), in characters.
MAX_TRANSCRIPT_CHARS = 100_000
MAX_TITLE_CHARS = 500
MAX_OUTPUT_CHARS = 50_000
MIN_TRANSCRIPT_CHARS = 50

# Tab, LF and CR are kept; every other C0 control and DEL is dropped.
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def sanitize(text: Any, max_length: int) -> str:
    """Strip control characters, cap the length and trim surrounding whitespace.

    Non-string input yields an empty string. Truncation counts Unicode code points,
    so a multi-byte character is never split.
    """

    if not isinstance(text, str):
        return ""
    cleaned = _CONTROL_CHARS.sub("", text)
    if len(cleaned) > max_length:
        cleaned = cleaned[:max_length]
    return cleaned.strip()
