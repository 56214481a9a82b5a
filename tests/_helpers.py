"""Shared test helpers."""

from __future__ import annotations

from typing import Any

VALID_BODY = {"transcript": "a" * 60, "videoTitle": "T", "apiKey": "k"}


class StubLLMClient:
    """Stands in for AbacusClient; records prompts and returns canned text."""

    def __init__(self, *, generated: Any = "", error: Exception | None = None):
        self.generated = generated
        self.error = error
        self.calls: list[dict[str, Any]] = []

    async def evaluate_prompt(self, *, prompt, api_key: str) -> Any:
        self.calls.append({"prompt": prompt, "api_key": api_key})
        if self.error is not None:
            raise self.error
        return self.generated
