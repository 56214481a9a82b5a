from __future__ import annotations

import dataclasses

import pytest

from transcript_proxy.transcripts.prompt import (
    MAX_TOKENS,
    SYSTEM_MESSAGE,
    TEMPERATURE,
    build_instructions_prompt,
)


def test_prompt_embeds_title_and_transcript() -> None:
    prompt = build_instructions_prompt(title="Fix a bike", transcript="First remove the wheel.")
    assert 'titled "Fix a bike"' in prompt.prompt
    assert "Here's the transcript:\n\nFirst remove the wheel.\n\n" in prompt.prompt
    assert prompt.prompt.endswith("no citations, references, or meta-commentary.")
    assert prompt.system_message == SYSTEM_MESSAGE
    assert prompt.temperature == TEMPERATURE == 0.7
    assert prompt.max_tokens == MAX_TOKENS == 4096


def test_braces_in_transcript_are_kept_literally() -> None:
    prompt = build_instructions_prompt(title="{title}", transcript="use {transcript} and {}")
    assert 'titled "{title}"' in prompt.prompt
    assert "use {transcript} and {}" in prompt.prompt


def test_prompt_is_immutable() -> None:
    prompt = build_instructions_prompt(title="T", transcript="x")
    with pytest.raises(dataclasses.FrozenInstanceError):
        prompt.prompt = "changed"  # type: ignore[misc]
