from __future__ import annotations

from dataclasses import dataclass

TEMPERATURE = 0.7
MAX_TOKENS = 4096

SYSTEM_MESSAGE = (
    "You are an AI assistant that extracts step-by-step instructions from video transcripts. "
    "Format the output as a clean markdown document with a title, brief overview, numbered "
    "step-by-step instructions with clear action items, and any important notes or tips "
    "mentioned. Make the instructions actionable and easy to follow. Remove any filler words, "
    "tangents, or unnecessary content. Focus only on the core instructional content."
)

_PROMPT_TEMPLATE = (
    'I have a transcript from a YouTube video titled "{title}". Please analyze this transcript '
    "and extract clear, step-by-step instructions that someone can follow to accomplish the "
    "task or learn what's being taught in the video.\n"
    "\n"
    "Here's the transcript:\n"
    "\n"
    "{transcript}\n"
    "\n"
    "Please provide ONLY the markdown document with no citations, references, or "
    "meta-commentary."
)


@dataclass(frozen=True)
class UpstreamPrompt:
    system_message: str
    prompt: str
    temperature: float = TEMPERATURE
    max_tokens: int = MAX_TOKENS


def build_instructions_prompt(*, title: str, transcript: str) -> UpstreamPrompt:
    """Create the upstream prompt from an already-sanitized title and transcript."""

    # str.format does not re-scan substituted values, so braces in the
    # transcript are inserted literally.
    prompt = _PROMPT_TEMPLATE.format(title=title, transcript=transcript)
    return UpstreamPrompt(system_message=SYSTEM_MESSAGE, prompt=prompt)
