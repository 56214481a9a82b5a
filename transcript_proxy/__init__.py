"""Relay that turns video transcripts into step-by-step markdown via an upstream LLM."""

__version__ = "1.0.0"
