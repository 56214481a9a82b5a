"""Upstream LLM integration layer.

This package is intentionally small:
- One request per call, no retries.
- No prompt, output or credential logging.
- The caller's API key is passed through per call and never stored on the client.
"""
