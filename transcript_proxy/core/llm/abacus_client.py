from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict

from transcript_proxy.domain.exceptions import UpstreamError, UpstreamUnreachableError
from transcript_proxy.transcripts.prompt import UpstreamPrompt

FALLBACK_ERROR_MESSAGE = "Failed to process with Abacus AI"


class EvaluatePromptResponse(BaseModel):
    """Successful evaluatePrompt body.

    Generated text may arrive under `content` or `result`; `content` takes precedence
    and an empty value falls through to the next field.
    """

    model_config = ConfigDict(extra="ignore")

    content: Any = None
    result: Any = None

    def generated_text(self) -> Any:
        return self.content or self.result or ""


class EvaluatePromptErrorBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: Any = None


@dataclass(frozen=True)
class AbacusConfig:
    url: str
    llm_name: str
    timeout_seconds: float


def _error_message(resp: httpx.Response) -> str:
    try:
        body = EvaluatePromptErrorBody.model_validate(resp.json())
    except Exception:  # noqa: BLE001 - any unparsable error body gets the fallback
        return FALLBACK_ERROR_MESSAGE
    if isinstance(body.message, str) and body.message:
        return body.message
    return FALLBACK_ERROR_MESSAGE


class AbacusClient:
    """
    Minimal client for the Abacus AI `evaluatePrompt` endpoint.

    Design notes:
    - No logging in this module (prompts, outputs and keys must not reach logs).
    - A single attempt per call; failures are mapped to typed errors.
    - `transport` is injectable so tests can stub the upstream.
    """

    def __init__(self, *, config: AbacusConfig, transport: httpx.AsyncBaseTransport | None = None):
        self._config = config
        self._transport = transport

    async def evaluate_prompt(self, *, prompt: UpstreamPrompt, api_key: str) -> Any:
        """Send one prompt and return the raw generated text (unsanitized)."""

        headers = {"Content-Type": "application/json", "apiKey": api_key}
        payload: dict[str, Any] = {
            "llm_name": self._config.llm_name,
            "system_message": prompt.system_message,
            "prompt": prompt.prompt,
            "temperature": prompt.temperature,
            "max_tokens": prompt.max_tokens,
        }

        try:
            async with httpx.AsyncClient(
                timeout=self._config.timeout_seconds,
                transport=self._transport,
                follow_redirects=True,
            ) as client:
                resp = await client.post(self._config.url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise UpstreamUnreachableError(cause=type(exc).__name__) from None

        if not resp.is_success:
            raise UpstreamError(_error_message(resp), status_code=resp.status_code)

        # A non-JSON success body is an unmapped fault and surfaces as a generic 500;
        # JSON that is not an object simply carries no generated text.
        data = resp.json()
        parsed = (
            EvaluatePromptResponse.model_validate(data)
            if isinstance(data, dict)
            else EvaluatePromptResponse()
        )
        return parsed.generated_text()
