"""Access logging for the relay.

One record per request with safe metadata: route template, status, timing, the
declared body size and the caller's remaining rate-limit budget. Bodies (API key,
transcript), query strings and headers are never logged. An X-Request-ID is
generated or propagated so upstream failures can be correlated.
"""

from __future__ import annotations

import logging
import re
import time
import uuid
from typing import Any

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("transcript_proxy.http")

REQUEST_ID_HEADER = "X-Request-ID"
_REQUEST_ID = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]{0,127}")


def get_or_create_request_id(request: Request) -> str:
    """Propagate a well-formed client id, otherwise mint a UUID4 hex."""

    candidate = request.headers.get(REQUEST_ID_HEADER, "")
    return candidate if _REQUEST_ID.fullmatch(candidate) else uuid.uuid4().hex


def route_label(request: Request) -> str:
    """Route template for the request, or `unmatched` (404s, rejected before routing)."""

    path = getattr(request.scope.get("route"), "path", None)
    return path if isinstance(path, str) and path else "unmatched"


def _declared_length(request: Request) -> int | None:
    value = request.headers.get("content-length", "")
    return int(value) if value.isdigit() else None


class HttpLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request.state.request_id = get_or_create_request_id(request)
        started = time.perf_counter()

        def fields(status_code: int) -> dict[str, Any]:
            return {
                "request_id": request.state.request_id,
                "http_method": request.method,
                "request_path": route_label(request),
                "status_code": status_code,
                "duration_ms": round((time.perf_counter() - started) * 1000.0, 2),
                "content_length": _declared_length(request),
                # Set by RateLimitMiddleware for /api/ routes only.
                "rate_limit_remaining": getattr(request.state, "rate_limit_remaining", None),
            }

        try:
            response = await call_next(request)
        except Exception:  # noqa: BLE001 - logged with stack trace, then re-raised
            logger.exception("Unhandled exception while processing request", extra=fields(500))
            raise

        response.headers[REQUEST_ID_HEADER] = request.state.request_id
        logger.info("Request completed", extra=fields(response.status_code))
        return response
