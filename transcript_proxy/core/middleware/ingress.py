"""Admission checks that run before any route logic.

Each middleware answers with an error envelope itself: exceptions raised here would
bypass the application's exception handlers.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable

from fastapi import Request
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response
from starlette.types import ASGIApp

from transcript_proxy.api.schemas import error_response
from transcript_proxy.core.rate_limit import RATE_LIMIT_MESSAGE, RateLimiter

logger = logging.getLogger("transcript_proxy.ingress")

ORIGIN_REJECTED_MESSAGE = "Not allowed by CORS"


def is_origin_allowed(
    origin: str | None, *, trusted_prefixes: Iterable[str], development: bool
) -> bool:
    """No origin (curl, native apps), a trusted prefix, or anything in development."""

    if not origin:
        return True
    if any(origin.startswith(prefix) for prefix in trusted_prefixes):
        return True
    return development


def cors_origin_regex(*, trusted_prefixes: Iterable[str], development: bool) -> str:
    """Regex for Starlette's CORSMiddleware matching the same origins as the guard."""

    if development:
        return r".*"
    alternatives = "|".join(re.escape(prefix) for prefix in trusted_prefixes)
    return rf"^(?:{alternatives}).*$" if alternatives else r"^$"


class OriginGuardMiddleware(BaseHTTPMiddleware):
    def __init__(self, app: ASGIApp, *, trusted_prefixes: Iterable[str], development: bool):
        super().__init__(app)
        self._trusted_prefixes = tuple(trusted_prefixes)
        self._development = development

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        origin = request.headers.get("origin")
        if not is_origin_allowed(
            origin, trusted_prefixes=self._trusted_prefixes, development=self._development
        ):
            logger.warning(
                "Origin rejected",
                extra={
                    "request_id": getattr(request.state, "request_id", None),
                    "http_method": request.method,
                    "request_path": request.url.path,
                    "status_code": 403,
                    "error": "origin_rejected",
                },
            )
            return error_response(status_code=403, message=ORIGIN_REJECTED_MESSAGE)
        return await call_next(request)


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose declared Content-Length exceeds the cap.

    Bodies without a Content-Length are checked again after reading by the route.
    """

    def __init__(self, app: ASGIApp, *, max_bytes: int):
        super().__init__(app)
        self._max_bytes = max_bytes

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        declared = request.headers.get("content-length")
        if declared is not None:
            try:
                too_large = int(declared) > self._max_bytes
            except ValueError:
                return error_response(status_code=400, message="Invalid Content-Length header")
            if too_large:
                return error_response(status_code=413, message="Request body is too large")
        return await call_next(request)


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Apply `RateLimiter` to requests under `path_prefix`, keyed by client IP."""

    def __init__(self, app: ASGIApp, *, limiter: RateLimiter, path_prefix: str = "/api/"):
        super().__init__(app)
        self._limiter = limiter
        self._path_prefix = path_prefix

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not request.url.path.startswith(self._path_prefix):
            return await call_next(request)

        decision = self._limiter.check(get_remote_address(request))
        request.state.rate_limit_remaining = decision.remaining
        if not decision.allowed:
            logger.warning(
                "Rate limit exceeded",
                extra={
                    "request_id": getattr(request.state, "request_id", None),
                    "http_method": request.method,
                    "request_path": request.url.path,
                    "status_code": 429,
                    "error": "rate_limited",
                },
            )
            return error_response(
                status_code=429, message=RATE_LIMIT_MESSAGE, headers=decision.headers()
            )

        response = await call_next(request)
        for name, value in decision.headers().items():
            response.headers[name] = value
        return response
