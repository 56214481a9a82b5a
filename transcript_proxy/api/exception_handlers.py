from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from transcript_proxy.api.schemas import error_response
from transcript_proxy.domain.exceptions import RelayError

logger = logging.getLogger("transcript_proxy.errors")

INTERNAL_ERROR_MESSAGE = "Internal server error"


def _log_extra(request: Request, *, status_code: int, error: str) -> dict[str, object]:
    # IMPORTANT: never log request bodies (they carry the caller's API key).
    return {
        "request_id": getattr(request.state, "request_id", None),
        "http_method": request.method,
        "request_path": request.url.path,  # no query string
        "status_code": status_code,
        "error": error,
    }


def register_exception_handlers(app: FastAPI) -> None:
    """Register handlers that render every failure as an error envelope."""

    @app.exception_handler(RelayError)
    async def handle_relay_error(request: Request, exc: RelayError) -> JSONResponse:
        # No exc_info: chained transport errors can quote the caller's API key.
        extra = _log_extra(request, status_code=exc.status_code, error=type(exc).__name__)
        extra["cause"] = getattr(exc, "cause", None)
        logger.log(
            logging.WARNING if exc.status_code >= 500 else logging.INFO,
            "Request rejected",
            extra=extra,
        )
        return error_response(status_code=exc.status_code, message=exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return error_response(
            status_code=exc.status_code,
            message=str(exc.detail),
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.error(
            "Unhandled error while processing request",
            exc_info=exc,
            extra=_log_extra(request, status_code=500, error="internal_error"),
        )
        return error_response(status_code=500, message=INTERNAL_ERROR_MESSAGE)
