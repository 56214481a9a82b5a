from __future__ import annotations

from datetime import UTC, datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from transcript_proxy import __version__
from transcript_proxy.api.exception_handlers import register_exception_handlers
from transcript_proxy.api.schemas import HealthOut
from transcript_proxy.core.logging import setup_logging
from transcript_proxy.core.metrics import PrometheusMetricsMiddleware, metrics_router
from transcript_proxy.core.middleware.http_logging import HttpLoggingMiddleware
from transcript_proxy.core.middleware.ingress import (
    BodySizeLimitMiddleware,
    OriginGuardMiddleware,
    RateLimitMiddleware,
    cors_origin_regex,
)
from transcript_proxy.core.rate_limit import RateLimiter
from transcript_proxy.core.settings import get_settings
from transcript_proxy.transcripts.router import router as transcripts_router

setup_logging()


def _utc_timestamp() -> str:
    # Millisecond precision with a trailing Z, e.g. 2024-05-01T12:00:00.000Z
    return datetime.now(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def create_app() -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title="Transcript Instructions Proxy",
        version=__version__,
        description=(
            "Relays a video transcript to an upstream LLM and returns step-by-step "
            "instructions as markdown.\n\n"
            "- The caller's upstream API key is forwarded once and never stored or logged.\n"
            "- Every `/api/` response uses the `{success, markdown | error}` envelope.\n"
            "- `/api/` routes are rate limited per client IP."
        ),
        docs_url="/swagger",
        redoc_url="/docs",
        openapi_tags=[
            {
                "name": "health",
                "description": "Basic uptime check for load balancers and monitoring.",
            },
            {
                "name": "transcripts",
                "description": "Turn a transcript into step-by-step markdown instructions.",
            },
            {
                "name": "monitoring",
                "description": "Prometheus-compatible metrics endpoint.",
            },
        ],
    )

    limiter = RateLimiter(
        max_requests=settings.rate_limit_max_requests,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.state.rate_limiter = limiter

    # Last added runs first: logging -> metrics -> origin -> CORS -> body size -> rate limit.
    app.add_middleware(RateLimitMiddleware, limiter=limiter, path_prefix="/api/")
    app.add_middleware(BodySizeLimitMiddleware, max_bytes=settings.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origin_regex=cors_origin_regex(
            trusted_prefixes=settings.trusted_origin_prefixes,
            development=settings.is_development,
        ),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(
        OriginGuardMiddleware,
        trusted_prefixes=settings.trusted_origin_prefixes,
        development=settings.is_development,
    )
    app.add_middleware(PrometheusMetricsMiddleware)
    app.add_middleware(HttpLoggingMiddleware)

    register_exception_handlers(app)

    @app.get(
        "/health",
        response_model=HealthOut,
        tags=["health"],
        summary="Health check",
        description=(
            "Lightweight endpoint to verify the process is running. "
            "It does not contact the upstream LLM."
        ),
    )
    async def health() -> HealthOut:
        return HealthOut(status="ok", timestamp=_utc_timestamp())

    app.include_router(metrics_router)
    app.include_router(transcripts_router)
    return app


app = create_app()
