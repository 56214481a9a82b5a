from __future__ import annotations

import time
from typing import cast

from fastapi import APIRouter, Request
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

from transcript_proxy.core.middleware.http_logging import route_label

metrics_router = APIRouter(tags=["monitoring"])

REGISTRY = CollectorRegistry(auto_describe=True)

# Labels use route templates and status codes only, never client IPs or titles.
http_requests_total = Counter(
    "relay_http_requests_total",
    "Total HTTP requests",
    labelnames=("method", "route", "status_code"),
    registry=REGISTRY,
)

http_request_duration_seconds = Histogram(
    "relay_http_request_duration_seconds",
    "HTTP request duration in seconds",
    labelnames=("method", "route", "status_code"),
    # Upstream LLM calls routinely take tens of seconds.
    buckets=(0.01, 0.05, 0.1, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, 120.0),
    registry=REGISTRY,
)


class PrometheusMetricsMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        started = time.perf_counter()
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            labels = {
                "method": request.method,
                "route": route_label(request),
                "status_code": str(int(status_code)),
            }
            http_requests_total.labels(**labels).inc()
            http_request_duration_seconds.labels(**labels).observe(
                time.perf_counter() - started
            )


@metrics_router.get("/metrics", include_in_schema=False)
def metrics() -> Response:
    payload = generate_latest(REGISTRY)
    return Response(content=cast(bytes, payload), media_type=CONTENT_TYPE_LATEST)
