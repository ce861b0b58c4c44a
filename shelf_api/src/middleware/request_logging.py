"""
Request logging and metrics middleware.

Binds a correlation ID to every log entry emitted while a request is being
served and echoes it back in the response. Metrics are labelled with the
matched route template (``/api/books/user/{user_id}``) rather than the raw
path, so record ids never become label values.

Unexpected exceptions become a 500 ``{"error": ...}`` response here, inside
the CORS layer.
"""

import time
import uuid

import structlog
from fastapi import Request, status
from fastapi.responses import JSONResponse
from prometheus_client import Counter, Gauge, Histogram
from starlette.middleware.base import BaseHTTPMiddleware

from shelf_common.logging import bind_context, unbind_context

logger = structlog.get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"
UNMATCHED_ROUTE = "unmatched"
INTERNAL_ERROR_MESSAGE = "Internal server error"

# ============================================================================
# Prometheus Metrics
# ============================================================================

http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "route", "status"]
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "route"]
)

http_requests_in_flight = Gauge(
    "http_requests_in_flight",
    "HTTP requests currently being served"
)


def route_template(request: Request) -> str:
    """Path template of the matched route, or a fixed label when none matched."""
    route = request.scope.get("route")
    return getattr(route, "path", None) or UNMATCHED_ROUTE


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Correlation IDs, request logs and request metrics."""

    async def dispatch(self, request: Request, call_next):
        correlation_id = request.headers.get(CORRELATION_HEADER) or uuid.uuid4().hex
        bind_context(correlation_id=correlation_id)
        http_requests_in_flight.inc()

        try:
            return await self._serve(request, call_next, correlation_id)
        finally:
            http_requests_in_flight.dec()
            unbind_context("correlation_id")

    async def _serve(self, request: Request, call_next, correlation_id: str):
        method = request.method
        started = time.perf_counter()

        logger.debug("request_started", method=method, path=request.url.path)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "request_failed",
                method=method,
                path=request.url.path,
                error=str(e),
                exc_info=True
            )
            response = JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"error": INTERNAL_ERROR_MESSAGE}
            )

        duration = time.perf_counter() - started
        route = route_template(request)

        http_requests_total.labels(method=method, route=route, status=response.status_code).inc()
        http_request_duration_seconds.labels(method=method, route=route).observe(duration)

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "request_completed",
            method=method,
            path=request.url.path,
            route=route,
            status_code=response.status_code,
            duration_ms=round(duration * 1000, 1)
        )

        response.headers[CORRELATION_HEADER] = correlation_id
        return response
