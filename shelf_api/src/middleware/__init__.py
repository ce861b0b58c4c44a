"""FastAPI middleware components.

This package contains custom middleware for request/response logging and
metrics.
"""

from shelf_api.src.middleware.request_logging import (
    CORRELATION_HEADER,
    RequestLoggingMiddleware,
)

__all__ = [
    "CORRELATION_HEADER",
    "RequestLoggingMiddleware",
]
