"""
Error taxonomy and result types.

Every failure a request can meet is normalized to a ``ServiceError`` subclass
carrying the HTTP status it maps to. Resource clients do not raise these:
they return ``Ok`` or ``Failure`` and the route handlers decide what to do
with each variant.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

from fastapi import status
from fastapi.responses import JSONResponse

T = TypeVar("T")


class ServiceError(Exception):
    """Base class for errors that are rendered as ``{"error": message}``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ServiceError):
    """Missing or malformed input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class AuthError(ServiceError):
    """Bad credentials. The message never says which credential was wrong."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Invalid email or password"


class ConflictError(ServiceError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "User with this email already exists"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class UpstreamError(ServiceError):
    """External API answered with a non-success status or was unreachable."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "External service request failed"


class InternalError(ServiceError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message = "Internal server error"


class ConfigurationError(Exception):
    """Invalid boot-time configuration. Aborts startup."""


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful resource client outcome."""

    value: T

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Failed resource client outcome."""

    error: ServiceError

    def unwrap(self):
        raise self.error


Result = Union[Ok[T], Failure]


def error_response(error: ServiceError) -> JSONResponse:
    """Render a ServiceError as ``{"error": message}`` with its status code."""
    return JSONResponse(status_code=error.status_code, content={"error": error.message})
