"""
FastAPI application entry point for the Shelf API.

This module provides the application factory with:
- Health and metrics endpoints
- Auth, user, book, movie and review routers
- Request logging with correlation IDs and Prometheus metrics
- Permissive CORS for the companion client
- A shared aiohttp session for outbound calls
- Fail-fast configuration validation at process start
"""

import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import aiohttp
import structlog
import uvicorn
from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.exceptions import HTTPException as StarletteHTTPException

from shelf_api.src.config import Settings, get_settings, validate_store_credentials
from shelf_api.src.errors import ConfigurationError, ServiceError, error_response
from shelf_api.src.middleware import RequestLoggingMiddleware
from shelf_api.src.models.common import HealthResponse
from shelf_api.src.routers import (
    auth_router, books_router, movies_router, reviews_router, users_router
)
from shelf_api.src.services.upload_service import ProfilePictureStorage
from shelf_common.logging import configure_logging
from shelf_common.security import PasswordCodec

logger = structlog.get_logger(__name__)


def format_validation_error(exc: RequestValidationError) -> str:
    """Summarize the first request validation error as one sentence."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    first = errors[0]
    if first.get("type") == "json_invalid":
        return "Request body is not valid JSON"

    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid value")
    return f"{field}: {message}" if field else message


# ============================================================================
# Lifespan Management
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan manager.

    Opens the shared outbound HTTP session on startup and closes it on
    shutdown.
    """
    settings: Settings = app.state.settings
    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        airtable_base=settings.airtable_base_id,
        users_table=settings.airtable_table_name
    )

    app.state.http_session = aiohttp.ClientSession()
    logger.info("application_started")

    try:
        yield
    finally:
        logger.info("application_shutting_down")
        await app.state.http_session.close()
        app.state.http_session = None
        logger.info("application_shutdown_complete")


# ============================================================================
# Application Factory
# ============================================================================

def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Immutable configuration; loaded from the environment and
            checked with ``validate_store_credentials`` when omitted, as
            under ``uvicorn --factory``

    Returns:
        Configured application

    Raises:
        ConfigurationError: If settings were loaded here and the Airtable
            credentials are missing or malformed
    """
    if settings is None:
        settings = get_settings()
        validate_store_credentials(settings)

    configure_logging(
        log_level=settings.log_level,
        json_logs=settings.log_format == "json",
        service_name=settings.app_name,
    )

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description=(
            "Backend for saved books, movies/shows and reviews. Records live "
            "in Airtable; metadata comes from Open Library and OMDb."
        ),
        lifespan=lifespan,
        debug=settings.debug,
    )

    app.state.settings = settings
    app.state.http_session = None
    app.state.password_codec = PasswordCodec(rounds=settings.password_bcrypt_rounds)
    app.state.upload_storage = ProfilePictureStorage(
        upload_dir=settings.upload_dir,
        url_path=settings.upload_url_path,
    )

    # ========================================================================
    # Middleware
    # ========================================================================

    # CORS is added last so it wraps request logging and its 500 responses
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ========================================================================
    # Exception Handlers
    # ========================================================================

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed bodies and parameters are client errors (400)."""
        logger.warning(
            "validation_error",
            path=request.url.path,
            errors=exc.errors()
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": format_validation_error(exc)}
        )

    @app.exception_handler(ServiceError)
    async def service_exception_handler(request: Request, exc: ServiceError):
        logger.warning(
            "service_error",
            path=request.url.path,
            status_code=exc.status_code,
            error=exc.message
        )
        return error_response(exc)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        logger.warning(
            "http_exception",
            path=request.url.path,
            status_code=exc.status_code,
            detail=exc.detail
        )
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": str(exc.detail)}
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions."""
        logger.error(
            "unexpected_exception",
            path=request.url.path,
            error=str(exc),
            exc_info=True
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal server error"}
        )

    # ========================================================================
    # Health and Metrics
    # ========================================================================

    @app.get(f"{settings.api_prefix}/health", tags=["Health"], response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """
        Static status plus configuration presence flags.

        Does not contact any upstream service, so it answers 200 whatever
        their state.
        """
        return HealthResponse(
            airtable_configured=settings.airtable_configured,
            omdb_configured=settings.omdb_configured,
        )

    if settings.metrics_enabled:
        @app.get("/metrics", tags=["Monitoring"], response_class=PlainTextResponse)
        async def metrics() -> Response:
            """Prometheus metrics endpoint."""
            return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    # ========================================================================
    # Routers and Static Files
    # ========================================================================

    for router in (auth_router, users_router, books_router, movies_router, reviews_router):
        app.include_router(router, prefix=settings.api_prefix)

    app.mount(
        settings.upload_url_path,
        StaticFiles(directory=settings.upload_dir),
        name="uploads",
    )

    return app


# ============================================================================
# Application Entry Point
# ============================================================================

def main() -> None:
    """
    Validate configuration and serve the API with Uvicorn.

    Exits with status 1 when the Airtable credentials are missing or
    malformed.
    """
    settings = get_settings()
    configure_logging(log_level=settings.log_level, json_logs=settings.log_format == "json")

    try:
        validate_store_credentials(settings)
    except ConfigurationError as e:
        logger.error("configuration_invalid", error=str(e))
        sys.exit(1)

    logger.info("configuration_validated", host=settings.host, port=settings.port)

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        access_log=True,
    )


if __name__ == "__main__":
    main()
