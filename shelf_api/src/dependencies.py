"""
FastAPI dependency injection for clients, repositories and services.

Everything is built from the immutable ``Settings`` value and the shared
aiohttp session that the application factory stores on ``app.state``; no
module-level configuration is read here. Tests replace
``get_airtable_client``, ``get_open_library_client`` and
``get_omdb_client`` through ``app.dependency_overrides``.
"""

import aiohttp
import structlog
from fastapi import Depends, Request

from shelf_api.src.config import Settings
from shelf_api.src.errors import InternalError
from shelf_api.src.repositories.airtable import AirtableClient
from shelf_api.src.repositories.book_repo import BookRepository
from shelf_api.src.repositories.movie_repo import MovieRepository
from shelf_api.src.repositories.review_repo import ReviewRepository
from shelf_api.src.repositories.user_repo import UserRepository
from shelf_api.src.services.auth_service import AuthService
from shelf_api.src.services.metadata_service import OmdbClient, OpenLibraryClient
from shelf_api.src.services.upload_service import ProfilePictureStorage
from shelf_common.security import PasswordCodec

logger = structlog.get_logger(__name__)


# ============================================================================
# APPLICATION STATE
# ============================================================================


def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_http_session(request: Request) -> aiohttp.ClientSession:
    """
    Shared outbound HTTP session.

    Raises:
        InternalError: If the application lifespan has not opened it
    """
    session = getattr(request.app.state, "http_session", None)
    if session is None:
        logger.error("http_session_not_initialized")
        raise InternalError("HTTP session not initialized")
    return session


def get_password_codec(request: Request) -> PasswordCodec:
    return request.app.state.password_codec


def get_upload_storage(request: Request) -> ProfilePictureStorage:
    return request.app.state.upload_storage


# ============================================================================
# EXTERNAL CLIENTS
# ============================================================================


def get_airtable_client(
    settings: Settings = Depends(get_app_settings),
    session: aiohttp.ClientSession = Depends(get_http_session)
) -> AirtableClient:
    return AirtableClient(
        session=session,
        base_id=settings.airtable_base_id or "",
        api_key=settings.airtable_api_key or "",
        api_url=settings.airtable_api_url,
    )


def get_open_library_client(
    settings: Settings = Depends(get_app_settings),
    session: aiohttp.ClientSession = Depends(get_http_session)
) -> OpenLibraryClient:
    return OpenLibraryClient(
        session=session,
        base_url=settings.open_library_url,
        covers_url=settings.open_library_covers_url,
    )


def get_omdb_client(
    settings: Settings = Depends(get_app_settings),
    session: aiohttp.ClientSession = Depends(get_http_session)
) -> OmdbClient:
    return OmdbClient(
        session=session,
        api_key=settings.omdb_api_key,
        api_url=settings.omdb_api_url,
    )


# ============================================================================
# REPOSITORIES
# ============================================================================


def get_user_repository(
    airtable: AirtableClient = Depends(get_airtable_client),
    settings: Settings = Depends(get_app_settings)
) -> UserRepository:
    return UserRepository(airtable, table=settings.airtable_table_name)


def get_book_repository(
    airtable: AirtableClient = Depends(get_airtable_client),
    settings: Settings = Depends(get_app_settings)
) -> BookRepository:
    return BookRepository(airtable, table=settings.airtable_books_table)


def get_movie_repository(
    airtable: AirtableClient = Depends(get_airtable_client),
    settings: Settings = Depends(get_app_settings)
) -> MovieRepository:
    return MovieRepository(airtable, table=settings.airtable_movies_table)


def get_review_repository(
    airtable: AirtableClient = Depends(get_airtable_client),
    settings: Settings = Depends(get_app_settings)
) -> ReviewRepository:
    return ReviewRepository(airtable, table=settings.airtable_reviews_table)


# ============================================================================
# SERVICES
# ============================================================================


def get_auth_service(
    user_repo: UserRepository = Depends(get_user_repository),
    password_codec: PasswordCodec = Depends(get_password_codec),
    settings: Settings = Depends(get_app_settings)
) -> AuthService:
    return AuthService(
        user_repo=user_repo,
        password_codec=password_codec,
        password_min_length=settings.password_min_length,
    )
