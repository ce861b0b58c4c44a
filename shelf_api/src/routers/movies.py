"""
Movies router.

OMDb lookups by IMDb id or title, and the user's saved movies and shows.
"""

import structlog
from fastapi import APIRouter, Depends, status

from shelf_api.src.dependencies import get_movie_repository, get_omdb_client
from shelf_api.src.errors import Failure, ValidationError, error_response
from shelf_api.src.models.common import DeleteResponse, ErrorResponse
from shelf_api.src.models.media import MovieEnvelope, MovieList, MovieLookup, SaveMovieRequest
from shelf_api.src.repositories.movie_repo import MovieRepository
from shelf_api.src.services.metadata_service import OmdbClient

logger = structlog.get_logger(__name__)

movies_router = APIRouter(
    prefix="/movies",
    tags=["Movies"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error"},
        500: {"model": ErrorResponse, "description": "Upstream Error"}
    }
)


@movies_router.post("/save", response_model=MovieEnvelope, status_code=status.HTTP_201_CREATED)
async def save_movie(
    payload: SaveMovieRequest,
    movies: MovieRepository = Depends(get_movie_repository)
):
    """Save a movie or show. ``userId``, ``imdbId`` and ``title`` are required."""
    if not payload.user_id or not payload.imdb_id or not payload.title:
        return error_response(ValidationError("userId, imdbId and title are required"))

    result = await movies.save_movie(
        user_id=payload.user_id,
        imdb_id=payload.imdb_id,
        title=payload.title,
        poster=payload.poster,
        type=payload.type,
        year=payload.year,
    )
    if isinstance(result, Failure):
        return error_response(result.error)

    return MovieEnvelope(movie=result.value)


@movies_router.get("/user/{user_id}", response_model=MovieList)
async def list_user_movies(
    user_id: str,
    movies: MovieRepository = Depends(get_movie_repository)
):
    if not user_id.strip():
        return error_response(ValidationError("User ID is required"))

    result = await movies.list_movies(user_id)
    if isinstance(result, Failure):
        return error_response(result.error)

    logger.debug("movies_listed", user_id=user_id, count=len(result.value))
    return MovieList(movies=result.value)


@movies_router.get(
    "/title/{title}",
    response_model=MovieLookup,
    responses={404: {"model": ErrorResponse, "description": "Movie not found"}}
)
async def lookup_movie_by_title(
    title: str,
    omdb: OmdbClient = Depends(get_omdb_client)
):
    if not title.strip():
        return error_response(ValidationError("Title is required"))

    logger.info("movie_lookup_requested", title=title)
    result = await omdb.by_title(title)
    if isinstance(result, Failure):
        return error_response(result.error)

    return result.value


@movies_router.get(
    "/{imdb_id}",
    response_model=MovieLookup,
    responses={404: {"model": ErrorResponse, "description": "Movie not found"}}
)
async def lookup_movie_by_imdb_id(
    imdb_id: str,
    omdb: OmdbClient = Depends(get_omdb_client)
):
    if not imdb_id.strip():
        return error_response(ValidationError("IMDb ID is required"))

    logger.info("movie_lookup_requested", imdb_id=imdb_id)
    result = await omdb.by_imdb_id(imdb_id)
    if isinstance(result, Failure):
        return error_response(result.error)

    return result.value


@movies_router.delete("/{movie_id}", response_model=DeleteResponse)
async def delete_movie(
    movie_id: str,
    movies: MovieRepository = Depends(get_movie_repository)
):
    if not movie_id.strip():
        return error_response(ValidationError("Movie ID is required"))

    result = await movies.delete_movie(movie_id)
    if isinstance(result, Failure):
        return error_response(result.error)

    logger.info("movie_deleted", movie_id=movie_id)
    return DeleteResponse(success=True, message="Movie/show deleted successfully")
