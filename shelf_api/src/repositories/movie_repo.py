"""
Movie repository for saved movies and shows.
"""

import structlog
from typing import Any, Dict, List, Optional

from shelf_api.src.errors import Failure, Ok, Result
from shelf_api.src.models.media import Movie
from shelf_api.src.repositories.airtable import AirtableClient, utc_timestamp

logger = structlog.get_logger(__name__)


def record_to_movie(record: Dict[str, Any]) -> Movie:
    fields = record.get("fields", {})
    year = fields.get("Year")
    return Movie(
        id=record["id"],
        user_id=fields.get("UserID"),
        imdb_id=fields.get("IMDbID"),
        title=fields.get("Title"),
        poster=fields.get("Poster"),
        type=fields.get("Type"),
        year=str(year) if year is not None else None,
        saved_at=fields.get("SavedAt"),
    )


class MovieRepository:
    """Repository for the ``Movies`` table."""

    def __init__(self, airtable: AirtableClient, table: str = "Movies"):
        self.airtable = airtable
        self.table = table

    async def save_movie(
        self,
        user_id: str,
        imdb_id: str,
        title: str,
        poster: Optional[str] = None,
        type: Optional[str] = None,
        year: Optional[str] = None
    ) -> Result[Movie]:
        result = await self.airtable.create_record(
            self.table,
            {
                "UserID": user_id,
                "IMDbID": imdb_id,
                "Title": title,
                "Poster": poster or "",
                "Type": type or "",
                "Year": year or "",
                "SavedAt": utc_timestamp(),
            },
            fallback_message="Failed to save movie/show"
        )
        if isinstance(result, Failure):
            return result

        movie = record_to_movie(result.value)
        logger.info("movie_saved", movie_id=movie.id, imdb_id=imdb_id, user_id=user_id)
        return Ok(movie)

    async def list_movies(self, user_id: str) -> Result[List[Movie]]:
        result = await self.airtable.list_records(
            self.table, filters={"UserID": user_id}, fallback_message="Failed to fetch movies/shows"
        )
        if isinstance(result, Failure):
            return result
        return Ok([record_to_movie(record) for record in result.value])

    async def delete_movie(self, movie_id: str) -> Result[Dict[str, Any]]:
        return await self.airtable.delete_record(
            self.table, movie_id, fallback_message="Failed to delete movie/show"
        )
