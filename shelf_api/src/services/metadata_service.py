"""
Passthrough metadata lookups against Open Library and OMDb.

Each lookup issues a single GET and reshapes the answer into ``BookLookup``
or ``MovieLookup``. A missing result is a NotFoundError, a transport failure
an UpstreamError; neither raises.
"""

import asyncio
import structlog
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

import aiohttp

from shelf_api.src.errors import Failure, NotFoundError, Ok, Result, UpstreamError
from shelf_api.src.models.media import BookLookup, MovieLookup

logger = structlog.get_logger(__name__)

BOOK_NOT_FOUND = "Book not found"
BOOK_LOOKUP_FAILED = "Failed to fetch book data"
MOVIE_NOT_FOUND = "Movie not found"
MOVIE_LOOKUP_FAILED = "Failed to fetch movie data"


async def fetch_json(
    session: aiohttp.ClientSession,
    url: str,
    params: Optional[List[Tuple[str, str]]] = None
) -> Tuple[int, Any]:
    """
    GET a URL and decode its JSON body.

    Returns:
        (status, payload); payload is None when the body is not JSON

    Raises:
        aiohttp.ClientError: On transport failure
    """
    async with session.get(url, params=params) as response:
        try:
            payload = await response.json(content_type=None)
        except ValueError:
            payload = None
        return response.status, payload


class OpenLibraryClient:
    """Book metadata lookups."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        base_url: str = "https://openlibrary.org",
        covers_url: str = "https://covers.openlibrary.org"
    ):
        self.session = session
        self.base_url = base_url.rstrip("/")
        self.covers_url = covers_url.rstrip("/")

    def isbn_cover(self, isbn: str) -> str:
        return f"{self.covers_url}/b/isbn/{quote(isbn, safe='')}-L.jpg"

    def id_cover(self, cover_id: Any) -> str:
        return f"{self.covers_url}/b/id/{cover_id}-L.jpg"

    async def by_isbn(self, isbn: str) -> Result[BookLookup]:
        """
        Look up an edition by ISBN.

        Args:
            isbn: ISBN-10 or ISBN-13

        Returns:
            Ok with ``{isbn, title, cover}``; NotFoundError if Open Library
            does not know the ISBN
        """
        url = f"{self.base_url}/isbn/{quote(isbn, safe='')}.json"
        try:
            status, payload = await fetch_json(self.session, url)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("book_lookup_failed", isbn=isbn, error=str(e))
            return Failure(UpstreamError(BOOK_LOOKUP_FAILED))

        if status >= 400 or not isinstance(payload, dict):
            logger.info("book_not_found", isbn=isbn, status_code=status)
            return Failure(NotFoundError(BOOK_NOT_FOUND))

        return Ok(BookLookup(isbn=isbn, title=payload.get("title"), cover=self.isbn_cover(isbn)))

    async def by_title(self, title: str) -> Result[BookLookup]:
        """
        Search by title and take the first hit, with or without an ISBN.

        The cover comes from the first ISBN when there is one, else from the
        search document's cover id, else it is empty.
        """
        url = f"{self.base_url}/search.json"
        try:
            status, payload = await fetch_json(self.session, url, params=[("title", title)])
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("book_lookup_failed", title=title, error=str(e))
            return Failure(UpstreamError(BOOK_LOOKUP_FAILED))

        docs = payload.get("docs") if isinstance(payload, dict) else None
        if status >= 400 or not docs:
            logger.info("book_not_found", title=title, status_code=status)
            return Failure(NotFoundError(BOOK_NOT_FOUND))

        doc: Dict[str, Any] = docs[0]
        isbns = doc.get("isbn") or []
        isbn = isbns[0] if isbns else ""
        if isbn:
            cover = self.isbn_cover(isbn)
        elif doc.get("cover_i"):
            cover = self.id_cover(doc["cover_i"])
        else:
            cover = ""

        return Ok(BookLookup(isbn=isbn, title=doc.get("title"), cover=cover))


class OmdbClient:
    """Movie and show metadata lookups."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        api_key: Optional[str],
        api_url: str = "https://www.omdbapi.com/"
    ):
        self.session = session
        self.api_key = api_key
        self.api_url = api_url

    async def _lookup(self, params: List[Tuple[str, str]], log_context: Dict[str, str]) -> Result[MovieLookup]:
        if not self.api_key:
            logger.error("omdb_api_key_missing", **log_context)
            return Failure(UpstreamError("OMDb API key is not configured"))

        try:
            status, payload = await fetch_json(
                self.session, self.api_url, params=params + [("apikey", self.api_key)]
            )
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error("movie_lookup_failed", error=str(e), **log_context)
            return Failure(UpstreamError(MOVIE_LOOKUP_FAILED))

        # OMDb reports misses with HTTP 200 and Response "False"
        if status >= 400 or not isinstance(payload, dict) or payload.get("Response") == "False":
            logger.info("movie_not_found", status_code=status, **log_context)
            return Failure(NotFoundError(MOVIE_NOT_FOUND))

        poster = payload.get("Poster") or ""
        return Ok(MovieLookup(
            imdb_id=payload.get("imdbID") or log_context.get("imdb_id", ""),
            title=payload.get("Title"),
            poster="" if poster == "N/A" else poster,
            type=payload.get("Type"),
            year=payload.get("Year"),
        ))

    async def by_imdb_id(self, imdb_id: str) -> Result[MovieLookup]:
        return await self._lookup([("i", imdb_id)], {"imdb_id": imdb_id})

    async def by_title(self, title: str) -> Result[MovieLookup]:
        return await self._lookup([("t", title)], {"title": title})
