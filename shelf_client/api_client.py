"""
Async client for the Shelf API.

Calls every route and normalizes responses into the models of
``shelf_client.models``. Any non-2xx answer raises ``ShelfClientError``
carrying the server's ``error`` message.
"""

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import aiohttp
import structlog

from shelf_client.models import (
    Book, BookLookup, HealthStatus, Movie, MovieLookup, Review, User
)

logger = structlog.get_logger(__name__)


class ShelfClientError(Exception):
    """Non-success answer from the API."""

    def __init__(self, status: int, message: str):
        self.status = status
        self.message = message
        super().__init__(f"{status}: {message}")


def _segment(value: str) -> str:
    return quote(value, safe="")


class ShelfClient:
    """
    Shelf API client.

    Use as an async context manager, or pass an existing aiohttp session
    whose lifetime the caller manages.
    """

    def __init__(
        self,
        base_url: str = "http://localhost:3001",
        session: Optional[aiohttp.ClientSession] = None,
        api_prefix: str = "/api"
    ):
        self.base_url = base_url.rstrip("/")
        self.api_prefix = "/" + api_prefix.strip("/")
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> "ShelfClient":
        if self.session is None:
            self.session = aiohttp.ClientSession()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self.session is not None:
            await self.session.close()
            self.session = None

    def url(self, path: str) -> str:
        return f"{self.base_url}{self.api_prefix}{path}"

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        data: Any = None,
        params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        if self.session is None:
            raise RuntimeError("ShelfClient session is not open; use 'async with ShelfClient()'")

        async with self.session.request(
            method, self.url(path), json=json, data=data, params=params
        ) as response:
            try:
                payload = await response.json(content_type=None)
            except ValueError:
                payload = None

            if response.status >= 400:
                message = (payload or {}).get("error") if isinstance(payload, dict) else None
                logger.warning("api_request_failed", method=method, path=path, status_code=response.status)
                raise ShelfClientError(response.status, message or "Request failed")

            return payload if isinstance(payload, dict) else {}

    # ------------------------------------------------------------------
    # Health and accounts
    # ------------------------------------------------------------------

    async def check_health(self) -> HealthStatus:
        return HealthStatus.model_validate(await self._request("GET", "/health"))

    async def register(self, name: str, email: str, password: str) -> User:
        data = await self._request(
            "POST", "/auth/register", json={"name": name, "email": email, "password": password}
        )
        return User.model_validate(data["user"])

    async def login(self, email: str, password: str) -> User:
        data = await self._request("POST", "/auth/login", json={"email": email, "password": password})
        return User.model_validate(data["user"])

    async def update_user(
        self,
        airtable_id: str,
        name: Optional[str] = None,
        email: Optional[str] = None,
        profile_picture: Optional[str] = None
    ) -> User:
        body = {
            key: value
            for key, value in (("name", name), ("email", email), ("profilePicture", profile_picture))
            if value is not None
        }
        data = await self._request("PATCH", f"/users/{_segment(airtable_id)}", json=body)
        return User.model_validate(data["user"])

    async def upload_profile_picture(
        self,
        filename: str,
        content: bytes,
        content_type: str = "application/octet-stream"
    ) -> str:
        """Upload a picture and return its URL path on the server."""
        form = aiohttp.FormData()
        form.add_field("profilePicture", content, filename=filename, content_type=content_type)
        data = await self._request("POST", "/upload/profile-picture", data=form)
        return data["url"]

    # ------------------------------------------------------------------
    # Books
    # ------------------------------------------------------------------

    async def lookup_book_by_isbn(self, isbn: str) -> BookLookup:
        return BookLookup.model_validate(await self._request("GET", f"/books/{_segment(isbn)}"))

    async def lookup_book_by_title(self, title: str) -> BookLookup:
        return BookLookup.model_validate(await self._request("GET", f"/books/title/{_segment(title)}"))

    async def save_book(
        self,
        user_id: str,
        title: str,
        isbn: Optional[str] = None,
        cover: Optional[str] = None
    ) -> Book:
        data = await self._request(
            "POST", "/books/save",
            json={"userId": user_id, "title": title, "isbn": isbn, "cover": cover}
        )
        return Book.model_validate(data["book"])

    async def get_user_books(self, user_id: str) -> List[Book]:
        data = await self._request("GET", f"/books/user/{_segment(user_id)}")
        return [Book.model_validate(item) for item in data.get("books", [])]

    async def delete_book(self, book_id: str) -> bool:
        data = await self._request("DELETE", f"/books/{_segment(book_id)}")
        return bool(data.get("success"))

    # ------------------------------------------------------------------
    # Movies and shows
    # ------------------------------------------------------------------

    async def lookup_movie_by_imdb_id(self, imdb_id: str) -> MovieLookup:
        return MovieLookup.model_validate(await self._request("GET", f"/movies/{_segment(imdb_id)}"))

    async def lookup_movie_by_title(self, title: str) -> MovieLookup:
        return MovieLookup.model_validate(await self._request("GET", f"/movies/title/{_segment(title)}"))

    async def save_movie(
        self,
        user_id: str,
        imdb_id: str,
        title: str,
        poster: Optional[str] = None,
        type: Optional[str] = None,
        year: Optional[str] = None
    ) -> Movie:
        data = await self._request(
            "POST", "/movies/save",
            json={
                "userId": user_id,
                "imdbId": imdb_id,
                "title": title,
                "poster": poster,
                "type": type,
                "year": year,
            }
        )
        return Movie.model_validate(data["movie"])

    async def get_user_movies(self, user_id: str) -> List[Movie]:
        data = await self._request("GET", f"/movies/user/{_segment(user_id)}")
        return [Movie.model_validate(item) for item in data.get("movies", [])]

    async def delete_movie(self, movie_id: str) -> bool:
        data = await self._request("DELETE", f"/movies/{_segment(movie_id)}")
        return bool(data.get("success"))

    # ------------------------------------------------------------------
    # Reviews
    # ------------------------------------------------------------------

    async def create_review(
        self,
        book_id: str,
        user: User,
        review_text: str,
        rating: Optional[float] = None
    ) -> Review:
        """Submit a review, snapshotting the user's current name and picture."""
        data = await self._request(
            "POST", "/reviews",
            json={
                "bookId": book_id,
                "userId": user.id,
                "userName": user.name,
                "userProfilePicture": user.profile_picture,
                "reviewText": review_text,
                "rating": rating,
            }
        )
        return Review.model_validate(data["review"])

    async def get_reviews(self, book_id: str) -> List[Review]:
        data = await self._request("GET", f"/reviews/{_segment(book_id)}")
        return [Review.model_validate(item) for item in data.get("reviews", [])]

    async def get_recent_reviews(self, limit: Optional[int] = None) -> List[Review]:
        params = {"limit": limit} if limit is not None else None
        data = await self._request("GET", "/reviews/recent", params=params)
        return [Review.model_validate(item) for item in data.get("reviews", [])]

    async def delete_review(self, review_id: str) -> bool:
        data = await self._request("DELETE", f"/reviews/{_segment(review_id)}")
        return bool(data.get("success"))
