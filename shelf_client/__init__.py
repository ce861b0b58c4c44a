"""Client-side service layer for the Shelf API."""

from shelf_client.api_client import ShelfClient, ShelfClientError
from shelf_client.models import (
    Book, BookLookup, HealthStatus, Movie, MovieLookup, Review, User
)
from shelf_client.session import SessionContext, SessionStore

__all__ = [
    "ShelfClient",
    "ShelfClientError",
    "SessionContext",
    "SessionStore",
    "User",
    "Book",
    "BookLookup",
    "Movie",
    "MovieLookup",
    "Review",
    "HealthStatus",
]
