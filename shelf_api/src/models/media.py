"""
Book, movie and review models.

Shapes follow the JSON the companion client exchanges with the API
(camelCase keys); the record store field names live in the repositories.
"""

from typing import List, Optional

from pydantic import Field

from shelf_api.src.models.common import CamelModel


# ============================================================================
# Books
# ============================================================================


class BookLookup(CamelModel):
    """Book metadata from Open Library."""
    isbn: str = ""
    title: Optional[str] = None
    cover: str = ""


class SaveBookRequest(CamelModel):
    user_id: Optional[str] = Field(None, description="Owning user ID")
    isbn: Optional[str] = Field(None, description="ISBN, may be empty")
    title: Optional[str] = Field(None, description="Book title")
    cover: Optional[str] = Field(None, description="Cover image URL")


class Book(CamelModel):
    id: str
    user_id: Optional[str] = None
    isbn: Optional[str] = None
    title: Optional[str] = None
    cover: Optional[str] = None
    saved_at: Optional[str] = None


class BookEnvelope(CamelModel):
    book: Book


class BookList(CamelModel):
    books: List[Book]


# ============================================================================
# Movies and shows
# ============================================================================


class MovieLookup(CamelModel):
    """Movie or show metadata from OMDb."""
    imdb_id: str
    title: Optional[str] = None
    poster: str = ""
    type: Optional[str] = None
    year: Optional[str] = None


class SaveMovieRequest(CamelModel):
    user_id: Optional[str] = None
    imdb_id: Optional[str] = None
    title: Optional[str] = None
    poster: Optional[str] = None
    type: Optional[str] = None
    year: Optional[str] = None


class Movie(CamelModel):
    id: str
    user_id: Optional[str] = None
    imdb_id: Optional[str] = None
    title: Optional[str] = None
    poster: Optional[str] = None
    type: Optional[str] = None
    year: Optional[str] = None
    saved_at: Optional[str] = None


class MovieEnvelope(CamelModel):
    movie: Movie


class MovieList(CamelModel):
    movies: List[Movie]


# ============================================================================
# Reviews
# ============================================================================


class CreateReviewRequest(CamelModel):
    book_id: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = Field(None, description="Reviewer display name at submission time")
    user_profile_picture: Optional[str] = Field(None, description="Reviewer picture at submission time")
    review_text: Optional[str] = None
    rating: Optional[float] = Field(None, ge=1, le=5)


class Review(CamelModel):
    id: str
    book_id: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    user_profile_picture: Optional[str] = None
    review_text: Optional[str] = None
    rating: Optional[float] = None
    created_at: Optional[str] = None


class ReviewEnvelope(CamelModel):
    review: Review


class ReviewList(CamelModel):
    reviews: List[Review]
