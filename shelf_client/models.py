"""Typed shapes returned by ``ShelfClient``."""

from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ClientModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class User(ClientModel):
    id: str
    airtable_id: Optional[str] = None
    email: Optional[str] = None
    name: Optional[str] = None
    created_at: Optional[str] = None
    profile_picture: Optional[str] = None


class BookLookup(ClientModel):
    isbn: str = ""
    title: Optional[str] = None
    cover: str = ""


class Book(ClientModel):
    id: str
    user_id: Optional[str] = None
    isbn: Optional[str] = None
    title: Optional[str] = None
    cover: Optional[str] = None
    saved_at: Optional[str] = None


class MovieLookup(ClientModel):
    imdb_id: str
    title: Optional[str] = None
    poster: str = ""
    type: Optional[str] = None
    year: Optional[str] = None


class Movie(ClientModel):
    id: str
    user_id: Optional[str] = None
    imdb_id: Optional[str] = None
    title: Optional[str] = None
    poster: Optional[str] = None
    type: Optional[str] = None
    year: Optional[str] = None
    saved_at: Optional[str] = None


class Review(ClientModel):
    id: str
    book_id: Optional[str] = None
    user_id: Optional[str] = None
    user_name: Optional[str] = None
    user_profile_picture: Optional[str] = None
    review_text: Optional[str] = None
    rating: Optional[float] = None
    created_at: Optional[str] = None


class HealthStatus(ClientModel):
    status: str
    message: Optional[str] = None
    airtable_configured: bool = False
    omdb_configured: bool = False
