"""Record store access.

``AirtableClient`` speaks the Airtable REST API; the per-table repositories
map store fields to API models.
"""

from shelf_api.src.repositories.airtable import AirtableClient
from shelf_api.src.repositories.book_repo import BookRepository
from shelf_api.src.repositories.movie_repo import MovieRepository
from shelf_api.src.repositories.review_repo import ReviewRepository
from shelf_api.src.repositories.user_repo import UserRepository

__all__ = [
    "AirtableClient",
    "BookRepository",
    "MovieRepository",
    "ReviewRepository",
    "UserRepository",
]
