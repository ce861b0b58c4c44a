"""API routers, mounted under the API prefix by the application factory."""

from shelf_api.src.routers.auth import auth_router
from shelf_api.src.routers.books import books_router
from shelf_api.src.routers.movies import movies_router
from shelf_api.src.routers.reviews import reviews_router
from shelf_api.src.routers.users import users_router

__all__ = [
    "auth_router",
    "books_router",
    "movies_router",
    "reviews_router",
    "users_router",
]
