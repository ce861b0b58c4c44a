"""
Books router.

Open Library lookups by ISBN or title, and the user's saved books.
"""

import structlog
from fastapi import APIRouter, Depends, status

from shelf_api.src.dependencies import get_book_repository, get_open_library_client
from shelf_api.src.errors import Failure, ValidationError, error_response
from shelf_api.src.models.common import DeleteResponse, ErrorResponse
from shelf_api.src.models.media import BookEnvelope, BookList, BookLookup, SaveBookRequest
from shelf_api.src.repositories.book_repo import BookRepository
from shelf_api.src.services.metadata_service import OpenLibraryClient

logger = structlog.get_logger(__name__)

books_router = APIRouter(
    prefix="/books",
    tags=["Books"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error"},
        500: {"model": ErrorResponse, "description": "Upstream Error"}
    }
)


@books_router.post("/save", response_model=BookEnvelope, status_code=status.HTTP_201_CREATED)
async def save_book(
    payload: SaveBookRequest,
    books: BookRepository = Depends(get_book_repository)
):
    """Save a book to a user's shelf. ``userId`` and ``title`` are required."""
    if not payload.user_id or not payload.title:
        return error_response(ValidationError("userId and title are required"))

    result = await books.save_book(
        user_id=payload.user_id,
        title=payload.title,
        isbn=payload.isbn,
        cover=payload.cover,
    )
    if isinstance(result, Failure):
        return error_response(result.error)

    return BookEnvelope(book=result.value)


@books_router.get("/user/{user_id}", response_model=BookList)
async def list_user_books(
    user_id: str,
    books: BookRepository = Depends(get_book_repository)
):
    if not user_id.strip():
        return error_response(ValidationError("User ID is required"))

    result = await books.list_books(user_id)
    if isinstance(result, Failure):
        return error_response(result.error)

    logger.debug("books_listed", user_id=user_id, count=len(result.value))
    return BookList(books=result.value)


@books_router.get(
    "/title/{title}",
    response_model=BookLookup,
    responses={404: {"model": ErrorResponse, "description": "Book not found"}}
)
async def lookup_book_by_title(
    title: str,
    open_library: OpenLibraryClient = Depends(get_open_library_client)
):
    """First Open Library search hit for the title."""
    if not title.strip():
        return error_response(ValidationError("Title is required"))

    logger.info("book_lookup_requested", title=title)
    result = await open_library.by_title(title)
    if isinstance(result, Failure):
        return error_response(result.error)

    return result.value


@books_router.get(
    "/{isbn}",
    response_model=BookLookup,
    responses={404: {"model": ErrorResponse, "description": "Book not found"}}
)
async def lookup_book_by_isbn(
    isbn: str,
    open_library: OpenLibraryClient = Depends(get_open_library_client)
):
    if not isbn.strip():
        return error_response(ValidationError("ISBN is required"))

    logger.info("book_lookup_requested", isbn=isbn)
    result = await open_library.by_isbn(isbn)
    if isinstance(result, Failure):
        return error_response(result.error)

    return result.value


@books_router.delete("/{book_id}", response_model=DeleteResponse)
async def delete_book(
    book_id: str,
    books: BookRepository = Depends(get_book_repository)
):
    """Delete a saved book by its record id."""
    if not book_id.strip():
        return error_response(ValidationError("Book ID is required"))

    result = await books.delete_book(book_id)
    if isinstance(result, Failure):
        return error_response(result.error)

    logger.info("book_deleted", book_id=book_id)
    return DeleteResponse(success=True, message="Book deleted successfully")
