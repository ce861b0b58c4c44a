"""
Book repository for saved books.
"""

import structlog
from typing import Any, Dict, List, Optional

from shelf_api.src.errors import Failure, Ok, Result
from shelf_api.src.models.media import Book
from shelf_api.src.repositories.airtable import AirtableClient, utc_timestamp

logger = structlog.get_logger(__name__)


def record_to_book(record: Dict[str, Any]) -> Book:
    fields = record.get("fields", {})
    return Book(
        id=record["id"],
        user_id=fields.get("UserID"),
        isbn=fields.get("ISBN"),
        title=fields.get("Title"),
        cover=fields.get("Cover"),
        saved_at=fields.get("SavedAt"),
    )


class BookRepository:
    """Repository for the ``Books`` table."""

    def __init__(self, airtable: AirtableClient, table: str = "Books"):
        self.airtable = airtable
        self.table = table

    async def save_book(
        self,
        user_id: str,
        title: str,
        isbn: Optional[str] = None,
        cover: Optional[str] = None
    ) -> Result[Book]:
        result = await self.airtable.create_record(
            self.table,
            {
                "UserID": user_id,
                "ISBN": isbn or "",
                "Title": title,
                "Cover": cover or "",
                "SavedAt": utc_timestamp(),
            },
            fallback_message="Failed to save book"
        )
        if isinstance(result, Failure):
            return result

        book = record_to_book(result.value)
        logger.info("book_saved", book_id=book.id, user_id=user_id)
        return Ok(book)

    async def list_books(self, user_id: str) -> Result[List[Book]]:
        result = await self.airtable.list_records(
            self.table, filters={"UserID": user_id}, fallback_message="Failed to fetch books"
        )
        if isinstance(result, Failure):
            return result
        return Ok([record_to_book(record) for record in result.value])

    async def delete_book(self, book_id: str) -> Result[Dict[str, Any]]:
        return await self.airtable.delete_record(
            self.table, book_id, fallback_message="Failed to delete book"
        )
