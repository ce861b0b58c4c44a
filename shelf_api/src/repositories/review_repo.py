"""
Review repository.

Reviews keep a snapshot of the reviewer's display name and picture taken at
submission time; later profile edits do not rewrite them.
"""

import structlog
from typing import Any, Dict, List, Optional

from shelf_api.src.errors import Failure, Ok, Result
from shelf_api.src.models.media import Review
from shelf_api.src.repositories.airtable import AirtableClient, utc_timestamp

logger = structlog.get_logger(__name__)


def record_to_review(record: Dict[str, Any]) -> Review:
    fields = record.get("fields", {})
    return Review(
        id=record["id"],
        book_id=fields.get("BookID"),
        user_id=fields.get("UserID"),
        user_name=fields.get("UserName"),
        user_profile_picture=fields.get("UserProfilePicture"),
        review_text=fields.get("ReviewText"),
        rating=fields.get("Rating"),
        created_at=fields.get("CreatedAt"),
    )


class ReviewRepository:
    """Repository for the ``Reviews`` table."""

    def __init__(self, airtable: AirtableClient, table: str = "Reviews"):
        self.airtable = airtable
        self.table = table

    async def create_review(
        self,
        book_id: str,
        user_id: str,
        review_text: str,
        rating: Optional[float] = None,
        user_name: Optional[str] = None,
        user_profile_picture: Optional[str] = None
    ) -> Result[Review]:
        result = await self.airtable.create_record(
            self.table,
            {
                "BookID": book_id,
                "UserID": user_id,
                "UserName": user_name or "",
                "UserProfilePicture": user_profile_picture or "",
                "ReviewText": review_text,
                "Rating": rating,
                "CreatedAt": utc_timestamp(),
            },
            fallback_message="Failed to save review"
        )
        if isinstance(result, Failure):
            return result

        review = record_to_review(result.value)
        logger.info("review_created", review_id=review.id, book_id=book_id, user_id=user_id)
        return Ok(review)

    async def list_reviews_for_book(self, book_id: str) -> Result[List[Review]]:
        result = await self.airtable.list_records(
            self.table,
            filters={"BookID": book_id},
            sort=[("CreatedAt", "desc")],
            fallback_message="Failed to fetch reviews"
        )
        if isinstance(result, Failure):
            return result
        return Ok([record_to_review(record) for record in result.value])

    async def list_recent_reviews(self, limit: int) -> Result[List[Review]]:
        """Newest reviews across all books."""
        result = await self.airtable.list_records(
            self.table,
            sort=[("CreatedAt", "desc")],
            max_records=limit,
            fallback_message="Failed to fetch reviews"
        )
        if isinstance(result, Failure):
            return result
        return Ok([record_to_review(record) for record in result.value])

    async def delete_review(self, review_id: str) -> Result[Dict[str, Any]]:
        return await self.airtable.delete_record(
            self.table, review_id, fallback_message="Failed to delete review"
        )
