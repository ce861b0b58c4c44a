"""
Reviews router.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, status

from shelf_api.src.config import Settings
from shelf_api.src.dependencies import get_app_settings, get_review_repository
from shelf_api.src.errors import Failure, ValidationError, error_response
from shelf_api.src.models.common import DeleteResponse, ErrorResponse
from shelf_api.src.models.media import CreateReviewRequest, ReviewEnvelope, ReviewList
from shelf_api.src.repositories.review_repo import ReviewRepository

logger = structlog.get_logger(__name__)

reviews_router = APIRouter(
    prefix="/reviews",
    tags=["Reviews"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error"},
        500: {"model": ErrorResponse, "description": "Upstream Error"}
    }
)


@reviews_router.post("", response_model=ReviewEnvelope, status_code=status.HTTP_201_CREATED)
async def create_review(
    payload: CreateReviewRequest,
    reviews: ReviewRepository = Depends(get_review_repository)
):
    """
    Submit a review. ``bookId``, ``userId`` and ``reviewText`` are required;
    ``rating`` (1-5), ``userName`` and ``userProfilePicture`` are optional.
    """
    if not payload.book_id or not payload.user_id or not payload.review_text:
        return error_response(ValidationError("bookId, userId, and reviewText are required"))

    result = await reviews.create_review(
        book_id=payload.book_id,
        user_id=payload.user_id,
        review_text=payload.review_text,
        rating=payload.rating,
        user_name=payload.user_name,
        user_profile_picture=payload.user_profile_picture,
    )
    if isinstance(result, Failure):
        return error_response(result.error)

    return ReviewEnvelope(review=result.value)


# Declared before /{book_id} so "recent" is not taken for a book id
@reviews_router.get("/recent", response_model=ReviewList)
async def list_recent_reviews(
    limit: Optional[int] = Query(None, ge=1, le=100),
    reviews: ReviewRepository = Depends(get_review_repository),
    settings: Settings = Depends(get_app_settings)
):
    """Newest reviews across all books."""
    limit = limit or settings.recent_reviews_limit
    logger.debug("recent_reviews_requested", limit=limit)

    result = await reviews.list_recent_reviews(limit)
    if isinstance(result, Failure):
        return error_response(result.error)

    return ReviewList(reviews=result.value)


@reviews_router.get("/{book_id}", response_model=ReviewList)
async def list_book_reviews(
    book_id: str,
    reviews: ReviewRepository = Depends(get_review_repository)
):
    result = await reviews.list_reviews_for_book(book_id)
    if isinstance(result, Failure):
        return error_response(result.error)

    return ReviewList(reviews=result.value)


@reviews_router.delete("/{review_id}", response_model=DeleteResponse)
async def delete_review(
    review_id: str,
    reviews: ReviewRepository = Depends(get_review_repository)
):
    if not review_id.strip():
        return error_response(ValidationError("Review ID is required"))

    result = await reviews.delete_review(review_id)
    if isinstance(result, Failure):
        return error_response(result.error)

    logger.info("review_deleted", review_id=review_id)
    return DeleteResponse(success=True, message="Review deleted successfully")
