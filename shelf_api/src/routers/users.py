"""
User profile router: partial updates and profile picture uploads.
"""

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, File, UploadFile, status

from shelf_api.src.dependencies import get_auth_service, get_upload_storage
from shelf_api.src.errors import Failure, ValidationError, error_response
from shelf_api.src.models.auth import UpdateUserRequest, UploadResponse, UserEnvelope
from shelf_api.src.models.common import ErrorResponse
from shelf_api.src.services.auth_service import AuthService
from shelf_api.src.services.upload_service import ProfilePictureStorage

logger = structlog.get_logger(__name__)

users_router = APIRouter(
    tags=["Users"],
    responses={
        400: {"model": ErrorResponse, "description": "Validation Error"},
        500: {"model": ErrorResponse, "description": "Upstream Error"}
    }
)


@users_router.patch(
    "/users/{user_id}",
    response_model=UserEnvelope,
    status_code=status.HTTP_200_OK,
    summary="Update profile"
)
async def update_user(
    user_id: str,
    payload: UpdateUserRequest,
    auth_service: AuthService = Depends(get_auth_service)
):
    """
    Update any of name, email and profilePicture.

    ``user_id`` is the record store id (``airtableId``). Only fields present
    in the body are written.
    """
    fields = payload.model_dump(exclude_unset=True, exclude_none=True)
    logger.info("user_update_requested", airtable_id=user_id, fields=sorted(fields))

    result = await auth_service.update_user(user_id, fields)
    if isinstance(result, Failure):
        return error_response(result.error)

    return UserEnvelope(user=result.value)


@users_router.post(
    "/upload/profile-picture",
    response_model=UploadResponse,
    status_code=status.HTTP_200_OK,
    summary="Upload profile picture"
)
async def upload_profile_picture(
    profile_picture: Optional[UploadFile] = File(None, alias="profilePicture"),
    storage: ProfilePictureStorage = Depends(get_upload_storage)
):
    """
    Store a multipart ``profilePicture`` file and return its public URL path.
    """
    if profile_picture is None or not profile_picture.filename:
        logger.warning("profile_picture_missing")
        return error_response(ValidationError("No file uploaded"))

    content = await profile_picture.read()
    url = storage.save(profile_picture.filename, content)
    logger.info("profile_picture_uploaded", url=url, content_type=profile_picture.content_type)

    return UploadResponse(url=url)
