"""
Authentication service for user registration, login and profile updates.

Provides:
- Registration with duplicate-email detection
- Credential verification without revealing which credential was wrong
- Partial profile updates
"""

import structlog
from typing import Any, Dict, Optional

from starlette.concurrency import run_in_threadpool

from shelf_api.src.errors import (
    AuthError, ConflictError, Failure, Ok, Result, ValidationError
)
from shelf_api.src.models.auth import UserResponse
from shelf_api.src.repositories.user_repo import UserRepository
from shelf_common.security import PasswordCodec

logger = structlog.get_logger(__name__)


class AuthService:
    """Service for account operations."""

    def __init__(
        self,
        user_repo: UserRepository,
        password_codec: PasswordCodec,
        password_min_length: int = 6
    ):
        """
        Initialize auth service.

        Args:
            user_repo: User repository
            password_codec: Password hasher
            password_min_length: Minimum accepted password length
        """
        self.user_repo = user_repo
        self.password_codec = password_codec
        self.password_min_length = password_min_length

    async def register(
        self,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str]
    ) -> Result[UserResponse]:
        """
        Register a new user.

        Args:
            name: Display name
            email: Email address, must not be in use
            password: Plain text password

        Returns:
            Ok with the created user (no password hash), or Failure with a
            ValidationError, ConflictError or UpstreamError
        """
        if not name or not email or not password:
            return Failure(ValidationError("Name, email, and password are required"))

        if len(password) < self.password_min_length:
            return Failure(ValidationError(
                f"Password must be at least {self.password_min_length} characters long"
            ))

        existing = await self.user_repo.get_user_by_email(email)
        if isinstance(existing, Failure):
            return existing
        if existing.value is not None:
            logger.warning("email_already_exists", email=email)
            return Failure(ConflictError())

        password_hash = await run_in_threadpool(self.password_codec.hash, password)
        created = await self.user_repo.create_user(name, email, password_hash)
        if isinstance(created, Failure):
            return created

        logger.info("user_registered", user_id=created.value.id)
        return Ok(created.value.to_response())

    async def login(self, email: Optional[str], password: Optional[str]) -> Result[UserResponse]:
        """
        Authenticate user with email and password.

        Unknown email and wrong password produce the same AuthError.

        Args:
            email: Email address
            password: Plain text password

        Returns:
            Ok with the user (no password hash), or Failure
        """
        if not email or not password:
            return Failure(ValidationError("Email and password are required"))

        found = await self.user_repo.get_user_by_email(email)
        if isinstance(found, Failure):
            return found

        user = found.value
        if user is None:
            logger.warning("authentication_failed_user_not_found", email=email)
            return Failure(AuthError())

        verified = await run_in_threadpool(self.password_codec.verify, password, user.password_hash or "")
        if not verified:
            logger.warning("authentication_failed_invalid_password", user_id=user.id)
            return Failure(AuthError())

        logger.info("user_authenticated", user_id=user.id)
        return Ok(user.to_response())

    async def update_user(self, record_id: str, fields: Dict[str, Any]) -> Result[UserResponse]:
        """
        Apply a partial profile update.

        Args:
            record_id: Airtable record id of the user
            fields: Any of name, email, profile_picture

        Returns:
            Ok with the updated user, or Failure
        """
        if not record_id or not record_id.strip():
            return Failure(ValidationError("User ID is required"))

        if not fields:
            return Failure(ValidationError("At least one of name, email or profilePicture is required"))

        updated = await self.user_repo.update_user(record_id, fields)
        if isinstance(updated, Failure):
            return updated
        return Ok(updated.value.to_response())
