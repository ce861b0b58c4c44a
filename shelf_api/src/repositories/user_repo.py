"""
User repository for record store operations.

Maps between the Airtable ``Users`` table fields and ``UserDB``.
"""

import structlog
from typing import Any, Dict, Optional

from shelf_api.src.errors import Failure, Ok, Result
from shelf_api.src.models.auth import UserDB
from shelf_api.src.repositories.airtable import AirtableClient, utc_timestamp

logger = structlog.get_logger(__name__)


def record_to_user(record: Dict[str, Any]) -> UserDB:
    """
    Convert an Airtable user record to ``UserDB``.

    ``id`` is the table's autonumber ``User ID`` when the base defines one,
    otherwise the record id.
    """
    fields = record.get("fields", {})
    user_number = fields.get("User ID")
    return UserDB(
        id=str(user_number) if user_number is not None else record["id"],
        airtable_id=record["id"],
        name=fields.get("Name"),
        email=fields.get("Email"),
        password_hash=fields.get("Password"),
        created_at=fields.get("CreatedAt"),
        profile_picture=fields.get("ProfilePicture"),
    )


class UserRepository:
    """Repository for user records."""

    def __init__(self, airtable: AirtableClient, table: str = "Users"):
        """
        Initialize user repository.

        Args:
            airtable: Airtable client
            table: Users table name
        """
        self.airtable = airtable
        self.table = table

    async def get_user_by_email(self, email: str) -> Result[Optional[UserDB]]:
        """
        Get user by email (exact, case-sensitive match).

        Args:
            email: Email address

        Returns:
            Ok with the user, Ok(None) if no record matches
        """
        result = await self.airtable.find_first(
            self.table, {"Email": email}, fallback_message="Failed to fetch user"
        )
        if isinstance(result, Failure):
            return result
        if result.value is None:
            logger.debug("user_not_found", email=email)
            return Ok(None)
        return Ok(record_to_user(result.value))

    async def create_user(self, name: str, email: str, password_hash: str) -> Result[UserDB]:
        """
        Create a new user record.

        Args:
            name: Display name
            email: Email address
            password_hash: Hashed password

        Returns:
            Ok with the created user
        """
        result = await self.airtable.create_record(
            self.table,
            {
                "Name": name,
                "Email": email,
                "Password": password_hash,
                "CreatedAt": utc_timestamp(),
            },
            fallback_message="Registration failed"
        )
        if isinstance(result, Failure):
            return result

        user = record_to_user(result.value)
        logger.info("user_created", user_id=user.id, airtable_id=user.airtable_id)
        return Ok(user)

    async def update_user(self, record_id: str, fields: Dict[str, Any]) -> Result[UserDB]:
        """
        Partially update a user record.

        Args:
            record_id: Airtable record id
            fields: Local field name to new value (name, email, profile_picture)

        Returns:
            Ok with the updated user
        """
        field_map = {"name": "Name", "email": "Email", "profile_picture": "ProfilePicture"}
        store_fields = {field_map[key]: value for key, value in fields.items() if key in field_map}

        result = await self.airtable.update_record(
            self.table, record_id, store_fields, fallback_message="Failed to update user"
        )
        if isinstance(result, Failure):
            return result

        logger.info("user_updated", airtable_id=record_id, fields=sorted(fields))
        return Ok(record_to_user(result.value))
