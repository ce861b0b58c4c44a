"""
User and authentication models.

Request bodies declare every field optional so that presence is checked by
the route handlers, which answer 400 with a route-specific message.
"""

from typing import Optional

from pydantic import Field

from shelf_api.src.models.common import CamelModel


# ============================================================================
# Pydantic Request Models
# ============================================================================


class RegisterRequest(CamelModel):
    """Registration request schema."""
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Email address")
    password: Optional[str] = Field(None, description="Password")

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Ada",
                "email": "ada@example.com",
                "password": "correct-horse"
            }
        }
    }


class LoginRequest(CamelModel):
    """Login request schema."""
    email: Optional[str] = Field(None, description="Email address")
    password: Optional[str] = Field(None, description="Password")


class UpdateUserRequest(CamelModel):
    """Partial profile update. Only fields that are sent are written."""
    name: Optional[str] = Field(None, description="Display name")
    email: Optional[str] = Field(None, description="Email address")
    profile_picture: Optional[str] = Field(None, description="Profile picture URL")


# ============================================================================
# Domain Models
# ============================================================================


class UserDB(CamelModel):
    """User as stored in the record store, password hash included."""
    id: str
    airtable_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    password_hash: Optional[str] = None
    created_at: Optional[str] = None
    profile_picture: Optional[str] = None

    def to_response(self) -> "UserResponse":
        """Drop the password hash."""
        return UserResponse(**self.model_dump(exclude={"password_hash"}))


# ============================================================================
# Pydantic Response Models
# ============================================================================


class UserResponse(CamelModel):
    """User information response schema."""
    id: str = Field(..., description="User ID")
    airtable_id: str = Field(..., description="Record store identifier")
    name: Optional[str] = None
    email: Optional[str] = None
    created_at: Optional[str] = None
    profile_picture: Optional[str] = None


class UserEnvelope(CamelModel):
    user: UserResponse


class UploadResponse(CamelModel):
    url: str
