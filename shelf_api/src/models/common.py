"""Common Pydantic models shared across routers."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model exchanging camelCase JSON while using snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class ErrorResponse(BaseModel):
    """Error response schema."""
    error: str = Field(
        ...,
        min_length=1,
        description="Error message"
    )

    model_config = {
        "json_schema_extra": {
            "example": {"error": "Book not found"}
        }
    }


class DeleteResponse(CamelModel):
    """Acknowledgement of a deleted record."""
    success: bool = True
    message: str


class HealthResponse(CamelModel):
    """Static service status with configuration presence flags."""
    status: str = "ok"
    message: str = "Server is running"
    airtable_configured: bool
    omdb_configured: bool
