"""
Common schemas for API responses and error handling.
"""

from typing import Annotated, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints
from pydantic.alias_generators import to_camel


# Required free text: surrounding whitespace removed, must not end up empty
RequiredText = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]

# Optional free text: surrounding whitespace removed
OptionalText = Annotated[str, StringConstraints(strip_whitespace=True)]


class CamelModel(BaseModel):
    """Base schema that speaks camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ErrorResponse(BaseModel):
    """Schema for API error responses."""

    status: Literal["fail", "error"] = Field(..., description="'fail' for client errors, 'error' for server errors")
    message: str = Field(..., description="Human-readable error message")

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"status": "fail", "message": "Booking not found"},
                {
                    "status": "fail",
                    "message": "Validation Error: travelers: Input should be greater than or equal to 1",
                },
                {"status": "error", "message": "Something went wrong!"},
            ]
        }
    )


class SuccessResponse(BaseModel):
    """Schema for simple success responses."""

    status: Literal["success"] = "success"
    message: Optional[str] = Field(None, description="Success message")


class PaginationInfo(BaseModel):
    """Schema for pagination information."""

    total: int = Field(..., description="Total number of matching items")
    page: int = Field(..., description="Current page number")
    pages: int = Field(..., description="Total number of pages")


class StatusCount(BaseModel):
    """Number of records holding one status value."""

    status: str
    count: int
