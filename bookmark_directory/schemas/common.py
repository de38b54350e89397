"""Common Pydantic schemas."""
from typing import Dict
from datetime import datetime, timezone

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with common configuration.

    Fields are snake_case in Python and camelCase on the wire; either
    spelling is accepted on input.
    """

    model_config = {
        "from_attributes": True,
        "validate_assignment": True,
        "arbitrary_types_allowed": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class SuccessResponse(BaseSchema):
    """Generic success response."""

    success: bool = Field(True, description="Success status")
    message: str = Field(..., description="Success message")


class HealthResponse(BaseSchema):
    """Health check response."""

    status: str = Field(..., description="Overall health status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str = Field(..., description="Application version")
    services: Dict[str, str] = Field(
        default_factory=dict,
        description="Service health statuses"
    )
