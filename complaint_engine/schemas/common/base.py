"""
Base schema classes with common fields and configurations.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo

from complaint_engine.config.settings import Settings, get_settings

__all__ = [
    "BaseSchema",
    "BaseResponseSchema",
    "BaseFilterSchema",
    "context_settings",
]


def context_settings(info: ValidationInfo) -> Settings:
    """Settings passed as ``context={"settings": ...}``, else the process-wide ones."""
    context = info.context or {}
    return context.get("settings") or get_settings()


class BaseSchema(BaseModel):
    """
    Base schema with common Pydantic configuration.

    All application-facing schemas inherit from this to ensure
    consistent behaviour.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        # Keep enums as Enum instances; callers can still access `.value`.
        use_enum_values=False,
        str_strip_whitespace=True,
        validate_assignment=True,
    )


class BaseResponseSchema(BaseSchema):
    """Base schema for records read back from the database."""

    id: str = Field(..., description="Unique identifier")
    created_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")


class BaseFilterSchema(BaseSchema):
    """Base schema for query filters; all fields optional."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        extra="ignore",
    )
