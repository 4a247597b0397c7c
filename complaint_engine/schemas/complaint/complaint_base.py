"""
Complaint submission schema.

Validates the reporter's input against the category catalogue and the
configured intake limits before anything touches the database.
"""

from __future__ import annotations

from typing import List

from pydantic import Field, ValidationInfo, field_validator, model_validator

from complaint_engine.core.constants import subcategories_for
from complaint_engine.models.base.enums import ComplaintCategory
from complaint_engine.schemas.common.base import BaseSchema, context_settings

__all__ = ["ComplaintCreate"]


class ComplaintCreate(BaseSchema):
    """
    Payload for submitting a new complaint.

    Intake limits come from the ``settings`` validation context when given.
    """

    resource_id: str = Field(..., min_length=1, alias="resourceId")
    category: ComplaintCategory
    subcategory: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    images: List[str] = Field(default_factory=list, description="Image references")

    @field_validator("description")
    @classmethod
    def validate_description(cls, v: str, info: ValidationInfo) -> str:
        max_length = context_settings(info).DESCRIPTION_MAX_LENGTH
        if len(v) > max_length:
            raise ValueError(f"Description cannot exceed {max_length} characters")
        return v

    @field_validator("images")
    @classmethod
    def validate_images(cls, v: List[str], info: ValidationInfo) -> List[str]:
        max_images = context_settings(info).MAX_IMAGES_PER_COMPLAINT
        if len(v) > max_images:
            raise ValueError(f"Maximum {max_images} images allowed")
        if any(not ref or not ref.strip() for ref in v):
            raise ValueError("Image references cannot be empty")
        return v

    @model_validator(mode="after")
    def validate_subcategory(self) -> "ComplaintCreate":
        """Subcategory must belong to the chosen category."""
        if self.subcategory not in subcategories_for(self.category):
            raise ValueError(
                f"Invalid subcategory '{self.subcategory}' for category {self.category.value}"
            )
        return self
