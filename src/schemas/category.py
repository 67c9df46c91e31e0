"""Category schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

IMAGE_URL_SCHEMES = ("http://", "https://")


def _strip(value):
    return value.strip() if isinstance(value, str) else value


def _check_image_url(value: str | None) -> str | None:
    if value is not None and not value.startswith(IMAGE_URL_SCHEMES):
        raise ValueError("Invalid image URL format")
    return value


class CategoryCreate(BaseModel):
    """Create a new category. The image comes from an upload or ``image_url``."""

    category_name: str = Field(..., min_length=1, max_length=255)
    item_count: int = Field(0, ge=0)
    image_url: str | None = None

    @field_validator("category_name", "image_url", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _strip(value)

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, value):
        return _check_image_url(value)


class CategoryUpdate(BaseModel):
    """Update a category. Only the fields that are set are written."""

    category_name: str | None = Field(None, min_length=1, max_length=255)
    item_count: int | None = Field(None, ge=0)
    image_url: str | None = None

    @field_validator("category_name", "image_url", mode="before")
    @classmethod
    def strip_text(cls, value):
        return _strip(value)

    @field_validator("image_url")
    @classmethod
    def validate_image_url(cls, value):
        return _check_image_url(value)


class CategoryResponse(BaseModel):
    """Category response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    image_url: str
    category_name: str
    item_count: int
    user_id: str | None
    created_at: datetime
    updated_at: datetime

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def stringify_object_id(cls, value):
        return str(value) if value is not None else None


class CategoryCreateResponse(BaseModel):
    """Response for a created category."""

    success: bool = True
    message: str = "Category created successfully"
    category: CategoryResponse


class CategoryUpdateResponse(BaseModel):
    """Response for an updated category."""

    message: str = "Category updated successfully"
    category: CategoryResponse
