"""Course category domain models."""

from datetime import datetime

from pydantic import BaseModel, Field

from core.models.common import Image, ImageInput


class CategoryCreate(BaseModel):
    """Data required to create a category.

    New categories are hidden until an admin activates them.
    """

    value: str = Field(..., min_length=1, max_length=100)
    thumbnail: ImageInput | None = None
    is_active: bool = False


class CategoryUpdate(BaseModel):
    """Data that can be updated on a category. All fields optional."""

    value: str | None = Field(None, min_length=1, max_length=100)
    thumbnail: ImageInput | None = None
    is_active: bool | None = None


class Category(BaseModel):
    """Full category entity as stored.

    `is_active` is None when read in user visibility.
    """

    id: str
    value: str
    thumbnail: Image | None = None
    is_active: bool | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
