"""Order domain models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class OrderCreate(BaseModel):
    """Data required to place an order."""

    course_id: str = Field(..., min_length=1)
    payment_info: dict[str, Any] | None = None


class Order(BaseModel):
    """Full order entity as stored."""

    id: str
    course_id: str
    user_id: str
    payment_info: dict[str, Any] | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
