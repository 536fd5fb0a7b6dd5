"""Course review domain models."""

from datetime import datetime

from pydantic import BaseModel, Field


class ReviewCreate(BaseModel):
    """Data required to review a purchased course."""

    course_id: str = Field(..., min_length=1)
    rating: int = Field(..., ge=1, le=5)
    review: str = Field(..., min_length=1, max_length=2000)


class ReviewReply(BaseModel):
    user: str
    comment: str
    created_at: datetime | None = None


class CourseReview(BaseModel):
    """Review as listed on its course."""

    id: str
    user: str
    rating: int = Field(..., ge=1, le=5)
    review: str
    review_replies: list[ReviewReply] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class Review(CourseReview):
    """Full review entity as stored."""

    course: str
