"""Course domain models.

A course carries display details, lecture sections with videos, and
per-lecture question threads.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from core.models.common import Image, ImageInput
from core.models.review import CourseReview


class CourseLevel(str, Enum):
    BEGINNER = "Beginner"
    INTERMEDIATE = "Intermediate"
    ADVANCED = "Advanced"


class Link(BaseModel):
    title: str
    url: str


class Video(BaseModel):
    """One video within a lecture section."""

    title: str
    description: str | None = None
    url: str
    links: list[Link] = Field(default_factory=list)


class Reply(BaseModel):
    """Answer to a lecture question."""

    id: str
    user: str = Field(..., description="Author user id")
    user_name: str | None = None
    answer: str
    created_at: datetime | None = None


class Comment(BaseModel):
    """Question asked on a lecture."""

    id: str
    user: str = Field(..., description="Author user id")
    user_name: str | None = None
    question: str
    question_replies: list[Reply] = Field(default_factory=list)
    created_at: datetime | None = None


class LectureCreate(BaseModel):
    video_section: str = Field(..., min_length=1)
    video_url: list[Video] = Field(default_factory=list)
    suggestions: str | None = None


class Lecture(LectureCreate):
    id: str
    comments: list[Comment] = Field(default_factory=list)


class CourseDetailsCreate(BaseModel):
    """Display details of a course."""

    title: str = Field(..., min_length=1, max_length=200)
    thumbnail: ImageInput | None = None
    short_description: str | None = Field(None, max_length=500)
    description: str | None = None
    price: float = Field(..., ge=0)
    dis_price: float | None = Field(None, ge=0, description="Discounted price")
    duration: str | None = None
    category: str | None = None
    level: CourseLevel = CourseLevel.BEGINNER
    language: str | None = None
    featured: bool = False
    video_length: str | None = None
    total_lecture: int = Field(0, ge=0)
    tags: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def validate_discount(self) -> "CourseDetailsCreate":
        """Discounted price may not exceed the regular price."""
        if self.dis_price is not None and self.dis_price > self.price:
            raise ValueError("Discounted price must not exceed the regular price")
        return self


class CourseDetails(CourseDetailsCreate):
    thumbnail: Image | None = None
    purchased: int = 0


class CourseCreate(BaseModel):
    """Data required to create a course."""

    course_details: CourseDetailsCreate
    benefits: list[str] = Field(default_factory=list)
    prerequisites: list[str] = Field(default_factory=list)
    lectures: list[LectureCreate] = Field(default_factory=list)


class CourseUpdate(BaseModel):
    """Data that can be updated on a course. All fields optional.

    `course_details` replaces the whole details block when given.
    """

    course_details: CourseDetailsCreate | None = None
    benefits: list[str] | None = None
    prerequisites: list[str] | None = None
    lectures: list[LectureCreate] | None = None


class Course(BaseModel):
    """Full course entity as stored."""

    id: str
    course_details: CourseDetails
    benefits: list[str] = Field(default_factory=list)
    prerequisites: list[str] = Field(default_factory=list)
    lectures: list[Lecture] = Field(default_factory=list)
    instructor: str | None = None
    reviews: list[CourseReview] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class QuestionCreate(BaseModel):
    course_id: str
    content_id: str
    question: str = Field(..., min_length=1, max_length=2000)


class AnswerCreate(BaseModel):
    course_id: str
    content_id: str
    question_id: str
    answer: str = Field(..., min_length=1, max_length=2000)
