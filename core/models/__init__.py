"""Core domain models."""

from core.models.common import Image, ImageInput
from core.models.category import Category, CategoryCreate, CategoryUpdate
from core.models.course import (
    AnswerCreate,
    Comment,
    Course,
    CourseCreate,
    CourseDetails,
    CourseDetailsCreate,
    CourseLevel,
    CourseUpdate,
    Lecture,
    LectureCreate,
    Link,
    QuestionCreate,
    Reply,
    Video,
)
from core.models.order import Order, OrderCreate
from core.models.review import CourseReview, Review, ReviewCreate, ReviewReply

__all__ = [
    # Shared
    "Image", "ImageInput",
    # Category
    "Category", "CategoryCreate", "CategoryUpdate",
    # Course
    "Course", "CourseCreate", "CourseUpdate", "CourseDetails", "CourseDetailsCreate",
    "CourseLevel", "Lecture", "LectureCreate", "Video", "Link", "Comment", "Reply",
    "QuestionCreate", "AnswerCreate",
    # Order
    "Order", "OrderCreate",
    # Review
    "Review", "ReviewCreate", "ReviewReply", "CourseReview",
]
