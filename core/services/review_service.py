"""Course review service."""

import logging
from typing import Any

from auth.types import User
from clients.mongo_client import MongoDBClient
from core.exceptions import NotFoundError
from core.models import Review, ReviewCreate
from core.services.course_service import COURSE_NOT_FOUND, CourseService
from core.services.resource_service import ResourceService
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class ReviewService(ResourceService[Review]):
    """Service for reviews on purchased courses."""

    def __init__(self, mongo: MongoDBClient, course_service: CourseService):
        super().__init__(
            mongo,
            collection="reviews",
            model=Review,
            create_model=ReviewCreate,
            update_model=None,
            name="review",
        )
        self._course_service = course_service

    def create_review(self, user: User, data: Any) -> Review:
        """
        Review a course the user has purchased.

        Raises:
            ValidationError: Invalid review data or course id
            NotFoundError: Course not purchased, or no such course
        """
        review = self._validate(ReviewCreate, data, partial=False)
        course_id = review["course_id"]
        course_object_id = self._course_service._require_id(course_id)

        if not user.owns_course(course_id):
            raise NotFoundError("You are not eligible to access this course")

        courses = self._course_service._collection
        if courses.find_one({"_id": course_object_id}, {"_id": 1}) is None:
            raise NotFoundError(COURSE_NOT_FOUND)

        now = now_utc()
        doc = {
            "user": user.id,
            "course": course_id,
            "rating": review["rating"],
            "review": review["review"],
            "review_replies": [],
            "created_at": now,
            "updated_at": now,
        }
        result = self._collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        self._course_service.invalidate(course_id)

        logger.info(f"Review {result.inserted_id} by {user.id} on course {course_id}")
        return self._to_model(doc)

    def get_single_review(self, review_id: str) -> Review:
        """Review by id."""
        return self.get_single(review_id)
