"""
Course service.

Courses are created by instructors/admins, cached in Redis on read,
and expose lecture content only to users who purchased them.
"""

import logging
from typing import Any

from bson import ObjectId
from pymongo import DESCENDING

from auth.types import User
from clients.media_client import MediaStorageClient, MediaStorageError
from clients.mongo_client import MongoDBClient
from clients.redis_client import RedisClient
from core.exceptions import ForbiddenError, NotFoundError, ValidationError
from core.models import (
    AnswerCreate,
    Course,
    CourseCreate,
    CourseDetailsCreate,
    CourseReview,
    CourseUpdate,
    Lecture,
    QuestionCreate,
)
from core.services.resource_service import ResourceService, upload_thumbnail
from utils.object_id import is_valid_object_id, serialize_document
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

COURSE_NOT_FOUND = "Oh no! The course you're looking for doesn't exist."


def _new_id() -> str:
    return str(ObjectId())


class CourseService(ResourceService[Course]):
    """Service for course operations."""

    CACHE_PREFIX = "course:"

    def __init__(
        self,
        mongo: MongoDBClient,
        redis: RedisClient,
        media: MediaStorageClient | None = None,
        cache_ttl_seconds: int = 604800,
    ):
        super().__init__(
            mongo,
            collection="courses",
            model=Course,
            create_model=CourseCreate,
            update_model=CourseUpdate,
            name="course",
            media=media,
            upload_folder="courses",
        )
        self._redis = redis
        self._cache_ttl = cache_ttl_seconds
        self._reviews = mongo.collection("reviews")

    def _cache_key(self, course_id: str) -> str:
        return f"{self.CACHE_PREFIX}{course_id}"

    def invalidate(self, course_id: str) -> None:
        """Drop the cached copy of a course."""
        self._redis.delete(self._cache_key(course_id))

    def _prepare_document(self, doc: dict) -> None:
        """Upload the details thumbnail and give every lecture an id."""
        details = doc.get("course_details") or {}
        upload_thumbnail(self._media, details, self._upload_folder)
        details.setdefault("purchased", 0)
        for lecture in doc.get("lectures") or []:
            lecture.setdefault("id", _new_id())
            lecture.setdefault("comments", [])

    def create_course(self, data: Any, instructor: User) -> Course:
        """
        Create a course owned by instructor.

        Raises:
            ValidationError: Invalid course data
            UpstreamError: Thumbnail upload failed
        """
        doc = self._validate(self._create_model, data, partial=False)
        self._prepare_document(doc)

        now = now_utc()
        doc["instructor"] = instructor.id
        doc["created_at"] = now
        doc["updated_at"] = now

        result = self._collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        logger.info(f"Course {result.inserted_id} created by {instructor.id}")
        return self._to_model(doc)

    def update_course(self, course_id: str, data: Any) -> Course:
        """
        Update a course.

        A new thumbnail source replaces the hosted image; the old one is
        deleted from the media host once the update is stored.

        Raises:
            ValidationError: Malformed id or data
            NotFoundError: No such course
            UpstreamError: Thumbnail upload failed; the stored course is unchanged
        """
        object_id = self._require_id(course_id)
        changes = self._validate(self._update_model, data)
        if not changes:
            raise ValidationError("Please provide at least one course field to update.")

        existing = self._collection.find_one({"_id": object_id})
        if existing is None:
            raise NotFoundError(COURSE_NOT_FOUND)

        if changes.get("course_details") is not None:
            # Details replace the stored block wholesale, so fill defaults
            changes["course_details"] = CourseDetailsCreate.model_validate(
                changes["course_details"]
            ).model_dump(mode="json")
        replaced_public_id = None
        details = changes.get("course_details")
        if details is not None:
            old_thumbnail = (existing.get("course_details") or {}).get("thumbnail") or {}
            new_thumbnail = details.get("thumbnail")
            if new_thumbnail is None:
                details["thumbnail"] = old_thumbnail or None
            elif isinstance(new_thumbnail, str) and new_thumbnail:
                replaced_public_id = old_thumbnail.get("public_id")
            upload_thumbnail(self._media, details, self._upload_folder)
            details["purchased"] = (existing.get("course_details") or {}).get("purchased", 0)

        for lecture in changes.get("lectures") or []:
            lecture.setdefault("id", _new_id())
            lecture.setdefault("comments", [])

        changes["updated_at"] = now_utc()
        self._collection.update_one({"_id": object_id}, {"$set": changes})
        self.invalidate(course_id)

        if replaced_public_id:
            self._destroy_image(replaced_public_id)

        return self._to_model(self._collection.find_one({"_id": object_id}))

    def _destroy_image(self, public_id: str) -> None:
        """Remove a replaced image from the media host; failures leave an orphan."""
        try:
            self._media.destroy(public_id)
        except MediaStorageError as e:
            logger.warning(f"Could not delete replaced image {public_id}: {e}")

    def get_single_course(self, course_id: str) -> Course:
        """Course by id with its reviews, served from the cache when present."""
        self._require_id(course_id)

        cached = self._redis.get_json(self._cache_key(course_id))
        if cached is not None:
            return Course.model_validate(cached)

        course = self.get_single(course_id)
        reviews = self._reviews.find({"course": course_id}, {"course": 0}).sort("created_at", DESCENDING)
        course.reviews = [CourseReview.model_validate(serialize_document(doc)) for doc in reviews]
        self._redis.set_json(
            self._cache_key(course_id),
            course.model_dump(mode="json"),
            expire_seconds=self._cache_ttl,
        )
        return course

    def get_all_courses(self) -> list[Course]:
        """All courses without lecture content, newest first."""
        docs = list(self._collection.find({}, {"lectures": 0}).sort("created_at", DESCENDING))
        if not docs:
            raise NotFoundError(
                "Oops! It seems like there are no courses available at the moment. "
                "Please check back later or contact support for assistance."
            )
        return [self._to_model(doc) for doc in docs]

    def get_user_course_content(self, user: User, course_id: str) -> list[Lecture]:
        """
        Lecture content of a purchased course.

        Raises:
            ForbiddenError: User has not purchased the course
        """
        self._require_id(course_id)
        if not user.owns_course(course_id):
            raise ForbiddenError("You are not eligible to access this course")
        return self.get_single(course_id).lectures

    def _load_lecture(self, course_id: str, content_id: str) -> tuple[dict, dict]:
        if not is_valid_object_id(content_id):
            raise ValidationError("Oops! It seems like the content ID provided is invalid")
        doc = self._collection.find_one({"_id": self._require_id(course_id)})
        if doc is None:
            raise NotFoundError(COURSE_NOT_FOUND)
        for lecture in doc.get("lectures") or []:
            if lecture.get("id") == content_id:
                return doc, lecture
        raise NotFoundError("Course content not found with this ID")

    def _save_lectures(self, doc: dict) -> Course:
        doc["updated_at"] = now_utc()
        self._collection.update_one(
            {"_id": doc["_id"]},
            {"$set": {"lectures": doc["lectures"], "updated_at": doc["updated_at"]}},
        )
        self.invalidate(str(doc["_id"]))
        return self._to_model(doc)

    def add_question(self, user: User, data: QuestionCreate) -> Course:
        """Ask a question on one lecture of a course."""
        doc, lecture = self._load_lecture(data.course_id, data.content_id)
        lecture.setdefault("comments", []).append(
            {
                "id": _new_id(),
                "user": user.id,
                "user_name": f"{user.fname} {user.lname}".strip(),
                "question": data.question,
                "question_replies": [],
                "created_at": now_utc(),
            }
        )
        return self._save_lectures(doc)

    def add_answer(self, user: User, data: AnswerCreate) -> Course:
        """Answer an existing lecture question."""
        if not is_valid_object_id(data.question_id):
            raise ValidationError("Oops! It seems like the question ID provided is invalid")

        doc, lecture = self._load_lecture(data.course_id, data.content_id)
        for comment in lecture.get("comments") or []:
            if comment.get("id") == data.question_id:
                comment.setdefault("question_replies", []).append(
                    {
                        "id": _new_id(),
                        "user": user.id,
                        "user_name": f"{user.fname} {user.lname}".strip(),
                        "answer": data.answer,
                        "created_at": now_utc(),
                    }
                )
                return self._save_lectures(doc)
        raise NotFoundError("Course question not found with this ID")
