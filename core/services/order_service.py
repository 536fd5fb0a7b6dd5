"""
Order service.

Placing an order records it, adds the course to the buyer's purchased
courses, bumps the course's purchase counter and refreshes the buyer's
session cache entry so later requests see the purchase.
"""

import logging
from typing import Any

from auth.database import AuthDatabase
from auth.session import SessionCache
from auth.types import User
from clients.mongo_client import MongoDBClient
from core.exceptions import AuthenticationRequiredError, ConflictError, NotFoundError
from core.models import Order, OrderCreate
from core.services.course_service import CourseService
from core.services.resource_service import ResourceService
from utils.timezone import now_utc

logger = logging.getLogger(__name__)


class OrderService(ResourceService[Order]):
    """Service for course purchases."""

    def __init__(
        self,
        mongo: MongoDBClient,
        auth_db: AuthDatabase,
        session_cache: SessionCache,
        course_service: CourseService,
        session_ttl_seconds: int = 604800,
    ):
        super().__init__(
            mongo,
            collection="orders",
            model=Order,
            create_model=OrderCreate,
            update_model=None,
            name="order",
        )
        self._auth_db = auth_db
        self._session_cache = session_cache
        self._course_service = course_service
        self._session_ttl = session_ttl_seconds

    def create_order(self, user: User, data: Any) -> Order:
        """
        Purchase a course for user.

        Raises:
            ValidationError: Malformed course id
            AuthenticationRequiredError: User no longer exists
            ConflictError: Course already purchased
            NotFoundError: No such course
        """
        order = self._validate(OrderCreate, data, partial=False)
        course_id = order["course_id"]
        course_object_id = self._course_service._require_id(course_id)

        buyer = self._auth_db.get_user_by_id(user.id)
        if buyer is None:
            raise AuthenticationRequiredError()
        if buyer.owns_course(course_id):
            raise ConflictError("You have already purchased this course")

        courses = self._course_service._collection
        if courses.find_one({"_id": course_object_id}, {"_id": 1}) is None:
            raise NotFoundError("Course not found")

        now = now_utc()
        doc = {
            "course_id": course_id,
            "user_id": buyer.id,
            "payment_info": order.get("payment_info"),
            "created_at": now,
            "updated_at": now,
        }
        result = self._collection.insert_one(doc)
        doc["_id"] = result.inserted_id

        updated = self._auth_db.add_course(buyer.id, course_id)
        courses.update_one({"_id": course_object_id}, {"$inc": {"course_details.purchased": 1}})
        self._course_service.invalidate(course_id)

        if updated is not None:
            self._session_cache.set(updated.id, updated.model_dump(mode="json"), ttl_seconds=self._session_ttl)

        logger.info(f"Order {result.inserted_id}: user {buyer.id} bought course {course_id}")
        return self._to_model(doc)
