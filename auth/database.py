"""Credential store: user records in the `users` collection.

Emails are stored trimmed and lowercased with a unique index. The
password hash never leaves this module except through
get_user_with_password / get_password_hash.
"""

import logging
from typing import Any

from pymongo import DESCENDING, ReturnDocument
from pymongo.errors import DuplicateKeyError

from auth.exceptions import DuplicateEmailError
from auth.passwords import DEFAULT_ROUNDS, hash_password
from auth.types import Role, User
from clients.mongo_client import MongoDBClient
from utils.object_id import is_valid_object_id, to_object_id
from utils.timezone import now_utc

logger = logging.getLogger(__name__)

_NO_PASSWORD = {"password": 0}


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AuthDatabase:
    """Database operations for user accounts."""

    COLLECTION = "users"

    def __init__(self, mongo: MongoDBClient, password_rounds: int = DEFAULT_ROUNDS):
        self._users = mongo.collection(self.COLLECTION)
        self._password_rounds = password_rounds
        self._users.create_index("email", unique=True)

    def _to_user(self, doc: dict) -> User:
        fields = {k: v for k, v in doc.items() if k not in ("_id", "password")}
        fields["courses"] = [str(c) for c in fields.get("courses", [])]
        return User(id=str(doc["_id"]), **fields)

    def _prepare_changes(self, changes: dict[str, Any]) -> dict[str, Any]:
        """Normalize email and hash password before any write."""
        prepared = dict(changes)
        if prepared.get("email"):
            prepared["email"] = normalize_email(prepared["email"])
        if prepared.get("password"):
            prepared["password"] = hash_password(prepared["password"], self._password_rounds)
        if isinstance(prepared.get("role"), Role):
            prepared["role"] = prepared["role"].value
        return prepared

    def get_user_by_email(self, email: str) -> User | None:
        """Find user by email (case-insensitive)."""
        doc = self._users.find_one({"email": normalize_email(email)}, _NO_PASSWORD)
        return self._to_user(doc) if doc else None

    def get_user_with_password(self, email: str) -> tuple[User, str | None] | None:
        """Find user by email, returning the stored hash alongside.

        Hash is None for social accounts that never set a password.
        """
        doc = self._users.find_one({"email": normalize_email(email)})
        if doc is None:
            return None
        return self._to_user(doc), doc.get("password")

    def get_user_by_id(self, user_id: str) -> User | None:
        """Find user by id. Malformed ids find nothing."""
        if not is_valid_object_id(user_id):
            return None
        doc = self._users.find_one({"_id": to_object_id(user_id)}, _NO_PASSWORD)
        return self._to_user(doc) if doc else None

    def get_password_hash(self, user_id: str) -> str | None:
        if not is_valid_object_id(user_id):
            return None
        doc = self._users.find_one({"_id": to_object_id(user_id)}, {"password": 1})
        return doc.get("password") if doc else None

    def create_user(self, data: dict[str, Any]) -> User:
        """
        Insert a new user.

        Password (if present) is hashed; role defaults to user.

        Raises:
            DuplicateEmailError: Email already registered
        """
        now = now_utc()
        doc = {
            "role": Role.USER.value,
            "is_verified": False,
            "is_social": False,
            "is_active": True,
            "courses": [],
            **self._prepare_changes(data),
            "created_at": now,
            "updated_at": now,
        }
        try:
            result = self._users.insert_one(doc)
        except DuplicateKeyError:
            raise DuplicateEmailError("Email is already registered. Please use a different email address.")

        doc["_id"] = result.inserted_id
        user = self._to_user(doc)
        logger.info(f"Created user {user.id}")
        return user

    def update_user(self, user_id: str, changes: dict[str, Any]) -> User | None:
        """
        Set fields on a user. Returns the updated user, or None if not found.

        Raises:
            DuplicateEmailError: New email belongs to someone else
        """
        if not is_valid_object_id(user_id):
            return None
        update = {**self._prepare_changes(changes), "updated_at": now_utc()}
        try:
            doc = self._users.find_one_and_update(
                {"_id": to_object_id(user_id)},
                {"$set": update},
                projection=_NO_PASSWORD,
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError:
            raise DuplicateEmailError()
        return self._to_user(doc) if doc else None

    def add_course(self, user_id: str, course_id: str) -> User | None:
        """Append course to the user's purchased courses (no duplicates)."""
        if not is_valid_object_id(user_id):
            return None
        doc = self._users.find_one_and_update(
            {"_id": to_object_id(user_id)},
            {"$addToSet": {"courses": str(course_id)}, "$set": {"updated_at": now_utc()}},
            projection=_NO_PASSWORD,
            return_document=ReturnDocument.AFTER,
        )
        return self._to_user(doc) if doc else None

    def list_users(self) -> list[User]:
        """All users, newest first."""
        docs = self._users.find({}, _NO_PASSWORD).sort("created_at", DESCENDING)
        return [self._to_user(doc) for doc in docs]

    def delete_user(self, user_id: str) -> bool:
        """
        Permanently delete user.

        Returns:
            True if user was found and deleted, False if not found.
        """
        if not is_valid_object_id(user_id):
            return False
        result = self._users.delete_one({"_id": to_object_id(user_id)})
        return result.deleted_count > 0
