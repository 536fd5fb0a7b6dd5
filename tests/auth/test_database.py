"""Tests for AuthDatabase - user records in the users collection."""

import pytest
from bson import ObjectId

from auth.exceptions import DuplicateEmailError
from auth.passwords import verify_password
from auth.types import Role


class TestCreateUser:

    def test_defaults_applied(self, auth_db):
        user = auth_db.create_user({"fname": "Ada", "email": "ada@example.com"})
        assert user.role == Role.USER
        assert user.is_verified is False
        assert user.is_social is False
        assert user.is_active is True
        assert user.courses == []
        assert user.created_at is not None

    def test_email_normalized(self, auth_db):
        user = auth_db.create_user({"fname": "Ada", "email": "  Ada@Example.COM "})
        assert user.email == "ada@example.com"

    def test_password_hashed_not_returned(self, auth_db, mongo):
        user = auth_db.create_user({"fname": "Ada", "email": "ada@example.com", "password": "Str0ng!Pass"})
        stored = mongo.collection("users").find_one({"_id": ObjectId(user.id)})
        assert stored["password"] != "Str0ng!Pass"
        assert verify_password("Str0ng!Pass", stored["password"])
        assert not hasattr(user, "password")

    def test_duplicate_email(self, auth_db):
        auth_db.create_user({"fname": "Ada", "email": "ada@example.com"})
        with pytest.raises(DuplicateEmailError):
            auth_db.create_user({"fname": "Other", "email": "ADA@example.com"})


class TestLookups:

    def test_get_by_email_case_insensitive(self, auth_db, user):
        assert auth_db.get_user_by_email(user.email.upper()).id == user.id

    def test_get_by_email_missing(self, auth_db):
        assert auth_db.get_user_by_email("nobody@example.com") is None

    def test_get_with_password(self, auth_db, user):
        found, password_hash = auth_db.get_user_with_password(user.email)
        assert found.id == user.id
        assert password_hash.startswith("$2b$")

    def test_get_by_id(self, auth_db, user):
        assert auth_db.get_user_by_id(user.id).email == user.email

    @pytest.mark.parametrize("user_id", ["bad-id", "", str(ObjectId())])
    def test_get_by_id_not_found(self, auth_db, user_id):
        assert auth_db.get_user_by_id(user_id) is None

    def test_get_password_hash(self, auth_db, user):
        assert auth_db.get_password_hash(user.id).startswith("$2b$")


class TestUpdates:

    def test_update_user(self, auth_db, user):
        updated = auth_db.update_user(user.id, {"bio": "Hello", "role": Role.ADMIN})
        assert updated.bio == "Hello"
        assert updated.role == Role.ADMIN

    def test_update_unknown_user(self, auth_db):
        assert auth_db.update_user(str(ObjectId()), {"bio": "x"}) is None

    def test_update_to_taken_email(self, auth_db, user, admin):
        with pytest.raises(DuplicateEmailError):
            auth_db.update_user(user.id, {"email": admin.email})

    def test_update_password_rehashes(self, auth_db, user):
        auth_db.update_user(user.id, {"password": "N3w!Password"})
        assert verify_password("N3w!Password", auth_db.get_password_hash(user.id))

    def test_add_course_has_no_duplicates(self, auth_db, user):
        auth_db.add_course(user.id, "c1")
        updated = auth_db.add_course(user.id, "c1")
        assert updated.courses == ["c1"]


class TestListAndDelete:

    def test_list_users(self, auth_db, user, admin):
        emails = {u.email for u in auth_db.list_users()}
        assert emails == {user.email, admin.email}

    def test_delete_user(self, auth_db, user):
        assert auth_db.delete_user(user.id) is True
        assert auth_db.get_user_by_id(user.id) is None

    def test_delete_missing(self, auth_db):
        assert auth_db.delete_user(str(ObjectId())) is False
        assert auth_db.delete_user("bad-id") is False
