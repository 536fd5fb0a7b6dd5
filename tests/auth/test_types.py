"""Tests for auth request/response models."""

import pytest
from pydantic import ValidationError

from auth.types import (
    ActivationRequest,
    Role,
    SignupRequest,
    UpdatePasswordRequest,
    User,
)


def _signup(**overrides):
    data = {
        "fname": "Ada",
        "lname": "Lovelace",
        "email": "ada@example.com",
        "password": "Str0ng!Pass",
        "passwordConfirm": "Str0ng!Pass",
    }
    data.update(overrides)
    return SignupRequest.model_validate(data)


class TestSignupRequest:

    def test_valid(self):
        request = _signup()
        assert request.password_confirm == "Str0ng!Pass"

    @pytest.mark.parametrize("password", ["Sh0rt!", "alllower1!", "ALLUPPER1!", "NoDigits!!", "NoSymbol12"])
    def test_weak_passwords_rejected(self, password):
        with pytest.raises(ValidationError):
            _signup(password=password, passwordConfirm=password)

    def test_mismatched_confirmation(self):
        with pytest.raises(ValidationError, match="do not match"):
            _signup(passwordConfirm="Different1!")

    def test_short_name_rejected(self):
        with pytest.raises(ValidationError):
            _signup(fname="A")

    def test_bad_email_rejected(self):
        with pytest.raises(ValidationError):
            _signup(email="not-an-email")


class TestActivationRequest:

    def test_accepts_alias_and_int_code(self):
        request = ActivationRequest.model_validate({"activationToken": "t", "otp": 123456})
        assert request.activation_token == "t"
        assert request.otp == 123456

    def test_fields_optional(self):
        request = ActivationRequest.model_validate({})
        assert request.activation_token is None
        assert request.otp is None


class TestUpdatePasswordRequest:

    def test_new_password_must_be_strong(self):
        with pytest.raises(ValidationError):
            UpdatePasswordRequest.model_validate({"oldPassword": "x", "newPassword": "weak"})


class TestUser:

    def test_defaults(self):
        user = User(id="1", fname="Ada", email="ada@example.com")
        assert user.role == Role.USER
        assert user.is_active is True
        assert user.courses == []

    def test_owns_course(self):
        user = User(id="1", fname="Ada", email="a@b.c", courses=["c1", "c2"])
        assert user.owns_course("c2") is True
        assert user.owns_course("c3") is False

    def test_social_login_as_email(self):
        """GitHub logins stand in for emails."""
        assert User(id="1", fname="Octo", email="octocat").email == "octocat"
