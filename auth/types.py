"""Pydantic models for auth domain."""

import re
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

# At least one upper, one lower, one digit, one symbol; 8+ chars.
_PASSWORD_PATTERN = re.compile(r"^(?=.*[A-Z])(?=.*[a-z])(?=.*\d)(?=.*[\W_]).{8,}$")
PASSWORD_RULES = (
    "Password must be at least 8 characters and include an uppercase letter, "
    "a lowercase letter, a number and a symbol."
)


def _check_password_strength(value: str) -> str:
    if not _PASSWORD_PATTERN.match(value):
        raise ValueError(PASSWORD_RULES)
    return value


class Role(str, Enum):
    """What a user is allowed to do."""

    USER = "user"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"


class Avatar(BaseModel):
    """Hosted image reference."""

    public_id: str | None = None
    url: str


class User(BaseModel):
    """A registered user as returned to clients and cached in sessions.

    Never carries the password hash.
    """

    id: str
    fname: str
    lname: str = ""
    email: str
    phone: str | None = None
    bio: str | None = None
    location: str | None = None
    avatar: Avatar | None = None
    role: Role = Role.USER
    is_verified: bool = False
    is_social: bool = False
    is_active: bool = True
    courses: list[str] = Field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}

    def owns_course(self, course_id: str) -> bool:
        return str(course_id) in {str(c) for c in self.courses}


class SignupRequest(BaseModel):
    """Request payload for signup."""

    model_config = ConfigDict(populate_by_name=True)

    fname: str = Field(..., min_length=2, max_length=32)
    lname: str = Field(..., min_length=2, max_length=32)
    email: EmailStr
    password: str
    password_confirm: str = Field(..., alias="passwordConfirm")

    @field_validator("password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return _check_password_strength(value)

    @model_validator(mode="after")
    def passwords_match(self) -> "SignupRequest":
        if self.password != self.password_confirm:
            raise ValueError("Passwords do not match")
        return self


class ActivationRequest(BaseModel):
    """Request payload for account activation.

    Both fields optional here so the service reports what's missing.
    """

    model_config = ConfigDict(populate_by_name=True)

    activation_token: str | None = Field(None, alias="activationToken")
    otp: str | int | None = None


class SigninRequest(BaseModel):
    """Request payload for password sign-in."""

    email: EmailStr
    password: str = Field(..., min_length=1)


class UpdateUserRequest(BaseModel):
    """Profile fields a user may change. All optional."""

    fname: str | None = Field(None, min_length=2, max_length=32)
    lname: str | None = Field(None, min_length=2, max_length=32)
    email: EmailStr | None = None
    phone: str | None = Field(None, max_length=32)
    bio: str | None = Field(None, max_length=500)
    location: str | None = Field(None, max_length=100)


class UpdatePasswordRequest(BaseModel):
    """Request payload for password change."""

    model_config = ConfigDict(populate_by_name=True)

    old_password: str = Field(..., alias="oldPassword", min_length=1)
    new_password: str = Field(..., alias="newPassword")

    @field_validator("new_password")
    @classmethod
    def strong_password(cls, value: str) -> str:
        return _check_password_strength(value)


class UpdateRoleRequest(BaseModel):
    """Request payload for an admin role change."""

    role: Role


class OAuthProfile(BaseModel):
    """Provider-neutral identity derived from an OAuth profile."""

    fname: str = ""
    lname: str = ""
    email: str
    avatar_url: str | None = None
    is_verified: bool = True


class SessionContext(BaseModel):
    """User plus the token pair issued for them.

    Returned from sign-in and refresh and passed explicitly to the
    next step of the request.
    """

    user: User
    access_token: str
    refresh_token: str
