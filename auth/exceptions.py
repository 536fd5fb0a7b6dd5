"""Typed exceptions for auth failures."""

from core.exceptions import (
    AppError,
    AuthenticationRequiredError,
    ConflictError,
    UpstreamError,
)


class AuthError(AppError):
    """Base class for authentication/authorization errors."""

    status_code = 400
    code = "AUTH_ERROR"


class EncodingError(AuthError):
    """Payload or secret has a type the token codec cannot sign."""

    status_code = 500
    code = "ENCODING_ERROR"


class InvalidTokenError(AuthError):
    """
    Token failed verification: bad signature, malformed, wrong type.

    Expiry is reported separately by ExpiredTokenError.
    """

    code = "INVALID_TOKEN"

    def __init__(self, message: str = "Invalid token"):
        super().__init__(message)


class ExpiredTokenError(AuthError):
    """Token signature is fine but its expiry has passed."""

    code = "TOKEN_EXPIRED"

    def __init__(self, message: str = "Token has expired"):
        super().__init__(message)


class InvalidKeyError(AuthenticationRequiredError):
    """Cache key requested for an absent user identifier."""


class InvalidCredentialsError(AuthError):
    """
    Email unknown or password wrong.

    Same message for both cases so responses don't reveal which.
    """

    status_code = 401
    code = "INVALID_CREDENTIALS"

    def __init__(self):
        super().__init__(
            "Incorrect email or password. Please check your credentials and try again."
        )


class OtpMismatchError(AuthError):
    """Submitted activation code does not match the issued one."""

    code = "OTP_MISMATCH"

    def __init__(self):
        super().__init__("Invalid verification code. Please check the code and try again.")


class SessionNotFoundError(AuthError):
    """Refresh token is valid but the session cache entry is gone."""

    code = "SESSION_EXPIRED"

    def __init__(self):
        super().__init__("Session data not found. Please log in again.")


class DuplicateEmailError(ConflictError):
    """Email already belongs to a registered user."""

    def __init__(self, message: str = "Email is already taken. Please use a different email address."):
        super().__init__(message)


class EmailDeliveryError(UpstreamError):
    """Verification email could not be sent."""

    code = "EMAIL_DELIVERY_FAILED"
