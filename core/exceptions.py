"""Typed application errors.

Services raise these; the centralized handler in api.errors turns them
into the error envelope using `status_code` and `code`.
"""


class AppError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 500
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Something went wrong"):
        self.message = message
        super().__init__(message)


class ValidationError(AppError):
    """Malformed or missing input."""

    status_code = 400
    code = "VALIDATION_ERROR"


class AuthenticationRequiredError(AppError):
    """No session, or the session could not be established."""

    status_code = 400
    code = "NOT_AUTHENTICATED"

    def __init__(self, message: str = "Please login to access this resource"):
        super().__init__(message)


class ForbiddenError(AppError):
    """Authenticated, but the role is not allowed."""

    status_code = 403
    code = "FORBIDDEN"

    def __init__(self, message: str = "You do not have permission to perform this action"):
        super().__init__(message)


class NotFoundError(AppError):
    status_code = 404
    code = "NOT_FOUND"


class ConflictError(AppError):
    """Resource already exists (duplicate email, repeat purchase)."""

    status_code = 400
    code = "ALREADY_EXISTS"


class ConfigurationError(AppError):
    """A required setting is missing or out of range."""

    status_code = 500
    code = "CONFIGURATION_ERROR"


class UpstreamError(AppError):
    """Email, OAuth, media, storage or cache call failed."""

    status_code = 500
    code = "SERVICE_UNAVAILABLE"
