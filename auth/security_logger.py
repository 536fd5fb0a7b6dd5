"""Security event logging for auth audit trail.

Append-only log to the security_events collection.
"""

from enum import Enum
from typing import Any

from clients.mongo_client import MongoDBClient
from utils.timezone import now_utc


class SecurityEvent(Enum):
    """Auth security event types."""

    SIGNUP_REQUESTED = "signup_requested"
    ACCOUNT_ACTIVATED = "account_activated"
    ACTIVATION_FAILED = "activation_failed"
    SIGNIN_SUCCEEDED = "signin_succeeded"
    SIGNIN_FAILED = "signin_failed"
    OAUTH_SIGNIN = "oauth_signin"
    SESSION_REFRESHED = "session_refreshed"
    SESSION_REFRESH_FAILED = "session_refresh_failed"
    SESSION_REVOKED = "session_revoked"
    PASSWORD_CHANGED = "password_changed"
    USER_CREATED = "user_created"
    USER_ROLE_CHANGED = "user_role_changed"
    USER_DEACTIVATED = "user_deactivated"
    USER_DELETED = "user_deleted"


class SecurityLogger:
    """Append-only security event logger."""

    COLLECTION = "security_events"

    def __init__(self, mongo: MongoDBClient):
        self._events = mongo.collection(self.COLLECTION)

    def log(
        self,
        event: SecurityEvent,
        email: str | None = None,
        user_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Log security event to database."""
        self._events.insert_one(
            {
                "event_type": event.value,
                "email": email,
                "user_id": str(user_id) if user_id else None,
                "details": details,
                "created_at": now_utc(),
            }
        )
