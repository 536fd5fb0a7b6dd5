"""Session cache: serialized user records keyed by user id.

The cache entry is the source of truth for whether a session is alive.
Tokens stay cryptographically valid after logout; refresh fails because
the entry is gone.
"""

import logging
from typing import Any

from clients.redis_client import RedisClient
from auth.exceptions import InvalidKeyError

logger = logging.getLogger(__name__)


class SessionCache:
    """Get/set/delete cached user records.

    Values are JSON dicts (password stripped). A set on an existing key
    overwrites value and TTL.
    """

    KEY_PREFIX = "session:"

    def __init__(self, redis: RedisClient):
        self._redis = redis

    def _key(self, user_id: Any) -> str:
        """Generate cache key for user id.

        Raises InvalidKeyError for None or empty ids so callers never
        read or write an empty key.
        """
        if user_id is None or str(user_id).strip() == "":
            raise InvalidKeyError()
        return f"{self.KEY_PREFIX}{user_id}"

    def get(self, user_id: Any) -> dict | None:
        """Cached user, or None if absent."""
        data = self._redis.get_json(self._key(user_id))
        if data is None:
            return None
        if not isinstance(data, dict):
            logger.warning(f"Discarding malformed session entry for {user_id}")
            return None
        return data

    def set(self, user_id: Any, user: dict, ttl_seconds: int | None = None) -> None:
        """Store user; no expiry when ttl_seconds is None."""
        key = self._key(user_id)
        user = {k: v for k, v in user.items() if k != "password"}
        self._redis.set_json(key, user, expire_seconds=ttl_seconds)

    def delete(self, user_id: Any) -> None:
        """Remove entry. Safe to call for a missing entry."""
        self._redis.delete(self._key(user_id))
