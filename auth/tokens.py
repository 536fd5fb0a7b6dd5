"""Sign and verify HS256 tokens.

Mapping payloads become JWT claims (with `exp` when an expiry is given).
String or bytes payloads are signed as opaque JWS with content type
text/plain; they cannot carry an expiry.
"""

import logging
from collections.abc import Mapping
from datetime import timedelta
from typing import Any

import jwt
from jwt.api_jws import PyJWS

from auth.exceptions import EncodingError, ExpiredTokenError, InvalidTokenError
from utils.timezone import now_utc, parse_duration

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
_TEXT_CONTENT_TYPE = "text/plain"


class TokenCodec:
    """
    Stateless token signer/verifier.

    Usage:
        codec = TokenCodec()
        token = codec.sign({"id": "65f0..."}, secret, expires_in="5m")
        claims = codec.verify(token, secret)  # {"id": ..., "iat": ..., "exp": ...}
    """

    def __init__(self, algorithm: str = ALGORITHM):
        self._algorithm = algorithm
        self._jws = PyJWS()

    def sign(
        self,
        payload: Mapping[str, Any] | str | bytes,
        secret: str,
        expires_in: str | int | float | timedelta | None = None,
    ) -> str:
        """
        Sign payload with secret.

        Args:
            payload: Claims mapping, or opaque string/bytes
            secret: HMAC secret
            expires_in: Lifetime as timedelta, seconds, or "5m"/"3d" style string

        Raises:
            EncodingError: Payload type, secret type or expiry is unusable
        """
        if not isinstance(secret, str) or not secret:
            raise EncodingError("Token secret must be a non-empty string")

        if isinstance(payload, (str, bytes)):
            if expires_in is not None:
                raise EncodingError("Expiry is only supported for mapping payloads")
            body = payload.encode("utf-8") if isinstance(payload, str) else payload
            return self._jws.encode(
                body,
                secret,
                algorithm=self._algorithm,
                headers={"cty": _TEXT_CONTENT_TYPE},
            )

        if not isinstance(payload, Mapping):
            raise EncodingError(
                f"Token payload must be a string, bytes or mapping, got {type(payload).__name__}"
            )

        now = now_utc()
        claims = dict(payload)
        claims["iat"] = int(now.timestamp())
        if expires_in is not None:
            try:
                lifetime = parse_duration(expires_in)
            except ValueError as e:
                raise EncodingError(str(e))
            claims["exp"] = int((now + lifetime).timestamp())

        try:
            return jwt.encode(claims, secret, algorithm=self._algorithm)
        except TypeError as e:
            raise EncodingError(f"Token payload is not serializable: {e}")

    def verify(self, token: str, secret: str) -> dict[str, Any] | str:
        """
        Verify signature (and expiry, if present) and return the payload.

        Returns:
            Claims dict for mapping tokens, str for opaque tokens

        Raises:
            ExpiredTokenError: Signature valid, expiry passed
            InvalidTokenError: Anything else
        """
        if not isinstance(token, str) or not token:
            raise InvalidTokenError("Token must be a non-empty string")
        if not isinstance(secret, str) or not secret:
            raise InvalidTokenError("Token secret must be a non-empty string")

        try:
            header = jwt.get_unverified_header(token)
            if header.get("cty") == _TEXT_CONTENT_TYPE:
                body = self._jws.decode(token, secret, algorithms=[self._algorithm])
                return body.decode("utf-8")
            return jwt.decode(token, secret, algorithms=[self._algorithm])
        except jwt.ExpiredSignatureError:
            raise ExpiredTokenError()
        except (jwt.PyJWTError, UnicodeDecodeError) as e:
            logger.debug(f"Token verification failed: {e}")
            raise InvalidTokenError()
