"""One-time activation codes wrapped in signed, time-boxed tokens."""

import math
import secrets
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from auth.tokens import TokenCodec
from core.exceptions import ConfigurationError

MIN_OTP_LENGTH = 6
MAX_OTP_LENGTH = 10


@dataclass
class ActivationTicket:
    """Signed activation token plus the code it carries."""

    token: str
    otp: int


class OtpIssuer:
    """Generates numeric codes and binds them to pending-account data."""

    def __init__(
        self,
        codec: TokenCodec,
        length: int = MIN_OTP_LENGTH,
        expires_in: timedelta = timedelta(minutes=10),
    ):
        if not isinstance(length, int) or not MIN_OTP_LENGTH <= length <= MAX_OTP_LENGTH:
            raise ConfigurationError(
                f"OTP length must be between {MIN_OTP_LENGTH} and {MAX_OTP_LENGTH}, got {length}"
            )
        self._codec = codec
        self._length = length
        self._expires_in = expires_in

    def generate(self) -> int:
        """Uniform random integer in [10**(n-1), 10**n)."""
        low = 10 ** (self._length - 1)
        return low + secrets.randbelow(10 ** self._length - low)

    def issue(self, payload: dict[str, Any], secret: str) -> ActivationTicket:
        """
        Issue a code and sign it together with payload.

        Token claims are {"user": payload, "otp": code, "iat", "exp"}.

        Raises:
            EncodingError: Secret unusable
        """
        otp = self.generate()
        token = self._codec.sign(
            {"user": payload, "otp": otp},
            secret,
            expires_in=self._expires_in,
        )
        return ActivationTicket(token=token, otp=otp)


def _as_number(value: Any) -> float:
    """Numeric coercion; anything non-numeric is NaN."""
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text or "_" in text:
            return math.nan
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def otp_matches(provided: Any, expected: Any) -> bool:
    """
    Compare two codes numerically.

    "012345" matches 12345. Non-numeric input never matches, since
    NaN is unequal to everything.
    """
    return _as_number(provided) == _as_number(expected)
