"""Tests for OtpIssuer - activation codes bound to signed tokens."""

from datetime import timedelta

import pytest

from auth.otp import OtpIssuer, otp_matches
from auth.tokens import TokenCodec
from core.exceptions import ConfigurationError

SECRET = "otp-test-secret"


@pytest.fixture
def codec():
    return TokenCodec()


class TestOtpIssuerConfig:

    @pytest.mark.parametrize("length", [5, 11, 0, "6"])
    def test_length_outside_range_is_configuration_error(self, codec, length):
        with pytest.raises(ConfigurationError):
            OtpIssuer(codec, length=length)


class TestGenerate:

    @pytest.mark.parametrize("length", [6, 8, 10])
    def test_code_has_exactly_n_digits(self, codec, length):
        issuer = OtpIssuer(codec, length=length)
        for _ in range(50):
            code = issuer.generate()
            assert 10 ** (length - 1) <= code < 10 ** length


class TestIssue:

    def test_token_carries_payload_and_code(self, codec):
        issuer = OtpIssuer(codec)
        ticket = issuer.issue({"email": "a@b.c"}, SECRET)

        claims = codec.verify(ticket.token, SECRET)

        assert claims["user"] == {"email": "a@b.c"}
        assert claims["otp"] == ticket.otp

    def test_token_expires_after_configured_lifetime(self, codec):
        issuer = OtpIssuer(codec, expires_in=timedelta(minutes=10))
        claims = codec.verify(issuer.issue({}, SECRET).token, SECRET)
        assert claims["exp"] - claims["iat"] == 600


class TestOtpMatches:
    """Numeric comparison that fails closed."""

    def test_string_matches_int(self):
        assert otp_matches("123456", 123456) is True

    def test_int_matches_int(self):
        assert otp_matches(123456, 123456) is True

    def test_surrounding_whitespace_ignored(self):
        assert otp_matches(" 123456 ", 123456) is True

    def test_different_code(self):
        assert otp_matches("123457", 123456) is False

    @pytest.mark.parametrize("provided", ["abc", "", None, True, "12_3456", [123456]])
    def test_non_numeric_never_matches(self, provided):
        assert otp_matches(provided, 123456) is False

    def test_nan_never_matches_nan(self):
        assert otp_matches("abc", "abc") is False
