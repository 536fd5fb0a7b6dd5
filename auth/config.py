"""Authentication configuration."""

from pydantic import BaseModel, Field


class AuthConfig(BaseModel):
    """
    Authentication configuration.

    All lifetimes and TTLs are in seconds.
    """

    # Token lifetimes
    access_token_expire_seconds: int = Field(
        default=300,  # 5 minutes
        description="Access token lifetime",
        ge=1,
        le=86400,
    )
    refresh_token_expire_seconds: int = Field(
        default=259200,  # 3 days
        description="Refresh token lifetime",
        ge=60,
        le=7776000,  # 90 days
    )

    # Activation
    activation_expire_seconds: int = Field(
        default=600,  # 10 minutes
        description="How long an emailed activation code remains valid",
        ge=60,
        le=3600,
    )
    otp_length: int = Field(
        default=6,
        description="Digits in the activation code",
        ge=6,
        le=10,
    )

    # Session cache
    session_cache_ttl_seconds: int = Field(
        default=604800,  # 7 days
        description="TTL for every session cache write",
        ge=60,
    )

    # Password hashing
    password_hash_rounds: int = Field(
        default=14,
        description="bcrypt cost factor",
        ge=4,
        le=31,
    )

    # Cookies and redirects
    cookie_secure: bool = Field(
        default=False,
        description="Mark session cookies Secure (production)",
    )
    client_url: str = Field(
        default="/",
        description="Where OAuth callbacks redirect after sign-in",
    )
    app_name: str = Field(
        default="Course Platform",
        description="Application name for emails",
    )

    @property
    def access_token_max_age(self) -> int:
        """Access cookie max-age in seconds."""
        return self.access_token_expire_seconds

    @property
    def refresh_token_max_age(self) -> int:
        """Refresh cookie max-age in seconds."""
        return self.refresh_token_expire_seconds


class TokenSecrets(BaseModel):
    """
    Signing and encryption secrets.

    Left empty when unconfigured; flows that need a missing secret
    fail with ConfigurationError instead of signing with "".
    """

    access: str = ""
    refresh: str = ""
    activation: str = ""
    crypto: str = ""
