"""
Application settings.

Values come from the environment (after loading `.env`), then from Vault
when VAULT_ADDR is configured. A missing required value fails startup
with a ConfigurationError naming the key.
"""

import logging
import os
from typing import Mapping

from dotenv import load_dotenv
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from auth.config import AuthConfig, TokenSecrets
from clients.vault_client import get_vault_secret
from core.exceptions import ConfigurationError
from utils.timezone import parse_duration

logger = logging.getLogger(__name__)

# env key -> (vault path, field) under the courses/ prefix
VAULT_KEYS: dict[str, tuple[str, str]] = {
    "MONGO_URL": ("mongo", "url"),
    "REDIS_URL": ("redis", "url"),
    "ACCESS_TOKEN_SECRET": ("tokens", "access"),
    "REFRESH_TOKEN_SECRET": ("tokens", "refresh"),
    "ACTIVATION_SECRET": ("tokens", "activation"),
    "CRYPTO_SECRET": ("tokens", "crypto"),
    "SESSION_SECRET": ("tokens", "session"),
    "EMAIL_GATEWAY_URL": ("email", "gateway_url"),
    "EMAIL_API_KEY": ("email", "api_key"),
    "EMAIL_HMAC_SECRET": ("email", "hmac_secret"),
    "CLOUDINARY_CLOUD_NAME": ("cloudinary", "cloud_name"),
    "CLOUDINARY_API_KEY": ("cloudinary", "api_key"),
    "CLOUDINARY_API_SECRET": ("cloudinary", "api_secret"),
    "GOOGLE_CLIENT_ID": ("oauth", "google_client_id"),
    "GOOGLE_CLIENT_SECRET": ("oauth", "google_client_secret"),
    "GITHUB_CLIENT_ID": ("oauth", "github_client_id"),
    "GITHUB_CLIENT_SECRET": ("oauth", "github_client_secret"),
}

REQUIRED_KEYS = (
    "MONGO_URL",
    "REDIS_URL",
    "ACCESS_TOKEN_SECRET",
    "REFRESH_TOKEN_SECRET",
    "ACTIVATION_SECRET",
    "CRYPTO_SECRET",
    "SESSION_SECRET",
    "EMAIL_GATEWAY_URL",
    "EMAIL_API_KEY",
    "EMAIL_HMAC_SECRET",
)


class Settings(BaseModel):
    """Every value the application needs at startup."""

    environment: str = "development"
    log_level: str = "INFO"

    mongo_url: str
    mongo_database: str = "courses"
    redis_url: str

    access_token_secret: str
    refresh_token_secret: str
    activation_secret: str
    crypto_secret: str
    session_secret: str

    access_token_expire: str = "5m"
    refresh_token_expire: str = "3d"
    activation_expire: str = "10m"

    email_gateway_url: str
    email_api_key: str
    email_hmac_secret: str

    cloudinary_cloud_name: str | None = None
    cloudinary_api_key: str | None = None
    cloudinary_api_secret: str | None = None

    google_client_id: str | None = None
    google_client_secret: str | None = None
    google_callback_url: str | None = None
    github_client_id: str | None = None
    github_client_secret: str | None = None
    github_callback_url: str | None = None

    client_url: str = "/"
    cors_origins: list[str] = Field(
        default_factory=lambda: [
            "http://localhost:5173",
            "http://localhost:3000",
            "http://localhost:8000",
        ]
    )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def media_configured(self) -> bool:
        return bool(self.cloudinary_cloud_name and self.cloudinary_api_key and self.cloudinary_api_secret)

    def auth_config(self) -> AuthConfig:
        """Auth settings with durations converted to seconds."""
        return AuthConfig(
            access_token_expire_seconds=_seconds(self.access_token_expire),
            refresh_token_expire_seconds=_seconds(self.refresh_token_expire),
            activation_expire_seconds=_seconds(self.activation_expire),
            cookie_secure=self.is_production,
            client_url=self.client_url,
        )

    def token_secrets(self) -> TokenSecrets:
        return TokenSecrets(
            access=self.access_token_secret,
            refresh=self.refresh_token_secret,
            activation=self.activation_secret,
            crypto=self.crypto_secret,
        )

    def oauth_callbacks(self) -> dict[str, str]:
        callbacks = {"google": self.google_callback_url, "github": self.github_callback_url}
        return {provider: url for provider, url in callbacks.items() if url}


def _seconds(duration: str) -> int:
    return int(parse_duration(duration).total_seconds())


def _from_vault(key: str, env: Mapping[str, str]) -> str | None:
    path, field = VAULT_KEYS[key]
    try:
        return get_vault_secret(path, field, env)
    except (KeyError, PermissionError, ValueError) as e:
        logger.warning(f"Vault lookup for {key} failed: {e}")
        return None


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """
    Build Settings from the environment, falling back to Vault.

    Args:
        env: Mapping to read instead of os.environ (skips .env loading)

    Raises:
        ConfigurationError: A required value is missing, or a duration is malformed or out of range
    """
    if env is None:
        load_dotenv()
        env = os.environ

    use_vault = bool(env.get("VAULT_ADDR"))

    def lookup(key: str) -> str | None:
        value = env.get(key)
        if value:
            return value
        if use_vault and key in VAULT_KEYS:
            return _from_vault(key, env)
        return None

    for key in REQUIRED_KEYS:
        if not lookup(key):
            raise ConfigurationError(f"Missing required configuration value: {key}")

    values = {}
    for name in Settings.model_fields:
        value = lookup(name.upper())
        if value is None:
            continue
        if name == "cors_origins":
            value = [origin.strip() for origin in value.split(",") if origin.strip()]
        values[name] = value

    settings = Settings(**values)
    for name in ("access_token_expire", "refresh_token_expire", "activation_expire"):
        try:
            parse_duration(getattr(settings, name))
        except ValueError as e:
            raise ConfigurationError(f"Invalid {name.upper()}: {e}")

    try:
        settings.auth_config()
    except PydanticValidationError as e:
        fields = ", ".join(str(error["loc"][0]) for error in e.errors())
        raise ConfigurationError(f"Auth setting out of range: {fields}")

    logger.info(f"Settings loaded for environment '{settings.environment}'")
    return settings
