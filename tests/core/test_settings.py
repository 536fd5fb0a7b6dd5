"""Tests for settings loading."""

from unittest.mock import patch

import pytest

from core.exceptions import ConfigurationError
from core.settings import REQUIRED_KEYS, Settings, load_settings


def base_env(**overrides) -> dict:
    env = {
        "MONGO_URL": "mongodb://localhost:27017",
        "REDIS_URL": "redis://localhost:6379/0",
        "ACCESS_TOKEN_SECRET": "a",
        "REFRESH_TOKEN_SECRET": "r",
        "ACTIVATION_SECRET": "act",
        "CRYPTO_SECRET": "c",
        "SESSION_SECRET": "s",
        "EMAIL_GATEWAY_URL": "https://email.test/send",
        "EMAIL_API_KEY": "k",
        "EMAIL_HMAC_SECRET": "h",
    }
    env.update(overrides)
    return env


class TestLoadSettings:

    def test_loads_required_and_defaults(self):
        settings = load_settings(base_env())

        assert settings.mongo_url == "mongodb://localhost:27017"
        assert settings.mongo_database == "courses"
        assert settings.environment == "development"
        assert settings.access_token_expire == "5m"
        assert settings.media_configured is False

    @pytest.mark.parametrize("key", REQUIRED_KEYS)
    def test_missing_required_key_names_it(self, key):
        env = base_env()
        del env[key]
        with pytest.raises(ConfigurationError, match=key):
            load_settings(env)

    def test_cors_origins_split(self):
        settings = load_settings(base_env(CORS_ORIGINS="https://a.test, https://b.test,"))
        assert settings.cors_origins == ["https://a.test", "https://b.test"]

    def test_bad_duration(self):
        with pytest.raises(ConfigurationError, match="ACCESS_TOKEN_EXPIRE"):
            load_settings(base_env(ACCESS_TOKEN_EXPIRE="soon"))

    def test_optional_media_settings(self):
        settings = load_settings(base_env(
            CLOUDINARY_CLOUD_NAME="demo",
            CLOUDINARY_API_KEY="key",
            CLOUDINARY_API_SECRET="secret",
        ))
        assert settings.media_configured is True

    def test_vault_fallback_only_with_vault_addr(self):
        env = base_env(VAULT_ADDR="https://vault.test")
        del env["MONGO_URL"]

        with patch("core.settings.get_vault_secret", return_value="mongodb://vault") as lookup:
            settings = load_settings(env)

        assert settings.mongo_url == "mongodb://vault"
        lookup.assert_any_call("mongo", "url", env)

    def test_vault_not_consulted_without_addr(self):
        env = base_env()
        del env["MONGO_URL"]

        with patch("core.settings.get_vault_secret") as lookup:
            with pytest.raises(ConfigurationError, match="MONGO_URL"):
                load_settings(env)
        lookup.assert_not_called()

    def test_vault_failure_reports_missing_key(self):
        env = base_env(VAULT_ADDR="https://vault.test")
        del env["REDIS_URL"]

        with patch("core.settings.get_vault_secret", side_effect=PermissionError("denied")):
            with pytest.raises(ConfigurationError, match="REDIS_URL"):
                load_settings(env)


class TestSettingsDerived:

    def test_auth_config_converts_durations(self):
        settings = load_settings(base_env(
            ACCESS_TOKEN_EXPIRE="15m",
            REFRESH_TOKEN_EXPIRE="7d",
            ACTIVATION_EXPIRE="5m",
            ENVIRONMENT="production",
            CLIENT_URL="https://courses.test",
        ))
        config = settings.auth_config()

        assert config.access_token_expire_seconds == 900
        assert config.refresh_token_expire_seconds == 7 * 86400
        assert config.activation_expire_seconds == 300
        assert config.cookie_secure is True
        assert config.client_url == "https://courses.test"

    @pytest.mark.parametrize(
        "key,value,field,seconds",
        [
            ("REFRESH_TOKEN_EXPIRE", "12h", "refresh_token_expire_seconds", 43200),
            ("ACCESS_TOKEN_EXPIRE", "30s", "access_token_expire_seconds", 30),
            ("ACTIVATION_EXPIRE", "90s", "activation_expire_seconds", 90),
        ],
    )
    def test_durations_kept_exact(self, key, value, field, seconds):
        config = load_settings(base_env(**{key: value})).auth_config()
        assert getattr(config, field) == seconds

    @pytest.mark.parametrize(
        "key,value",
        [
            ("ACCESS_TOKEN_EXPIRE", "2d"),
            ("REFRESH_TOKEN_EXPIRE", "91d"),
            ("ACTIVATION_EXPIRE", "10s"),
        ],
    )
    def test_out_of_range_duration_fails_at_load(self, key, value):
        with pytest.raises(ConfigurationError, match=f"{key.lower()}_seconds"):
            load_settings(base_env(**{key: value}))

    def test_token_secrets(self):
        secrets = load_settings(base_env()).token_secrets()
        assert (secrets.access, secrets.refresh, secrets.activation, secrets.crypto) == ("a", "r", "act", "c")

    def test_oauth_callbacks_skip_unset(self):
        settings = Settings(**{k.lower(): v for k, v in base_env(GITHUB_CALLBACK_URL="https://x/cb").items()})
        assert settings.oauth_callbacks() == {"github": "https://x/cb"}
