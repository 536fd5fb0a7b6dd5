"""Tests for the Vault settings fallback."""

from unittest.mock import MagicMock, patch

import pytest
from hvac.exceptions import Forbidden, InvalidPath

from clients.vault_client import get_vault_secret, reset_vault

VAULT_ENV = {
    "VAULT_ADDR": "https://vault.test:8200",
    "VAULT_ROLE_ID": "role-id",
    "VAULT_SECRET_ID": "secret-id",
}


@pytest.fixture(autouse=True)
def fresh_vault():
    reset_vault()
    yield
    reset_vault()


@pytest.fixture
def hvac_client():
    """hvac.Client replaced with an authenticated mock."""
    mock = MagicMock()
    mock.auth.approle.login.return_value = {"auth": {"client_token": "s.token"}}
    mock.is_authenticated.return_value = True
    mock.secrets.kv.v2.read_secret_version.return_value = {
        "data": {"data": {"access": "a-secret", "refresh": "r-secret"}}
    }
    with patch("clients.vault_client.hvac.Client", return_value=mock) as factory:
        mock.factory = factory
        yield mock


class TestLogin:

    def test_missing_addr(self):
        with pytest.raises(ValueError, match="VAULT_ADDR"):
            get_vault_secret("tokens", "access", {})

    def test_missing_approle_credentials(self):
        with pytest.raises(ValueError, match="VAULT_ROLE_ID"):
            get_vault_secret("tokens", "access", {"VAULT_ADDR": "https://vault.test"})

    def test_approle_token_installed(self, hvac_client):
        get_vault_secret("tokens", "access", VAULT_ENV)

        hvac_client.factory.assert_called_once_with(url="https://vault.test:8200")
        hvac_client.auth.approle.login.assert_called_once_with(role_id="role-id", secret_id="secret-id")
        assert hvac_client.token == "s.token"

    def test_namespace_passed_through(self, hvac_client):
        get_vault_secret("tokens", "access", {**VAULT_ENV, "VAULT_NAMESPACE": "team"})
        hvac_client.factory.assert_called_once_with(url="https://vault.test:8200", namespace="team")

    def test_rejected_login(self, hvac_client):
        hvac_client.auth.approle.login.side_effect = Forbidden("permission denied")
        with pytest.raises(PermissionError, match="authentication"):
            get_vault_secret("tokens", "access", VAULT_ENV)

    def test_unauthenticated_after_login(self, hvac_client):
        hvac_client.is_authenticated.return_value = False
        with pytest.raises(PermissionError):
            get_vault_secret("tokens", "access", VAULT_ENV)

    def test_reads_os_environ_by_default(self, hvac_client, monkeypatch):
        for key, value in VAULT_ENV.items():
            monkeypatch.setenv(key, value)
        assert get_vault_secret("tokens", "access") == "a-secret"


class TestGetVaultSecret:

    def test_reads_prefixed_path(self, hvac_client):
        assert get_vault_secret("tokens", "access", VAULT_ENV) == "a-secret"

        hvac_client.secrets.kv.v2.read_secret_version.assert_called_once_with(
            path="courses/tokens", raise_on_deleted_version=True
        )

    def test_one_read_per_secret(self, hvac_client):
        get_vault_secret("tokens", "access", VAULT_ENV)
        assert get_vault_secret("tokens", "refresh", VAULT_ENV) == "r-secret"

        hvac_client.secrets.kv.v2.read_secret_version.assert_called_once()
        hvac_client.auth.approle.login.assert_called_once()

    def test_missing_path(self, hvac_client):
        hvac_client.secrets.kv.v2.read_secret_version.side_effect = InvalidPath()
        with pytest.raises(PermissionError, match="not found"):
            get_vault_secret("nonexistent", "field", VAULT_ENV)

    def test_forbidden_path(self, hvac_client):
        hvac_client.secrets.kv.v2.read_secret_version.side_effect = Forbidden()
        with pytest.raises(PermissionError, match="Access denied"):
            get_vault_secret("tokens", "access", VAULT_ENV)

    def test_missing_field(self, hvac_client):
        with pytest.raises(KeyError, match="session"):
            get_vault_secret("tokens", "session", VAULT_ENV)

    def test_reset_forgets_login_and_secrets(self, hvac_client):
        get_vault_secret("tokens", "access", VAULT_ENV)
        reset_vault()
        get_vault_secret("tokens", "access", VAULT_ENV)

        assert hvac_client.auth.approle.login.call_count == 2
        assert hvac_client.secrets.kv.v2.read_secret_version.call_count == 2
