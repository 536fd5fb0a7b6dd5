"""
Vault fallback for settings that are not in the environment.

Secrets live in KV v2 under the 'courses/' prefix, one secret per
concern ('mongo', 'tokens', 'email', ...). Each secret is read once and
kept for the life of the process.
"""

import logging
import os
from typing import Mapping

import hvac
from hvac.exceptions import Forbidden, InvalidPath, Unauthorized

logger = logging.getLogger(__name__)

SECRET_PREFIX = "courses"

_client: hvac.Client | None = None
_secrets: dict[str, dict[str, str]] = {}


def _login(env: Mapping[str, str]) -> hvac.Client:
    """
    AppRole login from VAULT_ADDR, VAULT_ROLE_ID and VAULT_SECRET_ID.

    Raises:
        ValueError: A Vault setting is missing
        PermissionError: Login rejected
    """
    addr = env.get("VAULT_ADDR")
    role_id = env.get("VAULT_ROLE_ID")
    secret_id = env.get("VAULT_SECRET_ID")
    if not addr:
        raise ValueError("VAULT_ADDR is required for Vault lookups")
    if not role_id or not secret_id:
        raise ValueError("VAULT_ROLE_ID and VAULT_SECRET_ID are required for Vault lookups")

    kwargs = {"url": addr}
    if env.get("VAULT_NAMESPACE"):
        kwargs["namespace"] = env["VAULT_NAMESPACE"]
    client = hvac.Client(**kwargs)

    try:
        response = client.auth.approle.login(role_id=role_id, secret_id=secret_id)
    except (Unauthorized, Forbidden, InvalidPath) as e:
        raise PermissionError(f"Vault AppRole authentication failed: {e}")
    client.token = response["auth"]["client_token"]

    if not client.is_authenticated():
        raise PermissionError("Vault AppRole authentication failed")
    logger.info(f"Authenticated to Vault at {addr}")
    return client


def _read(client: hvac.Client, path: str) -> dict[str, str]:
    full_path = f"{SECRET_PREFIX}/{path}"
    try:
        response = client.secrets.kv.v2.read_secret_version(path=full_path, raise_on_deleted_version=True)
    except InvalidPath:
        raise PermissionError(f"Secret '{full_path}' not found in Vault")
    except (Unauthorized, Forbidden) as e:
        raise PermissionError(f"Access denied to secret '{full_path}': {e}")
    return response["data"]["data"]


def get_vault_secret(path: str, field: str, env: Mapping[str, str] | None = None) -> str:
    """
    One field of the secret at courses/<path>.

    Args:
        path: Secret name under the courses/ prefix, e.g. 'mongo'
        field: Field within the secret, e.g. 'url'
        env: Where to read the Vault login settings (defaults to os.environ)

    Raises:
        ValueError: Vault login settings missing
        PermissionError: Login rejected, or secret missing or forbidden
        KeyError: Secret has no such field
    """
    global _client

    if path not in _secrets:
        if _client is None:
            _client = _login(os.environ if env is None else env)
        _secrets[path] = _read(_client, path)

    secret = _secrets[path]
    if field not in secret:
        raise KeyError(f"Field '{field}' not found in secret '{SECRET_PREFIX}/{path}'")
    return secret[field]


def reset_vault() -> None:
    """Forget the Vault login and every secret read so far."""
    global _client
    _client = None
    _secrets.clear()
