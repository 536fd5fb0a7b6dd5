"""
Symmetric encryption for pending-signup passwords.

The activation token is only signed, not encrypted, so the password
inside it is encrypted with Fernet (AES + HMAC) under a key derived from
the crypto secret.
"""

import base64
import hashlib

from cryptography.fernet import Fernet, InvalidToken

from core.exceptions import ConfigurationError


class PasswordCipher:
    """Encrypt/decrypt short strings with a secret-derived Fernet key."""

    def __init__(self, secret: str):
        if not secret:
            raise ConfigurationError("Crypto secret is required")
        key = base64.urlsafe_b64encode(hashlib.sha256(secret.encode("utf-8")).digest())
        self._fernet = Fernet(key)

    def encrypt(self, plain: str) -> str:
        """Encrypt a string for embedding in a token."""
        return self._fernet.encrypt(plain.encode("utf-8")).decode("utf-8")

    def decrypt(self, ciphertext: str) -> str:
        """
        Decrypt a previously encrypted string.

        Raises ValueError if the ciphertext was tampered with or made
        under a different secret.
        """
        if not isinstance(ciphertext, str):
            raise ValueError("Invalid encrypted value")
        try:
            return self._fernet.decrypt(ciphertext.encode("utf-8")).decode("utf-8")
        except InvalidToken:
            raise ValueError("Invalid encrypted value")
