"""Record encryption key. Resolved once from configuration and injected; no env lookups."""

import re
import secrets
from typing import Optional

from counsel_vault.config.settings import AppSettings
from counsel_vault.security.exceptions import ConfigurationError

KEY_SIZE = 32  # AES-256
KEY_ENV_NAME = "DATABASE_ENCRYPTION_KEY"

_HEX_KEY = re.compile(r"[0-9a-fA-F]+")


def _decode_key(raw: Optional[str]) -> bytes:
    if raw is None or not raw.strip():
        raise ConfigurationError(f"{KEY_ENV_NAME} is not set")
    value = raw.strip()
    if not _HEX_KEY.fullmatch(value):
        raise ConfigurationError(f"{KEY_ENV_NAME} must be hexadecimal")
    if len(value) != KEY_SIZE * 2:
        raise ConfigurationError(
            f"{KEY_ENV_NAME} must be {KEY_SIZE * 2} hexadecimal characters ({KEY_SIZE} bytes)"
        )
    return bytes.fromhex(value)


def generate_key_hex() -> str:
    """Fresh random key in the configured encoding, for provisioning DATABASE_ENCRYPTION_KEY."""
    return secrets.token_hex(KEY_SIZE)


class KeyProvider:
    """
    Holds the process-wide symmetric key. The secret is validated on first
    resolve_key() and the decoded key is memoized; later calls return the same bytes.
    Construct one per process (or per test) and pass it to the cipher.
    """

    def __init__(self, secret: Optional[str]) -> None:
        self._secret = secret
        self._key: Optional[bytes] = None

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "KeyProvider":
        secret = settings.database_encryption_key
        return cls(secret.get_secret_value() if secret is not None else None)

    def resolve_key(self) -> bytes:
        """Return the 32-byte key. Raises ConfigurationError if absent or malformed."""
        if self._key is None:
            self._key = _decode_key(self._secret)
            self._secret = None
        return self._key

    def __repr__(self) -> str:
        state = "resolved" if self._key is not None else "unresolved"
        return f"KeyProvider({state})"
