"""AES-256-GCM cipher for confidential record content. Key is injected, never read from env."""

import os
import re
from dataclasses import dataclass
from typing import Optional

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from counsel_vault.security.exceptions import (
    AuthenticationError,
    FormatError,
    InvalidInputError,
)
from counsel_vault.security.key_provider import KeyProvider

NONCE_SIZE = 16  # 128-bit nonce
TAG_SIZE = 16  # 128-bit authentication tag

_HEX = re.compile(r"[0-9a-fA-F]+")


@dataclass(frozen=True)
class EncryptedPayload:
    """
    Hex-encoded output of a single encrypt() call. The three values are only
    valid together and are stored and replaced as one unit.
    """

    ciphertext: str
    nonce: str
    auth_tag: str


def _decode_hex(value: object, name: str, size: Optional[int] = None) -> bytes:
    if not isinstance(value, str) or not value:
        raise FormatError(f"{name} must be a non-empty hexadecimal string")
    if not _HEX.fullmatch(value) or len(value) % 2:
        raise FormatError(f"{name} must be hexadecimal")
    if size is not None and len(value) != size * 2:
        raise FormatError(f"{name} must be {size * 2} hexadecimal characters ({size} bytes)")
    return bytes.fromhex(value)


class CipherEngine:
    """
    Authenticated encryption of single text payloads (AES-256-GCM, no associated data).
    Every encrypt() draws a fresh random nonce. Never logs plaintext.
    """

    def __init__(self, key_provider: KeyProvider) -> None:
        self._aesgcm = AESGCM(key_provider.resolve_key())

    def encrypt(self, plaintext: str) -> EncryptedPayload:
        """Encrypt non-empty text. Raises InvalidInputError on empty or non-text input."""
        if not isinstance(plaintext, str):
            raise InvalidInputError("Plaintext must be a string")
        if not plaintext:
            raise InvalidInputError("Plaintext must not be empty")
        nonce = os.urandom(NONCE_SIZE)
        sealed = self._aesgcm.encrypt(nonce, plaintext.encode("utf-8"), None)
        # AESGCM appends the tag to the ciphertext
        return EncryptedPayload(
            ciphertext=sealed[:-TAG_SIZE].hex(),
            nonce=nonce.hex(),
            auth_tag=sealed[-TAG_SIZE:].hex(),
        )

    def decrypt(self, ciphertext: str, nonce: str, auth_tag: str) -> str:
        """
        Decrypt a stored triple. Raises FormatError for malformed input and a single
        AuthenticationError for any verification failure (tampered data or wrong key).
        """
        raw_ciphertext = _decode_hex(ciphertext, "ciphertext")
        raw_nonce = _decode_hex(nonce, "nonce", NONCE_SIZE)
        raw_tag = _decode_hex(auth_tag, "auth_tag", TAG_SIZE)
        try:
            plain = self._aesgcm.decrypt(raw_nonce, raw_ciphertext + raw_tag, None)
        except InvalidTag as e:
            raise AuthenticationError(
                "Decryption failed: authentication failed (tampered data or wrong key)"
            ) from e
        try:
            return plain.decode("utf-8")
        except UnicodeDecodeError as e:
            raise FormatError("Decrypted payload is not valid UTF-8 text") from e

    def decrypt_payload(self, payload: EncryptedPayload) -> str:
        return self.decrypt(payload.ciphertext, payload.nonce, payload.auth_tag)
