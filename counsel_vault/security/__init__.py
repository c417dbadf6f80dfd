"""Security: key provider, AEAD cipher, caller identity, RBAC, ownership guard."""

from counsel_vault.security.access_guard import (
    AccessControlGuard,
    Allowed,
    Decision,
    Denied,
    DenialReason,
)
from counsel_vault.security.cipher import CipherEngine, EncryptedPayload
from counsel_vault.security.identity import Caller, Role
from counsel_vault.security.key_provider import KeyProvider, generate_key_hex
from counsel_vault.security.rbac import RBACService

__all__ = [
    "AccessControlGuard",
    "Allowed",
    "Caller",
    "CipherEngine",
    "Decision",
    "Denied",
    "DenialReason",
    "EncryptedPayload",
    "KeyProvider",
    "RBACService",
    "Role",
    "generate_key_hex",
]
