"""
Shallow redaction of audit state.

Only top-level keys are inspected: a sensitive name nested inside a sub-dict is
left as is. Callers shape what they log (see domain.models.snapshots).
"""

from typing import (
    Any,
    ClassVar,
    Dict,
    FrozenSet,
    Iterable,
    Mapping,
    Optional,
    Protocol,
    Union,
    runtime_checkable,
)

REDACTED = "[REDACTED]"

SENSITIVE_FIELDS: FrozenSet[str] = frozenset(
    {
        "password",
        "password_hash",
        "passwordHash",
        "ciphertext",
        "nonce",
        "auth_tag",
        "encrypted_content",
        "encryption_iv",
        "encryption_tag",
    }
)


@runtime_checkable
class Redactable(Protocol):
    """Audit snapshot that declares which of its fields must never be persisted."""

    sensitive_fields: ClassVar[FrozenSet[str]]

    def audit_state(self) -> Dict[str, Any]:
        ...


AuditState = Union[Redactable, Mapping[str, Any]]


def redact(state: Mapping[str, Any], extra_fields: Iterable[str] = ()) -> Dict[str, Any]:
    """Return a copy with sensitive top-level values replaced by REDACTED. Input is not mutated."""
    sensitive = SENSITIVE_FIELDS.union(extra_fields)
    return {key: (REDACTED if key in sensitive else value) for key, value in state.items()}


def redact_state(state: Optional[AuditState]) -> Optional[Dict[str, Any]]:
    """Redact a snapshot or plain mapping for persistence. None stays None."""
    if state is None:
        return None
    if isinstance(state, Redactable):
        return redact(state.audit_state(), state.sensitive_fields)
    return redact(state)
