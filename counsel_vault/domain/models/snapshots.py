"""
Audit snapshots: the closed set of shapes written to audit before/after state.

Each snapshot lists its own sensitive fields; the audit logger replaces those
values with a sentinel before persisting. Adding a field here means deciding
whether it belongs in sensitive_fields.
"""

from dataclasses import dataclass
from typing import Any, ClassVar, Dict, FrozenSet, Optional

from counsel_vault.domain.models.record import ConfidentialRecord


@dataclass(frozen=True)
class RecordSnapshot:
    """Record metadata plus its encrypted triple. The triple is always redacted."""

    sensitive_fields: ClassVar[FrozenSet[str]] = frozenset({"ciphertext", "nonce", "auth_tag"})

    id: str
    subject_id: str
    owner_id: str
    occurred_on: str
    created_at: str
    updated_at: str
    deleted_at: Optional[str]
    ciphertext: str
    nonce: str
    auth_tag: str

    @classmethod
    def of(cls, record: ConfidentialRecord) -> "RecordSnapshot":
        return cls(
            id=record.id,
            subject_id=record.subject_id,
            owner_id=record.owner_id,
            occurred_on=record.occurred_on.isoformat(),
            created_at=record.created_at.isoformat(),
            updated_at=record.updated_at.isoformat(),
            deleted_at=record.deleted_at.isoformat() if record.deleted_at else None,
            ciphertext=record.payload.ciphertext,
            nonce=record.payload.nonce,
            auth_tag=record.payload.auth_tag,
        )

    def audit_state(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "subject_id": self.subject_id,
            "owner_id": self.owner_id,
            "occurred_on": self.occurred_on,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
            "deleted_at": self.deleted_at,
            "has_content": bool(self.ciphertext),
            "ciphertext": self.ciphertext,
            "nonce": self.nonce,
            "auth_tag": self.auth_tag,
        }


@dataclass(frozen=True)
class AccessAttemptSnapshot:
    """Who tried what on whose record, and which rule refused it. Internal to the audit trail."""

    sensitive_fields: ClassVar[FrozenSet[str]] = frozenset()

    operation: str
    attempted_by: Optional[str]
    attempted_role: Optional[str]
    owned_by: Optional[str]
    reason: str

    def audit_state(self) -> Dict[str, Any]:
        return {
            "operation": self.operation,
            "attempted_by": self.attempted_by,
            "attempted_role": self.attempted_role,
            "owned_by": self.owned_by,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class ReadOutcomeSnapshot:
    """Result of a decryption for one record: DECRYPTED or UNDECRYPTABLE."""

    DECRYPTED: ClassVar[str] = "DECRYPTED"
    UNDECRYPTABLE: ClassVar[str] = "UNDECRYPTABLE"

    sensitive_fields: ClassVar[FrozenSet[str]] = frozenset()

    operation: str
    outcome: str

    def audit_state(self) -> Dict[str, Any]:
        return {"operation": self.operation, "outcome": self.outcome}
