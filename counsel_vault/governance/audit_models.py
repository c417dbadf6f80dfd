"""Immutable audit entry model. Domain-level immutability."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional


class AuditAction(str, Enum):
    CREATE = "CREATE"
    READ = "READ"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    UNAUTHORIZED_ACCESS_ATTEMPT = "UNAUTHORIZED_ACCESS_ATTEMPT"


class EntityType(str, Enum):
    CONFIDENTIAL_RECORD = "CONFIDENTIAL_RECORD"


@dataclass(frozen=True)
class AuditEntry:
    """
    Immutable audit entry: who (actor_id, None for system), what (action on
    entity), when (UTC). before_state / after_state hold redacted snapshots only.
    """

    id: str
    actor_id: Optional[str]
    action: AuditAction
    entity_type: str
    entity_id: Optional[str]
    before_state: Optional[Dict[str, Any]]
    after_state: Optional[Dict[str, Any]]
    occurred_at: datetime
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Structured representation for JSON logging."""
        return {
            "id": self.id,
            "actor_id": self.actor_id,
            "action": self.action.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "before_state": dict(self.before_state) if self.before_state is not None else None,
            "after_state": dict(self.after_state) if self.after_state is not None else None,
            "occurred_at": self.occurred_at.isoformat(),
            "ip_address": self.ip_address,
            "user_agent": self.user_agent,
        }


@dataclass(frozen=True)
class AuditWriteResult:
    """Outcome of a best-effort audit write. written=False never fails the primary operation."""

    entry: Optional[AuditEntry]
    written: bool
    error: Optional[str] = None
