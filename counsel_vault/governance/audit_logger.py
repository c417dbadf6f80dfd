"""Best-effort, redacted audit logging for confidential records. No FastAPI."""

import logging
import uuid
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable, Optional

from counsel_vault.governance.audit_models import (
    AuditAction,
    AuditEntry,
    AuditWriteResult,
    EntityType,
)
from counsel_vault.governance.audit_repository import AuditRepository
from counsel_vault.governance.redaction import AuditState, redact, redact_state


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuditLogger:
    """
    Writes immutable audit entries via repository.
    before/after state is redacted before it leaves this class.
    A failed write is reported to the operational log and returned as
    AuditWriteResult(written=False); it is never raised to the caller.
    """

    def __init__(
        self,
        repository: AuditRepository,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._repository = repository
        self._logger = logger or logging.getLogger(__name__)
        self._clock = clock

    async def record(self, entry: AuditEntry) -> AuditWriteResult:
        """Persist a prepared entry. States are redacted again; redaction is idempotent."""
        try:
            entry = replace(
                entry,
                before_state=redact(entry.before_state) if entry.before_state is not None else None,
                after_state=redact(entry.after_state) if entry.after_state is not None else None,
            )
            await self._repository.save(entry)
        except Exception as e:
            self._logger.error(
                "audit_write_failed",
                extra={
                    "action": entry.action.value,
                    "entity_type": entry.entity_type,
                    "entity_id": entry.entity_id,
                    "actor_id": entry.actor_id,
                    "error": type(e).__name__,
                },
            )
            return AuditWriteResult(entry=entry, written=False, error=str(e))
        return AuditWriteResult(entry=entry, written=True)

    async def log_action(
        self,
        *,
        actor_id: Optional[str],
        action: AuditAction,
        entity_id: Optional[str],
        entity_type: str = EntityType.CONFIDENTIAL_RECORD.value,
        before: Optional[AuditState] = None,
        after: Optional[AuditState] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> AuditWriteResult:
        """Build an entry from snapshots (redacted here) and record it. Timestamp is UTC."""
        try:
            entry = AuditEntry(
                id=str(uuid.uuid4()),
                actor_id=actor_id,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                before_state=redact_state(before),
                after_state=redact_state(after),
                occurred_at=self._clock(),
                ip_address=ip_address,
                user_agent=user_agent,
            )
        except Exception as e:
            self._logger.error(
                "audit_entry_build_failed",
                extra={
                    "action": action.value,
                    "entity_type": entity_type,
                    "entity_id": entity_id,
                    "actor_id": actor_id,
                    "error": type(e).__name__,
                },
            )
            return AuditWriteResult(entry=None, written=False, error=str(e))
        return await self.record(entry)
