"""Confidential record repository: transaction boundary. Orchestrates guard, roster, cipher, store, audit."""

import logging
from datetime import date, datetime, timezone
from typing import Callable, List, NoReturn, Optional

from counsel_vault.application.exceptions import (
    DataIntegrityError,
    NotAssignedError,
    NotFoundError,
    PermissionDeniedError,
)
from counsel_vault.application.ports import RecordStore, RosterLookup
from counsel_vault.domain.models.record import (
    ConfidentialRecord,
    ContentResult,
    Decrypted,
    RecordListItem,
    Undecryptable,
)
from counsel_vault.domain.models.snapshots import (
    AccessAttemptSnapshot,
    ReadOutcomeSnapshot,
    RecordSnapshot,
)
from counsel_vault.domain.schemas.record import RecordFilters, RecordView
from counsel_vault.domain.validators.record_validator import (
    ContentPolicy,
    validate_content,
    validate_identifier,
    validate_occurred_on,
)
from counsel_vault.governance.audit_logger import AuditLogger
from counsel_vault.governance.audit_models import AuditAction
from counsel_vault.governance.redaction import AuditState
from counsel_vault.security.access_guard import AccessControlGuard, Denied
from counsel_vault.security.cipher import CipherEngine
from counsel_vault.security.exceptions import AuthenticationError, FormatError
from counsel_vault.security.identity import Caller


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ConfidentialRecordRepository:
    """
    Operation surface for confidential records: create, read, update, delete, list.

    Per operation, strictly in order: authorize -> assignment check (create/update)
    -> cipher -> store write -> audit write. The audit write is best-effort and
    never undoes the store write. Every refusal is audited as
    UNAUTHORIZED_ACCESS_ATTEMPT and surfaced as a generic PermissionDeniedError.
    Nothing is retried; integrity failures surface as DataIntegrityError.
    """

    def __init__(
        self,
        store: RecordStore,
        roster: RosterLookup,
        cipher: CipherEngine,
        audit_logger: AuditLogger,
        *,
        guard: Optional[AccessControlGuard] = None,
        content_policy: Optional[ContentPolicy] = None,
        logger: Optional[logging.Logger] = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._store = store
        self._roster = roster
        self._cipher = cipher
        self._audit_logger = audit_logger
        self._guard = guard or AccessControlGuard()
        self._content_policy = content_policy or ContentPolicy()
        self._logger = logger or logging.getLogger(__name__)
        self._clock = clock

    async def create(
        self,
        caller: Caller,
        subject_id: str,
        occurred_on: date,
        plaintext: str,
    ) -> str:
        """
        Create a record owned by the caller. The owner is always the caller's
        actor_id; it cannot be supplied separately. Returns the new record id.
        """
        decision = self._guard.check_role(caller)
        if isinstance(decision, Denied):
            await self._deny(caller, "create", decision)
        owner_id = caller.actor_id

        validate_identifier(subject_id, "subject_id")
        await self._require_assignment(owner_id, subject_id)
        now = self._clock()
        validate_occurred_on(occurred_on, now.date())
        validate_content(plaintext, self._content_policy)

        payload = self._cipher.encrypt(plaintext)
        record = ConfidentialRecord.create(
            subject_id=subject_id,
            owner_id=owner_id,
            occurred_on=occurred_on,
            payload=payload,
            now=now,
        )
        await self._store.add(record)
        self._logger.info(
            "record_created",
            extra={"record_id": record.id, "subject_id": subject_id, "owner_id": owner_id},
        )

        await self._audit(caller, AuditAction.CREATE, record.id, after=RecordSnapshot.of(record))
        return record.id

    async def read(self, record_id: str, caller: Caller) -> RecordView:
        """Decrypt a record for its owner. NotFound, PermissionDenied or DataIntegrityError otherwise."""
        record = await self._load_authorized(record_id, caller, "read")

        content = await self._open(record, caller, "read")
        if isinstance(content, Undecryptable):
            raise DataIntegrityError(f"Record {record.id} failed integrity verification") from content.error

        return RecordView(
            id=record.id,
            subject_id=record.subject_id,
            owner_id=record.owner_id,
            occurred_on=record.occurred_on,
            content=content.content,
            created_at=record.created_at,
            updated_at=record.updated_at,
        )

    async def update(
        self,
        record_id: str,
        caller: Caller,
        plaintext: str,
        *,
        subject_id: Optional[str] = None,
        occurred_on: Optional[date] = None,
    ) -> None:
        """
        Replace content (and optionally subject / date). Always re-encrypts with a
        fresh nonce, even for unchanged content. Ownership never changes.
        """
        record = await self._load_authorized(record_id, caller, "update")

        new_subject_id = subject_id if subject_id is not None else record.subject_id
        new_occurred_on = occurred_on if occurred_on is not None else record.occurred_on
        validate_identifier(new_subject_id, "subject_id")
        await self._require_assignment(caller.actor_id, new_subject_id)
        now = self._clock()
        validate_occurred_on(new_occurred_on, now.date())
        validate_content(plaintext, self._content_policy)

        payload = self._cipher.encrypt(plaintext)
        updated = record.revised(
            subject_id=new_subject_id,
            occurred_on=new_occurred_on,
            payload=payload,
            now=now,
        )
        await self._store.save(updated)
        self._logger.info(
            "record_updated",
            extra={"record_id": record.id, "subject_id": new_subject_id, "owner_id": record.owner_id},
        )

        await self._audit(
            caller,
            AuditAction.UPDATE,
            record.id,
            before=RecordSnapshot.of(record),
            after=RecordSnapshot.of(updated),
        )

    async def delete(self, record_id: str, caller: Caller) -> None:
        """Soft delete. The row stays in storage for audit review and leaves the owner's listing."""
        record = await self._load_authorized(record_id, caller, "delete")

        deleted = record.soft_deleted(self._clock())
        await self._store.save(deleted)
        self._logger.info(
            "record_deleted",
            extra={"record_id": record.id, "owner_id": record.owner_id},
        )

        await self._audit(caller, AuditAction.DELETE, record.id, before=RecordSnapshot.of(record))

    async def list(
        self,
        caller: Caller,
        filters: Optional[RecordFilters] = None,
    ) -> List[RecordListItem]:
        """
        The caller's own non-deleted records, decrypted. A record that fails to
        decrypt is returned as Undecryptable instead of failing the whole listing.
        Each returned record produces one READ audit entry.
        """
        decision = self._guard.check_role(caller)
        if isinstance(decision, Denied):
            await self._deny(caller, "list", decision)

        records = await self._store.list_for_owner(caller.actor_id, filters)
        items: List[RecordListItem] = []
        for record in records:
            content = await self._open(record, caller, "list")
            items.append(
                RecordListItem(
                    id=record.id,
                    subject_id=record.subject_id,
                    occurred_on=record.occurred_on,
                    created_at=record.created_at,
                    updated_at=record.updated_at,
                    content=content,
                )
            )
        self._logger.info("records_listed", extra={"owner_id": caller.actor_id, "count": len(items)})
        return items

    async def _load_authorized(self, record_id: str, caller: Caller, operation: str) -> ConfidentialRecord:
        record = await self._store.get(record_id)
        if record is None or record.is_deleted:
            raise NotFoundError(f"Record {record_id} not found")
        decision = self._guard.authorize(caller, record)
        if isinstance(decision, Denied):
            await self._deny(caller, operation, decision, record)
        return record

    async def _require_assignment(self, counselor_id: str, subject_id: str) -> None:
        if not await self._roster.is_assigned(counselor_id, subject_id):
            self._logger.warning(
                "subject_not_assigned",
                extra={"owner_id": counselor_id, "subject_id": subject_id},
            )
            raise NotAssignedError(f"Subject {subject_id} is not assigned to this counselor")

    async def _open(self, record: ConfidentialRecord, caller: Caller, operation: str) -> ContentResult:
        """Decrypt and audit the READ. Integrity failures become Undecryptable, never retried."""
        try:
            content: ContentResult = Decrypted(self._cipher.decrypt_payload(record.payload))
            outcome = ReadOutcomeSnapshot.DECRYPTED
        except (AuthenticationError, FormatError) as e:
            self._logger.critical(
                "record_integrity_failure",
                extra={
                    "record_id": record.id,
                    "owner_id": record.owner_id,
                    "operation": operation,
                    "error": type(e).__name__,
                },
            )
            content = Undecryptable(error=e)
            outcome = ReadOutcomeSnapshot.UNDECRYPTABLE

        await self._audit(
            caller,
            AuditAction.READ,
            record.id,
            after=ReadOutcomeSnapshot(operation=operation, outcome=outcome),
        )
        return content

    async def _deny(
        self,
        caller: Caller,
        operation: str,
        decision: Denied,
        record: Optional[ConfidentialRecord] = None,
    ) -> NoReturn:
        self._logger.warning(
            "unauthorized_access_attempt",
            extra={
                "record_id": record.id if record else None,
                "actor_id": caller.actor_id,
                "operation": operation,
                "reason": decision.reason.value,
            },
        )
        await self._audit(
            caller,
            AuditAction.UNAUTHORIZED_ACCESS_ATTEMPT,
            record.id if record else None,
            after=AccessAttemptSnapshot(
                operation=operation,
                attempted_by=caller.actor_id,
                attempted_role=caller.role.value if caller.role else None,
                owned_by=record.owner_id if record else None,
                reason=decision.reason.value,
            ),
        )
        raise PermissionDeniedError()

    async def _audit(
        self,
        caller: Caller,
        action: AuditAction,
        entity_id: Optional[str],
        *,
        before: Optional[AuditState] = None,
        after: Optional[AuditState] = None,
    ) -> None:
        # Outcome is already reported by AuditLogger; a failed write does not fail the operation.
        await self._audit_logger.log_action(
            actor_id=caller.actor_id,
            action=action,
            entity_id=entity_id,
            before=before,
            after=after,
            ip_address=caller.ip_address,
            user_agent=caller.user_agent,
        )
