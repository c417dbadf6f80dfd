"""Audit review for administrators: search the trail and look up record metadata. Never decrypts."""

import logging
from typing import Optional

from counsel_vault.application.exceptions import NotFoundError, PermissionDeniedError
from counsel_vault.application.ports import RecordStore
from counsel_vault.domain.models.snapshots import AccessAttemptSnapshot
from counsel_vault.domain.schemas.record import RecordMetadata
from counsel_vault.governance.audit_logger import AuditLogger
from counsel_vault.governance.audit_models import AuditAction
from counsel_vault.governance.audit_query import AuditFilters, AuditPage
from counsel_vault.governance.audit_repository import AuditRepository
from counsel_vault.security.exceptions import AuthorizationError
from counsel_vault.security.identity import Caller
from counsel_vault.security.rbac import SEARCH_AUDIT_TRAIL, VIEW_RECORD_METADATA, RBACService


class AuditTrailService:
    """Admin-only read access to redacted audit entries and record metadata."""

    def __init__(
        self,
        audit_repository: AuditRepository,
        record_store: RecordStore,
        audit_logger: AuditLogger,
        *,
        rbac: Optional[RBACService] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._audit_repository = audit_repository
        self._record_store = record_store
        self._audit_logger = audit_logger
        self._rbac = rbac or RBACService()
        self._logger = logger or logging.getLogger(__name__)

    async def search(self, caller: Caller, filters: Optional[AuditFilters] = None) -> AuditPage:
        """Newest-first page of audit entries matching filters."""
        await self._check(caller, SEARCH_AUDIT_TRAIL, entity_id=None)
        filters = filters or AuditFilters()
        entries, total = await self._audit_repository.search(filters)
        return AuditPage(entries=entries, total=total, page=filters.page, page_size=filters.page_size)

    async def describe_record(self, caller: Caller, record_id: str) -> RecordMetadata:
        """Metadata for any record, soft-deleted ones included. Content is not returned."""
        await self._check(caller, VIEW_RECORD_METADATA, entity_id=record_id)
        record = await self._record_store.get(record_id)
        if record is None:
            raise NotFoundError(f"Record {record_id} not found")
        return RecordMetadata(
            id=record.id,
            subject_id=record.subject_id,
            owner_id=record.owner_id,
            occurred_on=record.occurred_on,
            created_at=record.created_at,
            updated_at=record.updated_at,
            deleted_at=record.deleted_at,
        )

    async def _check(self, caller: Caller, action: str, entity_id: Optional[str]) -> None:
        try:
            if not caller.is_authenticated:
                raise AuthorizationError(f"Unauthenticated caller may not perform '{action}'")
            self._rbac.check_permission(caller.role, action)
        except AuthorizationError as e:
            self._logger.warning(
                "unauthorized_access_attempt",
                extra={"actor_id": caller.actor_id, "operation": action, "error": e.message},
            )
            await self._audit_logger.log_action(
                actor_id=caller.actor_id,
                action=AuditAction.UNAUTHORIZED_ACCESS_ATTEMPT,
                entity_id=entity_id,
                after=AccessAttemptSnapshot(
                    operation=action,
                    attempted_by=caller.actor_id,
                    attempted_role=caller.role.value if caller.role else None,
                    owned_by=None,
                    reason="WRONG_ROLE" if caller.is_authenticated else "UNAUTHENTICATED",
                ),
                ip_address=caller.ip_address,
                user_agent=caller.user_agent,
            )
            raise PermissionDeniedError() from e
