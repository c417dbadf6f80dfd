"""DB-backed audit repository. Appends to and searches the audit_entries table."""

from typing import List, Tuple

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from counsel_vault.governance.audit_models import AuditAction, AuditEntry
from counsel_vault.governance.audit_query import AuditFilters
from counsel_vault.infrastructure.database._time import as_utc
from counsel_vault.infrastructure.database.models import AuditEntryRow


def _to_entry(row: AuditEntryRow) -> AuditEntry:
    return AuditEntry(
        id=row.id,
        actor_id=row.actor_id,
        action=AuditAction(row.action),
        entity_type=row.entity_type,
        entity_id=row.entity_id,
        before_state=row.before_state,
        after_state=row.after_state,
        occurred_at=as_utc(row.occurred_at),
        ip_address=row.ip_address,
        user_agent=row.user_agent,
    )


class DbAuditRepository:
    """Implements AuditRepository. Insert-only; there is no update or delete path."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def save(self, entry: AuditEntry) -> None:
        self._session.add(
            AuditEntryRow(
                id=entry.id,
                actor_id=entry.actor_id,
                action=entry.action.value,
                entity_type=entry.entity_type,
                entity_id=entry.entity_id,
                before_state=entry.before_state,
                after_state=entry.after_state,
                ip_address=entry.ip_address,
                user_agent=entry.user_agent,
                occurred_at=entry.occurred_at,
            )
        )
        try:
            await self._session.commit()
        except Exception:
            # Leave the session usable for the rest of the request.
            await self._session.rollback()
            raise

    async def search(self, filters: AuditFilters) -> Tuple[List[AuditEntry], int]:
        conditions = []
        if filters.entity_type:
            conditions.append(AuditEntryRow.entity_type == filters.entity_type)
        if filters.entity_id:
            conditions.append(AuditEntryRow.entity_id == filters.entity_id)
        if filters.action:
            conditions.append(AuditEntryRow.action == filters.action.value)
        if filters.actor_id:
            conditions.append(AuditEntryRow.actor_id == filters.actor_id)
        if filters.occurred_from:
            conditions.append(AuditEntryRow.occurred_at >= filters.occurred_from)
        if filters.occurred_to:
            conditions.append(AuditEntryRow.occurred_at <= filters.occurred_to)

        count_stmt = select(func.count()).select_from(AuditEntryRow).where(*conditions)
        total = (await self._session.execute(count_stmt)).scalar_one()

        stmt = (
            select(AuditEntryRow)
            .where(*conditions)
            .order_by(AuditEntryRow.occurred_at.desc(), AuditEntryRow.id)
            .offset(filters.offset)
            .limit(filters.page_size)
        )
        result = await self._session.execute(stmt)
        return [_to_entry(row) for row in result.scalars().all()], total
