"""DB-backed record store. Persists confidential records to the confidential_records table."""

from typing import List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from counsel_vault.domain.models.record import ConfidentialRecord
from counsel_vault.domain.schemas.record import RecordFilters
from counsel_vault.infrastructure.database._time import as_utc
from counsel_vault.infrastructure.database.models import ConfidentialRecordRow
from counsel_vault.security.cipher import EncryptedPayload


def _to_domain(row: ConfidentialRecordRow) -> ConfidentialRecord:
    return ConfidentialRecord(
        id=row.id,
        subject_id=row.subject_id,
        owner_id=row.owner_id,
        occurred_on=row.occurred_on,
        payload=EncryptedPayload(
            ciphertext=row.ciphertext,
            nonce=row.nonce,
            auth_tag=row.auth_tag,
        ),
        created_at=as_utc(row.created_at),
        updated_at=as_utc(row.updated_at),
        deleted_at=as_utc(row.deleted_at),
    )


class DbRecordStore:
    """Implements RecordStore. Commits per call; the caller's session scopes one request."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def add(self, record: ConfidentialRecord) -> None:
        row = ConfidentialRecordRow(
            id=record.id,
            subject_id=record.subject_id,
            owner_id=record.owner_id,
            occurred_on=record.occurred_on,
            ciphertext=record.payload.ciphertext,
            nonce=record.payload.nonce,
            auth_tag=record.payload.auth_tag,
            created_at=record.created_at,
            updated_at=record.updated_at,
            deleted_at=record.deleted_at,
        )
        self._session.add(row)
        await self._commit()

    async def get(self, record_id: str) -> Optional[ConfidentialRecord]:
        row = await self._session.get(ConfidentialRecordRow, record_id)
        if row is None:
            return None
        return _to_domain(row)

    async def save(self, record: ConfidentialRecord) -> None:
        """Overwrite mutable columns. owner_id and created_at are never written here."""
        row = await self._session.get(ConfidentialRecordRow, record.id)
        if row is None:
            raise LookupError(f"Record {record.id} does not exist")
        row.subject_id = record.subject_id
        row.occurred_on = record.occurred_on
        # Triple replaced together, from one encryption.
        row.ciphertext = record.payload.ciphertext
        row.nonce = record.payload.nonce
        row.auth_tag = record.payload.auth_tag
        row.updated_at = record.updated_at
        row.deleted_at = record.deleted_at
        await self._commit()

    async def _commit(self) -> None:
        try:
            await self._session.commit()
        except Exception:
            # Leave the session usable for the audit write that follows.
            await self._session.rollback()
            raise

    async def list_for_owner(
        self,
        owner_id: str,
        filters: Optional[RecordFilters] = None,
    ) -> List[ConfidentialRecord]:
        stmt = select(ConfidentialRecordRow).where(
            ConfidentialRecordRow.owner_id == owner_id,
            ConfidentialRecordRow.deleted_at.is_(None),
        )
        if filters is not None:
            if filters.subject_id:
                stmt = stmt.where(ConfidentialRecordRow.subject_id == filters.subject_id)
            if filters.occurred_from:
                stmt = stmt.where(ConfidentialRecordRow.occurred_on >= filters.occurred_from)
            if filters.occurred_to:
                stmt = stmt.where(ConfidentialRecordRow.occurred_on <= filters.occurred_to)
        stmt = stmt.order_by(
            ConfidentialRecordRow.occurred_on.desc(),
            ConfidentialRecordRow.created_at.desc(),
        )
        result = await self._session.execute(stmt)
        return [_to_domain(row) for row in result.scalars().all()]
