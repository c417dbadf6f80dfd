"""DB-backed roster lookup over the counselor_assignments table."""

from datetime import datetime, timezone

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from counsel_vault.infrastructure.database.models import CounselorAssignmentRow


class DbRosterLookup:
    """Implements RosterLookup. assign/unassign belong to the roster owner and test fixtures."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def is_assigned(self, counselor_id: str, subject_id: str) -> bool:
        stmt = select(CounselorAssignmentRow.id).where(
            CounselorAssignmentRow.counselor_id == counselor_id,
            CounselorAssignmentRow.subject_id == subject_id,
        )
        result = await self._session.execute(stmt)
        return result.first() is not None

    async def assign(self, counselor_id: str, subject_id: str) -> None:
        """Idempotent."""
        if await self.is_assigned(counselor_id, subject_id):
            return
        self._session.add(
            CounselorAssignmentRow(
                counselor_id=counselor_id,
                subject_id=subject_id,
                assigned_at=datetime.now(timezone.utc),
            )
        )
        await self._session.commit()

    async def unassign(self, counselor_id: str, subject_id: str) -> None:
        stmt = delete(CounselorAssignmentRow).where(
            CounselorAssignmentRow.counselor_id == counselor_id,
            CounselorAssignmentRow.subject_id == subject_id,
        )
        await self._session.execute(stmt)
        await self._session.commit()
