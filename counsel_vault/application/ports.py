"""Ports for record persistence and the roster. Application layer depends on these; infrastructure implements them."""

from typing import List, Optional, Protocol

from counsel_vault.domain.models.record import ConfidentialRecord
from counsel_vault.domain.schemas.record import RecordFilters


class RecordStore(Protocol):
    """Persistence for confidential records. Stores ciphertext only."""

    async def add(self, record: ConfidentialRecord) -> None:
        """Insert a new record."""
        ...

    async def get(self, record_id: str) -> Optional[ConfidentialRecord]:
        """Return the record by id, including soft-deleted ones, or None."""
        ...

    async def save(self, record: ConfidentialRecord) -> None:
        """Overwrite an existing record (last write wins)."""
        ...

    async def list_for_owner(
        self,
        owner_id: str,
        filters: Optional[RecordFilters] = None,
    ) -> List[ConfidentialRecord]:
        """Non-deleted records owned by owner_id, newest occurred_on first."""
        ...


class RosterLookup(Protocol):
    """Counselor-to-subject assignments maintained outside this subsystem."""

    async def is_assigned(self, counselor_id: str, subject_id: str) -> bool:
        ...
