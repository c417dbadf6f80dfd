"""Test doubles and constants shared across test modules."""

from datetime import datetime, timezone
from typing import Dict, List, Optional, Set, Tuple

from counsel_vault.domain.models.record import ConfidentialRecord
from counsel_vault.domain.schemas.record import RecordFilters
from counsel_vault.governance.audit_models import AuditAction, AuditEntry
from counsel_vault.governance.audit_query import AuditFilters

TEST_KEY_HEX = "00112233445566778899aabbccddeeff" * 2
OTHER_KEY_HEX = "ffeeddccbbaa99887766554433221100" * 2
FIXED_NOW = datetime(2024, 11, 5, 9, 30, tzinfo=timezone.utc)


class InMemoryRecordStore:
    """RecordStore fake. Keeps records by id, soft-deleted ones included."""

    def __init__(self) -> None:
        self.records: Dict[str, ConfidentialRecord] = {}

    async def add(self, record: ConfidentialRecord) -> None:
        self.records[record.id] = record

    async def get(self, record_id: str) -> Optional[ConfidentialRecord]:
        return self.records.get(record_id)

    async def save(self, record: ConfidentialRecord) -> None:
        if record.id not in self.records:
            raise LookupError(record.id)
        self.records[record.id] = record

    async def list_for_owner(
        self,
        owner_id: str,
        filters: Optional[RecordFilters] = None,
    ) -> List[ConfidentialRecord]:
        found = [r for r in self.records.values() if r.owner_id == owner_id and not r.is_deleted]
        if filters is not None:
            if filters.subject_id:
                found = [r for r in found if r.subject_id == filters.subject_id]
            if filters.occurred_from:
                found = [r for r in found if r.occurred_on >= filters.occurred_from]
            if filters.occurred_to:
                found = [r for r in found if r.occurred_on <= filters.occurred_to]
        return sorted(found, key=lambda r: (r.occurred_on, r.created_at), reverse=True)


class InMemoryRoster:
    def __init__(self, assignments: Optional[Set[Tuple[str, str]]] = None) -> None:
        self.assignments: Set[Tuple[str, str]] = set(assignments or ())

    async def is_assigned(self, counselor_id: str, subject_id: str) -> bool:
        return (counselor_id, subject_id) in self.assignments


class InMemoryAuditRepository:
    def __init__(self) -> None:
        self.entries: List[AuditEntry] = []

    async def save(self, entry: AuditEntry) -> None:
        self.entries.append(entry)

    async def search(self, filters: AuditFilters) -> Tuple[List[AuditEntry], int]:
        found = [
            e
            for e in self.entries
            if (not filters.entity_type or e.entity_type == filters.entity_type)
            and (not filters.entity_id or e.entity_id == filters.entity_id)
            and (not filters.action or e.action == filters.action)
            and (not filters.actor_id or e.actor_id == filters.actor_id)
        ]
        found.sort(key=lambda e: e.occurred_at, reverse=True)
        return found[filters.offset : filters.offset + filters.page_size], len(found)

    def actions(self) -> List[AuditAction]:
        return [e.action for e in self.entries]

    def of_action(self, action: AuditAction) -> List[AuditEntry]:
        return [e for e in self.entries if e.action == action]


class FailingAuditRepository(InMemoryAuditRepository):
    async def save(self, entry: AuditEntry) -> None:
        raise RuntimeError("audit store unavailable")
