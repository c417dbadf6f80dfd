"""Audit repository protocol. Governance layer depends on this; infrastructure implements it."""

from typing import List, Protocol, Tuple

from counsel_vault.governance.audit_models import AuditEntry
from counsel_vault.governance.audit_query import AuditFilters


class AuditRepository(Protocol):
    """Protocol for appending and searching immutable audit entries."""

    async def save(self, entry: AuditEntry) -> None:
        """Append an audit entry. Entries are never updated or deleted."""
        ...

    async def search(self, filters: AuditFilters) -> Tuple[List[AuditEntry], int]:
        """Return one page of matching entries, newest first, and the total match count."""
        ...
