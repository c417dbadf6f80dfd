"""Relational persistence: ORM rows and adapters for the record, audit and roster ports."""

from counsel_vault.infrastructure.database.audit_repository_db import DbAuditRepository
from counsel_vault.infrastructure.database.record_store_db import DbRecordStore
from counsel_vault.infrastructure.database.roster_db import DbRosterLookup
from counsel_vault.infrastructure.database.session import (
    Base,
    create_engine,
    create_session_factory,
    init_models,
)

__all__ = [
    "Base",
    "DbAuditRepository",
    "DbRecordStore",
    "DbRosterLookup",
    "create_engine",
    "create_session_factory",
    "init_models",
]
