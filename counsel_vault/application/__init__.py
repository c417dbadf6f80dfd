# Application layer: services that orchestrate domain, security, governance and ports.

from counsel_vault.application.audit_trail_service import AuditTrailService
from counsel_vault.application.exceptions import (
    ApplicationError,
    DataIntegrityError,
    NotAssignedError,
    NotFoundError,
    PermissionDeniedError,
)
from counsel_vault.application.ports import RecordStore, RosterLookup
from counsel_vault.application.record_repository import ConfidentialRecordRepository

__all__ = [
    "ApplicationError",
    "AuditTrailService",
    "ConfidentialRecordRepository",
    "DataIntegrityError",
    "NotAssignedError",
    "NotFoundError",
    "PermissionDeniedError",
    "RecordStore",
    "RosterLookup",
]
