"""Governance: redaction, audit entries, best-effort audit logging, audit search. No FastAPI."""

from counsel_vault.governance.audit_logger import AuditLogger
from counsel_vault.governance.audit_models import (
    AuditAction,
    AuditEntry,
    AuditWriteResult,
    EntityType,
)
from counsel_vault.governance.audit_query import AuditFilters, AuditPage
from counsel_vault.governance.redaction import REDACTED, Redactable, redact, redact_state

__all__ = [
    "AuditAction",
    "AuditEntry",
    "AuditFilters",
    "AuditLogger",
    "AuditPage",
    "AuditWriteResult",
    "EntityType",
    "REDACTED",
    "Redactable",
    "redact",
    "redact_state",
]
