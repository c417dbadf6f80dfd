"""Composition root: build the record repository and audit service for one request-scoped session."""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from counsel_vault.application.audit_trail_service import AuditTrailService
from counsel_vault.application.record_repository import ConfidentialRecordRepository
from counsel_vault.config.settings import AppSettings
from counsel_vault.domain.validators.record_validator import ContentPolicy
from counsel_vault.governance.audit_logger import AuditLogger
from counsel_vault.infrastructure.database.audit_repository_db import DbAuditRepository
from counsel_vault.infrastructure.database.record_store_db import DbRecordStore
from counsel_vault.infrastructure.database.roster_db import DbRosterLookup
from counsel_vault.security.cipher import CipherEngine
from counsel_vault.security.key_provider import KeyProvider


def build_cipher(settings: AppSettings) -> CipherEngine:
    """Resolve the key and build the cipher. Raises ConfigurationError on a bad key."""
    return CipherEngine(KeyProvider.from_settings(settings))


def validate_configuration(settings: AppSettings) -> None:
    """Startup key check. Raises ConfigurationError; the host must not serve requests after it."""
    KeyProvider.from_settings(settings).resolve_key()


def content_policy(settings: AppSettings) -> ContentPolicy:
    return ContentPolicy(
        min_length=settings.content_min_length,
        max_length=settings.content_max_length,
    )


def build_record_repository(
    session: AsyncSession,
    cipher: CipherEngine,
    settings: AppSettings,
    logger: Optional[logging.Logger] = None,
) -> ConfidentialRecordRepository:
    """Wire DB adapters, audit logger and the shared cipher for one session."""
    return ConfidentialRecordRepository(
        store=DbRecordStore(session),
        roster=DbRosterLookup(session),
        cipher=cipher,
        audit_logger=AuditLogger(DbAuditRepository(session)),
        content_policy=content_policy(settings),
        logger=logger,
    )


def build_audit_trail_service(session: AsyncSession) -> AuditTrailService:
    audit_repository = DbAuditRepository(session)
    return AuditTrailService(
        audit_repository=audit_repository,
        record_store=DbRecordStore(session),
        audit_logger=AuditLogger(audit_repository),
    )
