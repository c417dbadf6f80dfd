"""Shared fixtures: fixed key, in-memory ports, callers, and a wired record repository."""

import pytest

from counsel_vault.application.record_repository import ConfidentialRecordRepository
from counsel_vault.governance.audit_logger import AuditLogger
from counsel_vault.security.cipher import CipherEngine
from counsel_vault.security.identity import Caller, Role
from counsel_vault.security.key_provider import KeyProvider
from tests.helpers import (
    FIXED_NOW,
    TEST_KEY_HEX,
    InMemoryAuditRepository,
    InMemoryRecordStore,
    InMemoryRoster,
)


@pytest.fixture
def key_provider():
    return KeyProvider(TEST_KEY_HEX)


@pytest.fixture
def cipher(key_provider):
    return CipherEngine(key_provider)


@pytest.fixture
def record_store():
    return InMemoryRecordStore()


@pytest.fixture
def roster():
    return InMemoryRoster({("counselor-a", "student-s"), ("counselor-b", "student-t")})


@pytest.fixture
def audit_repository():
    return InMemoryAuditRepository()


@pytest.fixture
def audit_logger(audit_repository):
    return AuditLogger(repository=audit_repository, clock=lambda: FIXED_NOW)


@pytest.fixture
def repository(record_store, roster, cipher, audit_logger):
    return ConfidentialRecordRepository(
        store=record_store,
        roster=roster,
        cipher=cipher,
        audit_logger=audit_logger,
        clock=lambda: FIXED_NOW,
    )


@pytest.fixture
def counselor_a():
    return Caller(actor_id="counselor-a", role=Role.COUNSELOR, ip_address="10.0.0.7", user_agent="pytest")


@pytest.fixture
def counselor_b():
    return Caller(actor_id="counselor-b", role=Role.COUNSELOR)


@pytest.fixture
def admin():
    return Caller(actor_id="admin-1", role=Role.ADMIN)


@pytest.fixture
def anonymous():
    return Caller.anonymous()
