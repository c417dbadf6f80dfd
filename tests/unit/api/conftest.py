"""Fixtures for API unit tests: app wired to in-memory ports, AsyncClient, identity headers."""

import pytest
from httpx import ASGITransport, AsyncClient

from counsel_vault.api import dependencies
from counsel_vault.application.audit_trail_service import AuditTrailService
from counsel_vault.config.settings import AppSettings
from counsel_vault.main import create_app
from tests.helpers import TEST_KEY_HEX


@pytest.fixture
def app_with_overrides(repository, audit_repository, record_store, audit_logger):
    """App whose record and audit services use the shared in-memory fakes."""
    app = create_app(AppSettings(_env_file=None, database_encryption_key=TEST_KEY_HEX, environment="test"))
    trail = AuditTrailService(
        audit_repository=audit_repository,
        record_store=record_store,
        audit_logger=audit_logger,
    )
    app.dependency_overrides[dependencies.get_record_repository] = lambda: repository
    app.dependency_overrides[dependencies.get_audit_trail_service] = lambda: trail
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app_with_overrides):
    transport = ASGITransport(app=app_with_overrides)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def counselor_a_headers():
    return {"X-Actor-ID": "counselor-a", "X-Actor-Role": "COUNSELOR"}


@pytest.fixture
def counselor_b_headers():
    return {"X-Actor-ID": "counselor-b", "X-Actor-Role": "counselor"}


@pytest.fixture
def admin_headers():
    return {"X-Actor-ID": "admin-1", "X-Actor-Role": "ADMIN"}
