"""FastAPI dependency injection: session, cipher, caller, record repository, audit trail service."""

from typing import Annotated, AsyncIterator

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from counsel_vault.application.audit_trail_service import AuditTrailService
from counsel_vault.application.record_repository import ConfidentialRecordRepository
from counsel_vault.config.settings import AppSettings
from counsel_vault.dependencies import build_audit_trail_service, build_record_repository
from counsel_vault.security.cipher import CipherEngine
from counsel_vault.security.identity import Caller


def get_settings_from_app(request: Request) -> AppSettings:
    return request.app.state.settings


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """One session per request, from the factory created at startup."""
    async with request.app.state.session_factory() as session:
        yield session


def get_cipher(request: Request) -> CipherEngine:
    """Process-wide cipher resolved at startup."""
    return request.app.state.cipher


def get_caller(request: Request) -> Caller:
    """Caller resolved by CallerContextMiddleware."""
    return getattr(request.state, "caller", None) or Caller.anonymous()


def get_correlation_id(request: Request) -> str:
    return getattr(request.state, "correlation_id", "") or ""


async def get_record_repository(
    session: Annotated[AsyncSession, Depends(get_session)],
    cipher: Annotated[CipherEngine, Depends(get_cipher)],
    settings: Annotated[AppSettings, Depends(get_settings_from_app)],
) -> ConfidentialRecordRepository:
    return build_record_repository(session, cipher, settings)


async def get_audit_trail_service(
    session: Annotated[AsyncSession, Depends(get_session)],
) -> AuditTrailService:
    return build_audit_trail_service(session)
