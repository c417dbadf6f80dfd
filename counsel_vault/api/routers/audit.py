"""Audit review API router (admin only): search the trail, record metadata."""

from datetime import datetime
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import ValidationError

from counsel_vault.api.dependencies import get_audit_trail_service, get_caller
from counsel_vault.application.audit_trail_service import AuditTrailService
from counsel_vault.domain.schemas.record import RecordMetadata
from counsel_vault.governance.audit_models import AuditAction
from counsel_vault.governance.audit_query import DEFAULT_PAGE_SIZE, AuditFilters
from counsel_vault.security.identity import Caller

router = APIRouter()


def get_audit_filters(
    entity_type: Annotated[Optional[str], Query()] = None,
    entity_id: Annotated[Optional[str], Query()] = None,
    action: Annotated[Optional[AuditAction], Query()] = None,
    actor_id: Annotated[Optional[str], Query()] = None,
    occurred_from: Annotated[Optional[datetime], Query()] = None,
    occurred_to: Annotated[Optional[datetime], Query()] = None,
    page: Annotated[int, Query()] = 1,
    page_size: Annotated[int, Query()] = DEFAULT_PAGE_SIZE,
) -> AuditFilters:
    try:
        return AuditFilters(
            entity_type=entity_type,
            entity_id=entity_id,
            action=action,
            actor_id=actor_id,
            occurred_from=occurred_from,
            occurred_to=occurred_to,
            page=page,
            page_size=page_size,
        )
    except ValidationError as e:
        detail = e.errors(include_url=False, include_context=False, include_input=False)
        raise HTTPException(status_code=422, detail=detail) from e


@router.get("/entries")
async def search_audit_entries(
    caller: Annotated[Caller, Depends(get_caller)],
    filters: Annotated[AuditFilters, Depends(get_audit_filters)],
    service: Annotated[AuditTrailService, Depends(get_audit_trail_service)],
):
    """Newest-first page of redacted audit entries."""
    page = await service.search(caller, filters)
    return {
        "entries": [entry.to_dict() for entry in page.entries],
        "total": page.total,
        "page": page.page,
        "page_size": page.page_size,
        "total_pages": page.total_pages,
    }


@router.get("/records/{record_id}", response_model=RecordMetadata)
async def describe_record(
    record_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    service: Annotated[AuditTrailService, Depends(get_audit_trail_service)],
):
    """Record metadata, soft-deleted records included. Never content."""
    return await service.describe_record(caller, record_id)
