"""Records API router: owner-only CRUD and listing of confidential records."""

from datetime import date
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from pydantic import ValidationError

from counsel_vault.api.dependencies import get_caller, get_record_repository
from counsel_vault.application.record_repository import ConfidentialRecordRepository
from counsel_vault.domain.models.record import Decrypted, RecordListItem
from counsel_vault.domain.schemas.record import (
    RecordCreatedResponse,
    RecordCreateRequest,
    RecordFilters,
    RecordListItemResponse,
    RecordUpdateRequest,
    RecordView,
)
from counsel_vault.security.identity import Caller

router = APIRouter()


def get_record_filters(
    subject_id: Annotated[Optional[str], Query()] = None,
    occurred_from: Annotated[Optional[date], Query()] = None,
    occurred_to: Annotated[Optional[date], Query()] = None,
) -> RecordFilters:
    try:
        return RecordFilters(subject_id=subject_id, occurred_from=occurred_from, occurred_to=occurred_to)
    except ValidationError as e:
        detail = e.errors(include_url=False, include_context=False, include_input=False)
        raise HTTPException(status_code=422, detail=detail) from e


def _to_list_response(item: RecordListItem) -> RecordListItemResponse:
    content = item.content
    return RecordListItemResponse(
        id=item.id,
        subject_id=item.subject_id,
        occurred_on=item.occurred_on,
        created_at=item.created_at,
        updated_at=item.updated_at,
        decrypted=isinstance(content, Decrypted),
        content=content.content if isinstance(content, Decrypted) else None,
    )


@router.post("/", response_model=RecordCreatedResponse, status_code=201)
async def create_record(
    body: RecordCreateRequest,
    caller: Annotated[Caller, Depends(get_caller)],
    repository: Annotated[ConfidentialRecordRepository, Depends(get_record_repository)],
):
    """Create a record owned by the caller for an assigned subject."""
    record_id = await repository.create(caller, body.subject_id, body.occurred_on, body.content)
    return RecordCreatedResponse(id=record_id)


@router.get("/", response_model=List[RecordListItemResponse])
async def list_records(
    caller: Annotated[Caller, Depends(get_caller)],
    filters: Annotated[RecordFilters, Depends(get_record_filters)],
    repository: Annotated[ConfidentialRecordRepository, Depends(get_record_repository)],
):
    """The caller's own records, newest session first."""
    items = await repository.list(caller, filters)
    return [_to_list_response(item) for item in items]


@router.get("/{record_id}", response_model=RecordView)
async def read_record(
    record_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    repository: Annotated[ConfidentialRecordRepository, Depends(get_record_repository)],
):
    return await repository.read(record_id, caller)


@router.put("/{record_id}", status_code=204)
async def update_record(
    record_id: str,
    body: RecordUpdateRequest,
    caller: Annotated[Caller, Depends(get_caller)],
    repository: Annotated[ConfidentialRecordRepository, Depends(get_record_repository)],
):
    await repository.update(
        record_id,
        caller,
        body.content,
        subject_id=body.subject_id,
        occurred_on=body.occurred_on,
    )
    return Response(status_code=204)


@router.delete("/{record_id}", status_code=204)
async def delete_record(
    record_id: str,
    caller: Annotated[Caller, Depends(get_caller)],
    repository: Annotated[ConfidentialRecordRepository, Depends(get_record_repository)],
):
    """Soft delete."""
    await repository.delete(record_id, caller)
    return Response(status_code=204)
