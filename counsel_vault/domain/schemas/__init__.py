"""Pydantic schemas: record requests, views and filters."""

from counsel_vault.domain.schemas.record import (
    RecordCreatedResponse,
    RecordCreateRequest,
    RecordFilters,
    RecordListItemResponse,
    RecordMetadata,
    RecordUpdateRequest,
    RecordView,
)

__all__ = [
    "RecordCreatedResponse",
    "RecordCreateRequest",
    "RecordFilters",
    "RecordListItemResponse",
    "RecordMetadata",
    "RecordUpdateRequest",
    "RecordView",
]
