"""Pydantic schemas for confidential record views and filters. No DB or infrastructure."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator


class RecordFilters(BaseModel):
    """Optional narrowing of an owner's listing. Owner scoping is not a filter."""

    subject_id: Optional[str] = Field(None, min_length=1)
    occurred_from: Optional[date] = None
    occurred_to: Optional[date] = None

    @model_validator(mode="after")
    def range_is_ordered(self) -> "RecordFilters":
        if self.occurred_from and self.occurred_to and self.occurred_from > self.occurred_to:
            raise ValueError("occurred_from must not be after occurred_to")
        return self


class RecordView(BaseModel):
    """Decrypted record returned to its owner."""

    id: str
    subject_id: str
    owner_id: str
    occurred_on: date
    content: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True, "frozen": True}


class RecordMetadata(BaseModel):
    """Non-sensitive record metadata for audit review. Includes soft-deleted records."""

    id: str
    subject_id: str
    owner_id: str
    occurred_on: date
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    model_config = {"from_attributes": True, "frozen": True}


class RecordCreateRequest(BaseModel):
    """Body of POST /records. The owner is the authenticated caller, never a body field."""

    subject_id: str = Field(..., min_length=1)
    occurred_on: date
    content: str

    model_config = {"extra": "forbid"}


class RecordUpdateRequest(BaseModel):
    """Body of PUT /records/{id}. Omitted subject_id / occurred_on keep the stored values."""

    content: str
    subject_id: Optional[str] = Field(None, min_length=1)
    occurred_on: Optional[date] = None

    model_config = {"extra": "forbid"}


class RecordCreatedResponse(BaseModel):
    id: str


class RecordListItemResponse(BaseModel):
    """One listing row. content is None and decrypted is False when the stored payload failed verification."""

    id: str
    subject_id: str
    occurred_on: date
    created_at: datetime
    updated_at: datetime
    decrypted: bool
    content: Optional[str] = None
