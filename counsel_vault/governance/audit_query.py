"""Audit trail search filters and result page."""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from counsel_vault.governance.audit_models import AuditAction, AuditEntry

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


class AuditFilters(BaseModel):
    entity_type: Optional[str] = None
    entity_id: Optional[str] = None
    action: Optional[AuditAction] = None
    actor_id: Optional[str] = None
    occurred_from: Optional[datetime] = None
    occurred_to: Optional[datetime] = None
    page: int = Field(1, ge=1)
    page_size: int = Field(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE)

    @field_validator("occurred_from", "occurred_to")
    @classmethod
    def bound_in_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        """Stored timestamps are UTC; a naive bound is taken as UTC."""
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    @model_validator(mode="after")
    def range_is_ordered(self) -> "AuditFilters":
        if self.occurred_from and self.occurred_to and self.occurred_from > self.occurred_to:
            raise ValueError("occurred_from must not be after occurred_to")
        return self

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size


@dataclass(frozen=True)
class AuditPage:
    entries: List[AuditEntry]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.total else 0
