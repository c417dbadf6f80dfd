"""Domain model for confidential records. Pure business semantics, no ORM or infrastructure."""

import uuid
from dataclasses import dataclass, field, replace
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from counsel_vault.domain.exceptions import InvalidRecordStateError
from counsel_vault.security.cipher import EncryptedPayload


class RecordState(str, Enum):
    """Created → Active → SoftDeleted. There is no hard delete."""

    ACTIVE = "active"
    SOFT_DELETED = "soft_deleted"


def new_record_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class ConfidentialRecord:
    """
    Encrypted counseling note. owner_id is fixed at creation and is the only
    authorization key; transitions return new instances and never accept an owner.
    The payload is always the complete output of one encryption call.
    """

    id: str
    subject_id: str
    owner_id: str
    occurred_on: date
    payload: EncryptedPayload
    created_at: datetime
    updated_at: datetime
    deleted_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        subject_id: str,
        owner_id: str,
        occurred_on: date,
        payload: EncryptedPayload,
        now: datetime,
    ) -> "ConfidentialRecord":
        return cls(
            id=new_record_id(),
            subject_id=subject_id,
            owner_id=owner_id,
            occurred_on=occurred_on,
            payload=payload,
            created_at=now,
            updated_at=now,
        )

    @property
    def state(self) -> RecordState:
        return RecordState.SOFT_DELETED if self.deleted_at is not None else RecordState.ACTIVE

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def revised(
        self,
        *,
        subject_id: str,
        occurred_on: date,
        payload: EncryptedPayload,
        now: datetime,
    ) -> "ConfidentialRecord":
        """Return a copy with new content/metadata. Raises if the record is deleted."""
        self._require_active("update")
        return replace(
            self,
            subject_id=subject_id,
            occurred_on=occurred_on,
            payload=payload,
            updated_at=now,
        )

    def soft_deleted(self, now: datetime) -> "ConfidentialRecord":
        self._require_active("delete")
        return replace(self, deleted_at=now, updated_at=now)

    def _require_active(self, operation: str) -> None:
        if self.is_deleted:
            raise InvalidRecordStateError(
                f"Cannot {operation} record {self.id}: record is soft-deleted"
            )


@dataclass(frozen=True)
class Decrypted:
    content: str


@dataclass(frozen=True)
class Undecryptable:
    """Content could not be decrypted (tamper, corruption or key mismatch)."""

    reason: str = "integrity_check_failed"
    # The cipher error that caused it; not part of equality.
    error: Optional[Exception] = field(default=None, compare=False, repr=False)


ContentResult = Union[Decrypted, Undecryptable]


@dataclass(frozen=True)
class RecordListItem:
    """One entry of an owner's listing. Callers must handle both content variants."""

    id: str
    subject_id: str
    occurred_on: date
    created_at: datetime
    updated_at: datetime
    content: ContentResult

    @property
    def is_decrypted(self) -> bool:
        return isinstance(self.content, Decrypted)
