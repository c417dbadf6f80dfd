"""Domain layer: models, snapshots, schemas, validators, exceptions. Pure business logic only."""

from counsel_vault.domain.exceptions import (
    DomainError,
    DomainValidationError,
    InvalidContentError,
    InvalidOccurrenceDateError,
    InvalidRecordStateError,
)
from counsel_vault.domain.models import (
    ConfidentialRecord,
    Decrypted,
    RecordListItem,
    Undecryptable,
)
from counsel_vault.domain.schemas import RecordFilters, RecordMetadata, RecordView
from counsel_vault.domain.validators import ContentPolicy

__all__ = [
    "ConfidentialRecord",
    "ContentPolicy",
    "Decrypted",
    "DomainError",
    "DomainValidationError",
    "InvalidContentError",
    "InvalidOccurrenceDateError",
    "InvalidRecordStateError",
    "RecordFilters",
    "RecordListItem",
    "RecordMetadata",
    "RecordView",
    "Undecryptable",
]
