"""Domain models. Pure business entities."""

from counsel_vault.domain.models.record import (
    ConfidentialRecord,
    ContentResult,
    Decrypted,
    RecordListItem,
    RecordState,
    Undecryptable,
)
from counsel_vault.domain.models.snapshots import (
    AccessAttemptSnapshot,
    ReadOutcomeSnapshot,
    RecordSnapshot,
)

__all__ = [
    "AccessAttemptSnapshot",
    "ConfidentialRecord",
    "ContentResult",
    "Decrypted",
    "ReadOutcomeSnapshot",
    "RecordListItem",
    "RecordSnapshot",
    "RecordState",
    "Undecryptable",
]
