"""Domain validators. Pure functions."""

from counsel_vault.domain.validators.record_validator import (
    ContentPolicy,
    validate_content,
    validate_identifier,
    validate_occurred_on,
)

__all__ = [
    "ContentPolicy",
    "validate_content",
    "validate_identifier",
    "validate_occurred_on",
]
