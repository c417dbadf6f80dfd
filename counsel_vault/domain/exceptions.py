"""Domain-specific exceptions. Pure domain layer, no infrastructure."""

from typing import Optional


class DomainError(Exception):
    """Base for all domain-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DomainValidationError(DomainError):
    """Raised when domain validation rules are violated."""

    def __init__(self, message: str, field: Optional[str] = None) -> None:
        self.field = field
        super().__init__(message)


class InvalidContentError(DomainValidationError):
    """Raised when record content is blank, too short or too long."""


class InvalidOccurrenceDateError(DomainValidationError):
    """Raised when occurred_on is missing or in the future."""


class InvalidRecordStateError(DomainError):
    """Raised when a lifecycle transition is not allowed (e.g. deleting a deleted record)."""
