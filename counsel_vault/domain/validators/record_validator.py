"""Validators for confidential record rules. Pure functions, no infrastructure or DB access."""

from dataclasses import dataclass
from datetime import date, datetime

from counsel_vault.domain.exceptions import (
    DomainValidationError,
    InvalidContentError,
    InvalidOccurrenceDateError,
)

# Defaults for ContentPolicy (domain constants; avoid magic numbers)
CONTENT_MIN_LENGTH = 10
CONTENT_MAX_LENGTH = 10_000


@dataclass(frozen=True)
class ContentPolicy:
    """Length bounds for record content, in characters."""

    min_length: int = CONTENT_MIN_LENGTH
    max_length: int = CONTENT_MAX_LENGTH


def validate_identifier(value: str, field: str) -> None:
    """Identifiers must be non-empty strings. Raises DomainValidationError."""
    if not isinstance(value, str) or not value.strip():
        raise DomainValidationError(f"{field} must not be empty", field=field)


def validate_content(content: str, policy: ContentPolicy) -> None:
    """
    Reject blank, too-short (likely empty note) and oversized content.
    Raises InvalidContentError. The message never echoes the content.
    """
    if not isinstance(content, str) or not content.strip():
        raise InvalidContentError("content must not be empty", field="content")
    if len(content) < policy.min_length:
        raise InvalidContentError(
            f"content must be at least {policy.min_length} characters", field="content"
        )
    if len(content) > policy.max_length:
        raise InvalidContentError(
            f"content must be at most {policy.max_length} characters", field="content"
        )


def validate_occurred_on(occurred_on: date, today: date) -> None:
    """occurred_on must be a date not after today. Raises InvalidOccurrenceDateError."""
    if isinstance(occurred_on, datetime) or not isinstance(occurred_on, date):
        raise InvalidOccurrenceDateError("occurred_on must be a date", field="occurred_on")
    if occurred_on > today:
        raise InvalidOccurrenceDateError(
            "occurred_on must not be in the future", field="occurred_on"
        )
