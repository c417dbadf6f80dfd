"""Application-layer exceptions. Do not reuse domain exceptions."""


class ApplicationError(Exception):
    """Base for all application-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(ApplicationError):
    """Raised when a record does not exist or is soft-deleted."""


class PermissionDeniedError(ApplicationError):
    """
    Raised for every refused access. The message is the same whatever rule
    refused it, so a probing caller learns nothing about ownership.
    """

    GENERIC_MESSAGE = "You do not have permission to perform this action"

    def __init__(self, message: str = GENERIC_MESSAGE) -> None:
        super().__init__(message)


class NotAssignedError(ApplicationError):
    """Raised when the counselor is not currently assigned to the record's subject."""


class DataIntegrityError(ApplicationError):
    """Raised when stored content fails authentication or is malformed. Not retryable."""
