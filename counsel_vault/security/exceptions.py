"""Security-layer exceptions. Typed, no HTTP."""


class SecurityError(Exception):
    """Base for all security-layer errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class AuthorizationError(SecurityError):
    """Raised when role does not have permission for the action."""


class ConfigurationError(SecurityError):
    """Raised when the record encryption key is missing or malformed. Startup-fatal."""


class InvalidInputError(SecurityError):
    """Raised when plaintext handed to the cipher is empty or not text."""


class FormatError(SecurityError):
    """Raised when a stored ciphertext/nonce/tag triple is not in the expected encoding or length."""


class AuthenticationError(SecurityError):
    """Raised when AEAD tag verification fails. Tamper or wrong key; never retried."""
