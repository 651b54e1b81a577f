"""
Domain exceptions.

Domain exceptions represent business rule violations
and domain-specific error conditions.
"""
from typing import Optional


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    def __init__(self, message: str, code: Optional[str] = None):
        """
        Initialize domain exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code
        """
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class LicenseException(DomainException):
    """Base exception for license-related errors."""

    pass


class LicenseNotFoundError(LicenseException):
    """Raised when a license is not found."""

    def __init__(self, message: str = "License not found"):
        super().__init__(message, code="LICENSE_NOT_FOUND")


class ConcurrentModificationError(LicenseException):
    """Raised when a conditional license write keeps losing to other writers."""

    def __init__(self, message: str = "License was modified concurrently"):
        super().__init__(message, code="CONCURRENT_MODIFICATION")


class PolicyException(DomainException):
    """Base exception for ban list and settings errors."""

    pass


class InvalidHwidError(PolicyException):
    """Raised when a HWID is empty or whitespace-only."""

    def __init__(self, message: str = "HWID cannot be empty"):
        super().__init__(message, code="INVALID_HWID")


class InvalidSettingsError(PolicyException):
    """Raised when a settings update carries an invalid value."""

    def __init__(self, message: str = "Invalid settings"):
        super().__init__(message, code="INVALID_SETTINGS")


class ResetRequestException(DomainException):
    """Base exception for HWID reset request errors."""

    pass


class ResetRequestNotFoundError(ResetRequestException):
    """Raised when a HWID reset request is not found."""

    def __init__(self, message: str = "HWID reset request not found"):
        super().__init__(message, code="RESET_REQUEST_NOT_FOUND")


class AuthenticationException(DomainException):
    """Base exception for admin authentication errors."""

    pass


class InvalidCredentialsError(AuthenticationException):
    """Raised when admin credentials do not match."""

    def __init__(self, message: str = "Invalid credentials"):
        super().__init__(message, code="INVALID_CREDENTIALS")


class PersistenceError(Exception):
    """
    Raised by document store adapters when the store is unreachable
    or rejects an operation.

    Not a DomainException: callers at the request boundary map it to a
    generic error outcome.
    """

    def __init__(self, message: str, collection: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.collection = collection


class MalformedDocumentError(PersistenceError):
    """Raised when a stored document cannot be mapped to a domain entity."""

    pass
