"""Structured exception hierarchy for consistent error handling.

Key components:
- **ErrorCode enum**: Standardized error identifiers for programmatic handling
- **Severity enum**: Error classification for logging levels
- **EmployeeApiError**: Base exception carrying code, severity and context
- **Specialized exceptions**: Validation, not-found and conflict errors

Route handlers raise these; the exception handlers registered on the
application translate them into ``ErrorResponse`` bodies with the matching
HTTP status code. Anything that is not an ``EmployeeApiError`` and escapes a
handler is caught by the recovery middleware instead.
"""

from enum import Enum
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for the Employee API."""

    INTERNAL_ERROR = "INTERNAL_ERROR"
    """An unexpected internal error occurred in the system."""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    """Input validation failed due to invalid or malformed data."""

    NOT_FOUND = "NOT_FOUND"
    """The requested resource could not be found."""

    CONFLICT = "CONFLICT"
    """The request conflicts with the current state of a resource."""


class Severity(Enum):
    """Severity levels for errors."""

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class EmployeeApiError(Exception):
    """Base exception class for all Employee API exceptions.

    Args:
        error_code: Unique identifier for the error type (string or ErrorCode enum)
        message: Human-readable error message
        severity: Severity level of the error (defaults to MEDIUM)
        context: Additional context information about the error
        cause: The original exception that caused this error
    """

    def __init__(
        self,
        error_code: str | ErrorCode,
        message: str,
        severity: Severity = Severity.MEDIUM,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.error_code = (
            error_code.value if isinstance(error_code, ErrorCode) else error_code
        )
        self.message = message
        self.severity = severity
        self.context = context or {}
        self.cause = cause

        super().__init__(message)
        if cause:
            self.__cause__ = cause

    @property
    def is_expected(self) -> bool:
        """Whether the error is part of normal operation (LOW or MEDIUM)."""
        return self.severity in (Severity.LOW, Severity.MEDIUM)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        class_name = self.__class__.__name__
        context_str = f", context={self.context}" if self.context else ""
        return (
            f"{class_name}(error_code='{self.error_code}', "
            f"message='{self.message}', severity={self.severity.value}{context_str})"
        )


class ValidationError(EmployeeApiError):
    """Raised when input does not satisfy a validation rule."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.VALIDATION_ERROR,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)


class NotFoundError(EmployeeApiError):
    """Raised when a requested resource does not exist."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.NOT_FOUND,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.LOW, context, cause)


class ConflictError(EmployeeApiError):
    """Raised when a write would violate a uniqueness rule."""

    def __init__(
        self,
        message: str,
        error_code: str | ErrorCode = ErrorCode.CONFLICT,
        context: dict[str, Any] | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(error_code, message, Severity.MEDIUM, context, cause)
