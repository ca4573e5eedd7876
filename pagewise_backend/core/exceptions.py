"""
Custom exception classes for consistent error handling across all modules.

Each exception carries the HTTP status code the API layer answers with.
"""

from typing import Any


class PagewiseException(Exception):
    """Base exception for all Pagewise related errors."""

    status_code: int = 400

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(PagewiseException):
    """Raised when data validation fails."""

    status_code = 422

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any = None,
        details: dict[str, Any] | None = None,
    ):
        if field:
            full_message = f"Validation error for field '{field}': {message}"
        else:
            full_message = message
        super().__init__(full_message, details)
        self.field = field
        self.value = value


class InvalidRequestError(ValidationError):
    """Raised when a page request is out of range (negative index, empty size)."""


class NotFoundError(PagewiseException):
    """Raised when a resource is not found."""

    status_code = 404

    def __init__(
        self, message: str = "Resource not found", details: dict[str, Any] | None = None
    ):
        super().__init__(message, details)


class DataSourceError(PagewiseException):
    """Raised when a data source fails to count or fetch records."""

    status_code = 503

    def __init__(
        self,
        operation: str,
        message: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message or f"Data source failed during '{operation}'", details)
        self.operation = operation
