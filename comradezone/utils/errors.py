"""Custom exceptions for the ComradeZone dating service."""

from typing import Any, Dict, Optional


class ComradeZoneError(Exception):
    """Base exception for all ComradeZone errors."""

    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the error with a message and optional details.

        Args:
            message (str): Error message describing what went wrong.
            status_code (int): HTTP status code associated with the error (default 500).
            details (Optional[Dict[str, Any]]): Additional context or debug information.
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class ConfigurationError(ComradeZoneError):
    """Raised when there's an issue with the application configuration."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 500, details)


class DatabaseError(ComradeZoneError):
    """Raised when there's an issue with the database operations."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the database error.

        Args:
            message (str): Error message.
            details (Optional[Dict[str, Any]]): Additional details.
        """
        super().__init__(message, 500, details)


class ValidationError(ComradeZoneError):
    """Raised when input validation fails (self-swipe, under-age profile, ...)."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the validation error.

        Args:
            message (str): Error message.
            details (Optional[Dict[str, Any]]): Additional details.
        """
        super().__init__(message, 400, details)


class NotFoundError(ComradeZoneError):
    """Raised when a requested resource is not found or the caller may not see it."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the not found error.

        Args:
            message (str): Error message.
            details (Optional[Dict[str, Any]]): Additional details.
        """
        super().__init__(message, 404, details)


class ProfileRequiredError(NotFoundError):
    """Raised when the acting account or profile has no dating profile yet."""

    def __init__(self, message: str = "Create a profile first", details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, details)


class QuotaExhaustedError(ComradeZoneError):
    """Raised when the daily super-like quota has been used up."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        """
        Initialize the quota exhausted error.

        Args:
            message (str): Error message.
            details (Optional[Dict[str, Any]]): Additional details.
        """
        super().__init__(message, 429, details)


class ConflictError(ComradeZoneError):
    """Raised when a write collides with a unique constraint that cannot be absorbed."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, 409, details)
