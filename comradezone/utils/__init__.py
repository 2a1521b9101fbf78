"""Utils package for the ComradeZone dating service."""

from comradezone.utils.errors import (
    ComradeZoneError,
    ConfigurationError,
    ConflictError,
    DatabaseError,
    NotFoundError,
    ProfileRequiredError,
    QuotaExhaustedError,
    ValidationError,
)
from comradezone.utils.logging import configure_logging, get_logger, log_error

__all__ = [
    "ComradeZoneError",
    "ConfigurationError",
    "ConflictError",
    "DatabaseError",
    "NotFoundError",
    "ProfileRequiredError",
    "QuotaExhaustedError",
    "ValidationError",
    "configure_logging",
    "get_logger",
    "log_error",
]
