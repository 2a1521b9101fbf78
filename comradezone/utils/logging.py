"""Logging configuration for the ComradeZone dating service."""

import logging
import sys
from typing import Any, Dict, Optional

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

from comradezone.config import settings

# Keys every request log line may carry, bound by the API layer
REQUEST_CONTEXT_KEYS = ("request_path", "request_method", "profile_id")


def add_app_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Stamp each event with the service name and deployment environment."""
    event_dict.setdefault("app", settings.APP_NAME)
    event_dict.setdefault("environment", settings.ENVIRONMENT)
    return event_dict


def configure_logging() -> None:
    """
    Configure structured logging for the dating service.

    Standard library records are routed through `structlog`. Every event
    carries the app name and environment, plus whatever request context the
    API layer bound with `bind_request_context` (path, method, acting
    profile). `ConsoleRenderer` is used in development, `JSONRenderer`
    everywhere else.
    """
    log_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    logging.basicConfig(format="%(message)s", level=log_level, stream=sys.stdout)

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
    ]
    if settings.ENVIRONMENT.lower() == "development":
        processors.append(structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str, **initial_values: Any) -> structlog.stdlib.BoundLogger:
    """Get a named structured logger with `initial_values` bound."""
    return structlog.get_logger(name).bind(**initial_values)  # type: ignore


def bind_request_context(**values: Any) -> None:
    """
    Attach request-scoped values to every log line of the current request.

    None values are skipped so optional path parameters do not show up as
    nulls.
    """
    structlog.contextvars.bind_contextvars(**{key: value for key, value in values.items() if value is not None})


def clear_request_context() -> None:
    """Drop the request-scoped values bound by `bind_request_context`."""
    structlog.contextvars.unbind_contextvars(*REQUEST_CONTEXT_KEYS)


def log_error(
    logger: structlog.stdlib.BoundLogger,
    error: Exception,
    message: Optional[str] = None,
    extra: Optional[Dict[str, Any]] = None,
) -> None:
    """
    Log an error with structured context.

    The caller's `extra` dict is copied, never mutated. ComradeZone errors
    also contribute their HTTP status and `details`.

    Args:
        logger (structlog.stdlib.BoundLogger): The logger instance to use.
        error (Exception): The exception to log.
        message (Optional[str], optional): Custom message. Defaults to "An error occurred".
        extra (Optional[Dict[str, Any]], optional): Additional context to log.
    """
    context = dict(extra or {})
    context["error_type"] = error.__class__.__name__
    context["error_message"] = str(error)

    if hasattr(error, "details"):
        context["error_details"] = error.details
    if hasattr(error, "status_code"):
        context["status_code"] = error.status_code

    logger.error(message or "An error occurred", **context, exc_info=error)
