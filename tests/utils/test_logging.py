from unittest.mock import MagicMock, patch

import pytest
import structlog

from comradezone.utils.errors import QuotaExhaustedError
from comradezone.utils.logging import (
    add_app_context,
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_logger,
    log_error,
)


@pytest.fixture(autouse=True)
def clean_contextvars():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@patch("comradezone.utils.logging.structlog")
@patch("comradezone.utils.logging.logging")
@patch("comradezone.utils.logging.settings")
def test_configure_logging_development(mock_settings, mock_logging, mock_structlog):
    mock_settings.LOG_LEVEL = "DEBUG"
    mock_settings.ENVIRONMENT = "development"

    configure_logging()

    _args, kwargs = mock_logging.basicConfig.call_args
    assert kwargs["level"] == mock_logging.DEBUG

    processors = mock_structlog.configure.call_args[1]["processors"]
    assert processors[0] is mock_structlog.contextvars.merge_contextvars
    assert add_app_context in processors
    assert processors[-1] is mock_structlog.dev.ConsoleRenderer.return_value


@patch("comradezone.utils.logging.structlog")
@patch("comradezone.utils.logging.logging")
@patch("comradezone.utils.logging.settings")
def test_configure_logging_outside_development_renders_json(mock_settings, mock_logging, mock_structlog):
    mock_settings.LOG_LEVEL = "INFO"
    mock_settings.ENVIRONMENT = "production"

    configure_logging()

    processors = mock_structlog.configure.call_args[1]["processors"]
    assert processors[-1] is mock_structlog.processors.JSONRenderer.return_value
    assert mock_structlog.dev.ConsoleRenderer.return_value not in processors


@patch("comradezone.utils.logging.settings")
def test_app_context_is_stamped_on_events(mock_settings):
    mock_settings.APP_NAME = "ComradeZone Dating"
    mock_settings.ENVIRONMENT = "staging"

    event = add_app_context(None, "info", {"event": "Swipe recorded"})

    assert event == {"event": "Swipe recorded", "app": "ComradeZone Dating", "environment": "staging"}


def test_app_context_keeps_explicit_values():
    event = add_app_context(None, "info", {"event": "x", "environment": "override"})

    assert event["environment"] == "override"


def test_request_context_binds_and_clears():
    bind_request_context(request_path="/profiles/p1/swipes", request_method="POST", profile_id="p1")

    assert structlog.contextvars.get_contextvars() == {
        "request_path": "/profiles/p1/swipes",
        "request_method": "POST",
        "profile_id": "p1",
    }

    clear_request_context()

    assert structlog.contextvars.get_contextvars() == {}


def test_request_context_skips_missing_values():
    bind_request_context(profile_id=None, request_path="/browse")

    assert structlog.contextvars.get_contextvars() == {"request_path": "/browse"}


def test_request_context_reaches_log_events():
    bind_request_context(profile_id="p1")

    event = structlog.contextvars.merge_contextvars(None, "info", {"event": "Candidates retrieved"})

    assert event["profile_id"] == "p1"


@patch("comradezone.utils.logging.structlog")
def test_get_logger(mock_structlog):
    mock_logger = MagicMock()
    mock_structlog.get_logger.return_value = mock_logger

    logger = get_logger("comradezone.services.swipe_service", component="swipes")

    mock_structlog.get_logger.assert_called_with("comradezone.services.swipe_service")
    mock_logger.bind.assert_called_with(component="swipes")
    assert logger == mock_logger.bind.return_value


def test_log_error_leaves_extra_untouched():
    mock_logger = MagicMock()
    error = ValueError("test error")
    extra = {"path": "/profiles/p1/swipes"}

    log_error(mock_logger, error, "Request failed", extra)

    args, kwargs = mock_logger.error.call_args
    assert args[0] == "Request failed"
    assert kwargs["path"] == "/profiles/p1/swipes"
    assert kwargs["error_type"] == "ValueError"
    assert kwargs["exc_info"] == error
    assert "error_details" not in kwargs
    assert "status_code" not in kwargs
    assert extra == {"path": "/profiles/p1/swipes"}


def test_log_error_with_service_error():
    mock_logger = MagicMock()
    error = QuotaExhaustedError("No super likes remaining today", {"profile_id": "p1"})

    log_error(mock_logger, error)

    args, kwargs = mock_logger.error.call_args
    assert args[0] == "An error occurred"
    assert kwargs["error_type"] == "QuotaExhaustedError"
    assert kwargs["error_details"] == {"profile_id": "p1"}
    assert kwargs["status_code"] == 429
