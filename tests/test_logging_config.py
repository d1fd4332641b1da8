"""Tests for logging configuration and formatters."""

import json
import logging
import sys

import pytest

from support_mailer.logging import ComponentLoggerAdapter, get_logger
from support_mailer.logging.config import (
    ContextualFilter,
    JSONFormatter,
    KeyValueFormatter,
    configure_logging,
)
from support_mailer.logging.context import log_context


def make_record(message="Test message", level=logging.INFO, **extra):
    record = logging.LogRecord("test", level, "test.py", 1, message, (), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


def test_json_formatter_mandatory_fields():
    output = JSONFormatter().format(make_record())
    log_obj = json.loads(output)

    assert log_obj["level"] == "INFO"
    assert log_obj["message"] == "Test message"
    assert log_obj["logger"] == "test"
    assert log_obj["timestamp"].endswith("Z")


def test_json_formatter_includes_extra_fields():
    record = make_record(event="dispatch.send.success", attempt=1, fields=["to"])
    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["event"] == "dispatch.send.success"
    assert log_obj["attempt"] == 1
    assert log_obj["fields"] == ["to"]
    assert "msg" not in log_obj
    assert "args" not in log_obj


def test_json_formatter_stringifies_unknown_types():
    record = make_record(error=ValueError("bad"))
    log_obj = json.loads(JSONFormatter().format(record))

    assert log_obj["error"] == "bad"


def test_json_formatter_includes_exception():
    try:
        raise RuntimeError("provider down")
    except RuntimeError:
        record = logging.LogRecord(
            "test", logging.ERROR, "test.py", 1, "failed", (), sys.exc_info()
        )

    log_obj = json.loads(JSONFormatter().format(record))
    assert "RuntimeError: provider down" in log_obj["exc_info"]


def test_key_value_formatter_appends_sorted_extras():
    formatter = KeyValueFormatter("[%(levelname)s] %(name)s: %(message)s")
    record = make_record(event="dispatch.received", attempt=2, retry_remaining=False)

    output = formatter.format(record)

    assert output == (
        "[INFO] test: Test message attempt=2 event=dispatch.received retry_remaining=false"
    )


def test_key_value_formatter_quotes_and_nulls():
    formatter = KeyValueFormatter("%(message)s")
    record = make_record(reason="Invalid email type", caller_id=None)

    output = formatter.format(record)

    assert 'reason="Invalid email type"' in output
    assert "caller_id=null" in output


def test_key_value_formatter_skips_static_fields():
    formatter = KeyValueFormatter("%(message)s")
    record = make_record(service="support-mailer", environment="local")

    assert formatter.format(record) == "Test message"


def test_contextual_filter_adds_static_and_context_fields():
    contextual_filter = ContextualFilter(environment="staging")
    record = make_record()

    with log_context(request_id="req-1", email_type="welcome_email"):
        assert contextual_filter.filter(record) is True

    assert record.service == "support-mailer"
    assert record.environment == "staging"
    assert record.request_id == "req-1"
    assert record.email_type == "welcome_email"


def test_contextual_filter_does_not_override_explicit_extra():
    record = make_record(request_id="explicit")

    with log_context(request_id="from-context"):
        ContextualFilter().filter(record)

    assert record.request_id == "explicit"


def test_component_logger_adapter_merges_extra():
    adapter = get_logger("test.component", component="dispatch")
    assert isinstance(adapter, ComponentLoggerAdapter)

    msg, kwargs = adapter.process("hello", {"extra": {"event": "x"}})
    assert kwargs["extra"] == {"component": "dispatch", "event": "x"}


def test_get_logger_without_component_returns_plain_logger():
    assert isinstance(get_logger("test.plain"), logging.Logger)


def test_configure_logging_json(restore_root_logger):
    configure_logging(level="DEBUG", format_type="json", environment="test")

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert isinstance(root.handlers[0].formatter, JSONFormatter)
    assert logging.getLogger("urllib3").level == logging.DEBUG


def test_configure_logging_caps_noisy_libraries(restore_root_logger):
    configure_logging(level="INFO", format_type="key-value")

    assert isinstance(restore_root_logger.handlers[0].formatter, KeyValueFormatter)
    assert logging.getLogger("uvicorn.access").level == logging.WARNING


def test_configure_logging_rejects_invalid_level():
    with pytest.raises(ValueError, match="Invalid log level"):
        configure_logging(level="LOUD")


def test_configure_logging_rejects_invalid_format():
    with pytest.raises(ValueError, match="Invalid log format"):
        configure_logging(format_type="xml")
