"""Unit tests for logging configuration and the JSON formatter."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from inventory_api.logging_config import JsonFormatter, RequestIdFilter, configure_logging
from inventory_api.middleware.request_id import request_id_var


def _make_record(message: str, level: int = logging.INFO, **extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="inventory_api.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=(),
        exc_info=None,
    )
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


class TestJsonFormatter:
    def test_required_fields(self):
        parsed = json.loads(JsonFormatter().format(_make_record("hello", request_id="r-1")))
        assert parsed["message"] == "hello"
        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "inventory_api.test"
        assert parsed["request_id"] == "r-1"
        assert "timestamp" in parsed

    def test_request_fields_copied(self):
        record = _make_record(
            "done", method="GET", path="/health", status_code=200, duration_ms=4, client_ip="1.2.3.4"
        )
        parsed = json.loads(JsonFormatter().format(record))
        assert parsed["method"] == "GET"
        assert parsed["path"] == "/health"
        assert parsed["status_code"] == 200
        assert parsed["duration_ms"] == 4
        assert parsed["client_ip"] == "1.2.3.4"

    def test_absent_fields_not_emitted(self):
        parsed = json.loads(JsonFormatter().format(_make_record("plain")))
        assert "method" not in parsed
        assert "exception" not in parsed

    @pytest.mark.parametrize(
        "text",
        ["password=hunter2", "token: abc123", "apiKey=xyz", "Authorization: Bearer-abc"],
    )
    def test_secrets_redacted(self, text):
        parsed = json.loads(JsonFormatter().format(_make_record(f"login {text}")))
        assert "[REDACTED]" in parsed["message"]
        assert text.split()[-1].split("=")[-1] not in parsed["message"]

    def test_error_reason_redacted(self):
        record = _make_record("failed", error_reason="bad secret=s3cr3t")
        parsed = json.loads(JsonFormatter().format(record))
        assert "s3cr3t" not in parsed["error_reason"]

    def test_exception_included(self):
        try:
            raise ValueError("broken")
        except ValueError:
            record = logging.LogRecord(
                "x", logging.ERROR, "t.py", 1, "oops", (), exc_info=sys.exc_info()
            )
        parsed = json.loads(JsonFormatter().format(record))
        assert "ValueError: broken" in parsed["exception"]


class TestRequestIdFilter:
    def test_stamps_current_request_id(self):
        token = request_id_var.set("req-42")
        try:
            record = _make_record("x")
            assert RequestIdFilter().filter(record) is True
        finally:
            request_id_var.reset(token)
        assert record.request_id == "req-42"

    def test_none_outside_request(self):
        record = _make_record("x")
        RequestIdFilter().filter(record)
        assert record.request_id is None

    def test_explicit_request_id_kept(self):
        record = _make_record("x", request_id="given")
        token = request_id_var.set("ambient")
        try:
            RequestIdFilter().filter(record)
        finally:
            request_id_var.reset(token)
        assert record.request_id == "given"


class TestConfigureLogging:
    def test_json_handler(self, restore_root_logger):
        configure_logging("debug", "json")
        root = restore_root_logger
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        handler = root.handlers[0]
        assert isinstance(handler.formatter, JsonFormatter)
        assert any(isinstance(f, RequestIdFilter) for f in handler.filters)

    def test_text_handler(self, restore_root_logger):
        configure_logging("WARNING", "text")
        root = restore_root_logger
        assert root.level == logging.WARNING
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_repeated_calls_do_not_duplicate_handlers(self, restore_root_logger):
        configure_logging()
        configure_logging()
        assert len(restore_root_logger.handlers) == 1

    def test_unknown_level_falls_back_to_info(self, restore_root_logger):
        configure_logging("LOUD")
        assert restore_root_logger.level == logging.INFO
