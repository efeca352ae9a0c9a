"""Tests for structured logging."""

import json
import logging
import sys
from io import StringIO
from unittest.mock import patch

from jobboard.core.logging import (
    ConsoleFormatter,
    JSONFormatter,
    LoggerAdapter,
    get_logger,
    setup_logging,
)


def _record(msg="Test message", level=logging.INFO, exc_info=None, **extra):
    record = logging.LogRecord(
        name="jobboard.test",
        level=level,
        pathname="/srv/jobboard/test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    def test_basic_log_format(self):
        parsed = json.loads(JSONFormatter().format(_record()))

        assert parsed["level"] == "INFO"
        assert parsed["logger"] == "jobboard.test"
        assert parsed["message"] == "Test message"
        assert parsed["line"] == 42
        assert "timestamp" in parsed
        assert "extra" not in parsed

    def test_extra_fields_are_nested(self):
        parsed = json.loads(JSONFormatter().format(_record(event="auth.login.failure", user_id=7)))
        assert parsed["extra"] == {"event": "auth.login.failure", "user_id": 7}

    def test_extra_can_be_disabled(self):
        parsed = json.loads(JSONFormatter(include_extra=False).format(_record(job_id=3)))
        assert "extra" not in parsed

    def test_non_serializable_extra_is_stringified(self):
        parsed = json.loads(JSONFormatter().format(_record(payload=object())))
        assert "object" in parsed["extra"]["payload"]

    def test_exception_info(self):
        try:
            raise ValueError("bad resume")
        except ValueError:
            exc_info = sys.exc_info()

        parsed = json.loads(JSONFormatter().format(_record(level=logging.ERROR, exc_info=exc_info)))

        assert parsed["exception"]["type"] == "ValueError"
        assert parsed["exception"]["message"] == "bad resume"
        assert isinstance(parsed["exception"]["traceback"], list)


class TestConsoleFormatter:
    def test_console_format_includes_extra(self):
        output = ConsoleFormatter().format(_record("Job posted", job_id=12))
        assert "INFO" in output
        assert "jobboard.test" in output
        assert "Job posted" in output
        assert "job_id=12" in output

    def test_console_formatter_with_colors(self):
        formatter = ConsoleFormatter()
        for level, color in ConsoleFormatter.COLORS.items():
            output = formatter.format(_record(level=getattr(logging, level)))
            assert color in output, f"Color code missing for {level}"


class TestLoggerAdapter:
    def test_adapter_merges_context_and_call_extra(self):
        base_logger = logging.getLogger("jobboard.test.adapter")
        base_logger.setLevel(logging.DEBUG)
        stream = StringIO()
        handler = logging.StreamHandler(stream)
        handler.setFormatter(JSONFormatter())
        base_logger.addHandler(handler)
        try:
            adapter = LoggerAdapter(base_logger, {"user_id": 42})
            adapter.info("Applied to job", extra={"job_id": 7})
            parsed = json.loads(stream.getvalue())
        finally:
            base_logger.removeHandler(handler)

        assert parsed["extra"] == {"user_id": 42, "job_id": 7}


class TestSetupLogging:
    def test_get_logger_returns_named_logger(self):
        logger = get_logger("jobboard.module")
        assert isinstance(logger, logging.Logger)
        assert logger.name == "jobboard.module"

    def test_forced_json_format(self):
        root = logging.getLogger()
        original_handlers = root.handlers[:]
        original_level = root.level
        try:
            with patch("jobboard.core.logging.settings.log_format", "json"):
                setup_logging()
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
            assert logging.getLogger("httpx").level == logging.WARNING
        finally:
            root.handlers[:] = original_handlers
            root.setLevel(original_level)

    def test_console_format_outside_production(self):
        root = logging.getLogger()
        original_handlers = root.handlers[:]
        original_level = root.level
        try:
            with (
                patch("jobboard.core.logging.settings.log_format", None),
                patch("jobboard.core.logging.settings.environment", "development"),
            ):
                setup_logging()
            assert isinstance(root.handlers[0].formatter, ConsoleFormatter)
        finally:
            root.handlers[:] = original_handlers
            root.setLevel(original_level)


class TestSecurityEvents:
    def test_failed_login_is_logged(self, client, job_seeker, caplog):
        with caplog.at_level(logging.WARNING, logger="jobboard.services.auth_service"):
            client.post("/api/v1/login", json={"email": job_seeker.email, "password": "wrong!"})

        records = [r for r in caplog.records if getattr(r, "event", None) == "auth.login.failure"]
        assert len(records) == 1
        assert records[0].email == job_seeker.email
