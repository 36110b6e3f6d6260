"""Tests for the audit logger."""

import io
import json

import pytest

from money_man.audit import AuditLogger, configure_logging
from money_man.models.audit import AuditEventBuilder


class RecordingLogger:
    """Stands in for a structlog logger and keeps every call."""

    def __init__(self):
        self.calls = []

    def _record(self, level):
        def method(event, **kwargs):
            self.calls.append((level, event, kwargs))
        return method

    def __getattr__(self, level):
        return self._record(level)


class BrokenLogger:
    def info(self, event, **kwargs):
        raise RuntimeError("handler gone")


class TestAuditLogger:
    """Tests for AuditLogger."""

    def test_level_follows_severity(self):
        """Test that each severity is logged at its own level."""
        recorder = RecordingLogger()
        audit_logger = AuditLogger(recorder)

        audit_logger.log_account_created("main")
        audit_logger.log_account_selected("main")
        audit_logger.log_operation_failed("add_transaction", "unknown_tag", "Tag 'fun' not found")

        levels = [level for level, _, _ in recorder.calls]
        assert levels == ["info", "debug", "warning"]

    def test_record_carries_event_fields(self):
        recorder = RecordingLogger()
        AuditLogger(recorder).log_transaction_removed("main", "2024_03", 4)

        _, event, fields = recorder.calls[0]
        assert event == "audit_event"
        assert fields["event_type"] == "transaction_removed"
        assert fields["table"] == "2024_03"
        assert fields["details"] == {"id": 4}

    def test_logging_failure_is_contained(self):
        """Test that a broken logger never raises into the caller."""
        audit_logger = AuditLogger(BrokenLogger())
        assert audit_logger.log(AuditEventBuilder.tag_created("food")) is False

    def test_successful_log_returns_true(self):
        assert AuditLogger(RecordingLogger()).log(AuditEventBuilder.tag_created("food")) is True

    def test_long_names_are_logged(self):
        recorder = RecordingLogger()
        assert AuditLogger(recorder).log_account_created("a" * 600) is True
        assert recorder.calls[0][2]["account"] == "a" * 600

    def test_event_build_failure_is_contained(self, monkeypatch):
        """Test that a failing event constructor never raises into the caller."""
        def broken(account):
            raise ValueError("cannot build")

        monkeypatch.setattr(AuditEventBuilder, "account_created", broken)
        recorder = RecordingLogger()
        assert AuditLogger(recorder).log_account_created("main") is False
        assert recorder.calls == []


class TestConfigureLogging:
    """Tests for the logging entry point."""

    def test_json_records_reach_stream(self):
        stream = io.StringIO()
        configure_logging("INFO", json_output=True, stream=stream)

        AuditLogger().log_tag_created("food")

        record = json.loads(stream.getvalue().splitlines()[-1])
        assert record["event"] == "audit_event"
        assert record["event_type"] == "tag_created"
        assert record["logger"] == "money_man.audit"

    def test_level_filters_records(self):
        stream = io.StringIO()
        configure_logging("WARNING", json_output=True, stream=stream)

        audit_logger = AuditLogger()
        audit_logger.log_tag_created("food")
        audit_logger.log_operation_failed("add_transaction", "unknown_tag", "Tag 'fun' not found")

        records = [json.loads(line) for line in stream.getvalue().splitlines()]
        assert [r["event_type"] for r in records] == ["operation_failed"]

    def test_console_rendering(self):
        stream = io.StringIO()
        configure_logging("INFO", json_output=False, stream=stream)

        AuditLogger().log_tag_created("food")

        output = stream.getvalue()
        assert "audit_event" in output
        assert not output.lstrip().startswith("{")

    def test_module_loggers_follow_later_configuration(self):
        """Test that a logger fetched before configuration uses the new handler."""
        early = AuditLogger()
        early.log_tag_created("before")

        stream = io.StringIO()
        configure_logging("INFO", json_output=False, stream=stream)
        early.log_tag_created("food")

        output = stream.getvalue()
        assert "tag_created" in output
        assert not output.lstrip().startswith("{")

    def test_second_call_is_ignored(self):
        first, second = io.StringIO(), io.StringIO()
        configure_logging("INFO", stream=first)
        configure_logging("DEBUG", stream=second)

        AuditLogger().log_tag_created("food")
        assert first.getvalue()
        assert second.getvalue() == ""


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
