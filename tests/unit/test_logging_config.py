"""Unit tests for logging configuration."""

import json
import logging

from enablewhen.logging_config import (
    DevelopmentFormatter,
    JSONFormatter,
    get_logger,
    setup_logging,
)
from enablewhen.schemas.fhir import Questionnaire
from enablewhen.services.task_builder import TaskBuilder


def make_record(**extra):
    record = logging.LogRecord(
        name="enablewhen.test",
        level=logging.WARNING,
        pathname=__file__,
        lineno=10,
        msg="Skipping step %s",
        args=("b",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestFormatters:
    """Tests for log formatters."""

    def test_json_formatter(self):
        """Test structured output with context fields."""
        output = JSONFormatter().format(make_record(questionnaire_id="smoking", step_id="b"))
        data = json.loads(output)

        assert data["level"] == "WARNING"
        assert data["message"] == "Skipping step b"
        assert data["logger"] == "enablewhen.test"
        assert data["questionnaire_id"] == "smoking"
        assert data["step_id"] == "b"

    def test_json_formatter_skips_unset_context(self):
        """Test that context fields passed as None are left out."""
        data = json.loads(JSONFormatter().format(make_record(questionnaire_id=None, step_id="b")))

        assert "questionnaire_id" not in data
        assert data["step_id"] == "b"

    def test_json_formatter_custom_extra(self):
        """Test that custom extra fields are included."""
        data = json.loads(JSONFormatter().format(make_record(attempt=2)))

        assert data["attempt"] == 2
        assert "args" not in data

    def test_development_formatter(self):
        """Test human-readable output with context."""
        output = DevelopmentFormatter().format(make_record(questionnaire_id="smoking", step_id="b"))

        assert "WARNING" in output
        assert "Skipping step b" in output
        assert "[questionnaire_id=smoking step_id=b]" in output

    def test_development_formatter_without_context(self):
        """Test that records without context get no brackets."""
        output = DevelopmentFormatter().format(make_record())

        assert "[questionnaire_id" not in output

    def test_builder_context_reaches_formatter(self, enable_when, caplog):
        """Test that the task builder tags its warnings with context."""
        questionnaire = Questionnaire.model_validate({
            "id": "broken",
            "item": [{"linkId": "b", "extension": [enable_when("a")]}],
        })

        with caplog.at_level(logging.WARNING):
            TaskBuilder(strict=True).build(questionnaire)

        record = next(r for r in caplog.records if r.getMessage().startswith("Could not extract"))
        output = DevelopmentFormatter().format(record)
        assert "questionnaire_id=broken" in output
        assert "step_id=b" in output


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_production_uses_json(self, monkeypatch):
        """Test that production logging is structured."""
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("LOG_LEVEL", "ERROR")
        root = logging.getLogger()
        saved_handlers, saved_level = root.handlers[:], root.level

        try:
            setup_logging()

            assert root.level == logging.ERROR
            assert isinstance(root.handlers[-1].formatter, JSONFormatter)
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)

    def test_get_logger(self):
        """Test that get_logger returns named loggers."""
        assert get_logger("enablewhen.x").name == "enablewhen.x"
