"""
Unit tests for logging configuration.

Tests the enhanced text renderer, validation context handling and
setup of the structlog/stdlib logging pipeline.
"""

import json
import logging
import subprocess
import sys
from unittest.mock import MagicMock

import pytest
import structlog

from itipcheck.common.logging_config import (
    EnhancedTextRenderer,
    add_validation_context,
    bind_validation_context,
    calendar_uid_var,
    get_logger,
    setup_logging,
    setup_logging_from_settings,
    validation_method_var,
)
from itipcheck.common.settings import reset_settings
from itipcheck.validation import validate


class TestValidationContext:
    """Test validation context propagation into log entries."""

    def setup_method(self):
        """Reset context variables."""
        validation_method_var.set("unset")
        calendar_uid_var.set("unset")

    def test_add_validation_context(self):
        """Test that METHOD and UID are added when bound."""
        validation_method_var.set("REPLY")
        calendar_uid_var.set("event-1@example.com")

        result = add_validation_context(MagicMock(), "info", {"event": "test"})

        assert result["method"] == "REPLY"
        assert result["uid"] == "event-1@example.com"

    def test_add_validation_context_unset(self):
        """Test that nothing is added outside a validation."""
        result = add_validation_context(MagicMock(), "info", {"event": "test"})
        assert "method" not in result
        assert "uid" not in result

    def test_explicit_values_win(self):
        """Test that values passed to the logger are not overwritten."""
        validation_method_var.set("REPLY")
        event_dict = {"event": "test", "method": "CANCEL"}

        result = add_validation_context(MagicMock(), "info", event_dict)
        assert result["method"] == "CANCEL"

    def test_bind_validation_context_restores(self):
        """Test that the context manager restores previous values."""
        with bind_validation_context(method="REQUEST", uid="abc"):
            assert validation_method_var.get() == "REQUEST"
            assert calendar_uid_var.get() == "abc"

            with bind_validation_context(method="CANCEL"):
                assert validation_method_var.get() == "CANCEL"
                assert calendar_uid_var.get() == "unset"

            assert validation_method_var.get() == "REQUEST"

        assert validation_method_var.get() == "unset"
        assert calendar_uid_var.get() == "unset"


class TestEnhancedTextRenderer:
    """Test the development text renderer."""

    def test_basic_rendering(self):
        """Test the layout of a rendered entry."""
        renderer = EnhancedTextRenderer("itipcheck")
        event_dict = {
            "timestamp": "2024-01-01T00:00:00Z",
            "level": "info",
            "logger": "itipcheck.validation.dispatch",
            "event": "Validated calendar components",
            "method": "REPLY",
            "violation_count": 0,
        }

        result = renderer(MagicMock(), "info", event_dict)

        assert result == (
            "2024-01-01T00:00:00Z [itipcheck] [INFO] [REPLY] validation.dispatch "
            "- Validated calendar components | violation_count=0"
        )

    def test_long_values_are_truncated(self):
        """Test that non-scalar context values are shortened."""
        renderer = EnhancedTextRenderer("itipcheck")
        event_dict = {
            "level": "debug",
            "logger": "other",
            "event": "big",
            "payload": ["x" * 200],
        }

        result = renderer(MagicMock(), "debug", event_dict)

        assert "payload=" in result
        assert result.endswith("...")
        assert "[DEBUG]" in result
        assert "other - big" in result


class TestSetupLogging:
    """Test logging pipeline setup."""

    def setup_method(self):
        """Clear any existing logging configuration."""
        logging.getLogger().handlers.clear()
        structlog.reset_defaults()

    def teardown_method(self):
        """Leave logging unconfigured for other tests."""
        logging.getLogger().handlers.clear()
        structlog.reset_defaults()

    def test_setup_logging_sets_level(self):
        """Test that the root logger level follows the argument."""
        setup_logging(log_level="DEBUG", log_format="text")
        assert logging.getLogger().level == logging.DEBUG
        assert structlog.is_configured()

    def test_json_output(self, capsys):
        """Test that JSON format renders parseable entries with context."""
        setup_logging(log_level="INFO", log_format="json")
        capsys.readouterr()

        with bind_validation_context(method="PUBLISH", uid="u1"):
            get_logger("itipcheck.tests").info("hello", violation_count=2)

        line = capsys.readouterr().out.strip().splitlines()[-1]
        entry = json.loads(line)
        assert entry["event"] == "hello"
        assert entry["method"] == "PUBLISH"
        assert entry["uid"] == "u1"
        assert entry["violation_count"] == 2
        assert entry["logger"] == "itipcheck.tests"

    def test_get_logger_leaves_structlog_unconfigured(self):
        """Test that getting and using a logger does not configure structlog."""
        logger = get_logger("itipcheck.tests")
        logger.debug("before setup")

        validate("REPLY", [])

        assert not structlog.is_configured()

    def test_import_leaves_structlog_unconfigured(self):
        """Test that importing the package keeps the host's structlog setup."""
        code = (
            "import structlog\n"
            "import itipcheck\n"
            "import itipcheck.validation.adapters\n"
            "print(structlog.is_configured())\n"
        )

        completed = subprocess.run(
            [sys.executable, "-c", code],
            capture_output=True,
            text=True,
            check=True,
        )

        assert completed.stdout.strip() == "False"


class TestSetupLoggingFromSettings:
    """Test logging setup driven by LOG_LEVEL and LOG_FORMAT."""

    @pytest.fixture(autouse=True)
    def clean_logging(self, monkeypatch, tmp_path):
        """Isolate settings and logging state."""
        monkeypatch.chdir(tmp_path)
        logging.getLogger().handlers.clear()
        structlog.reset_defaults()
        reset_settings()
        yield
        reset_settings()
        logging.getLogger().handlers.clear()
        structlog.reset_defaults()

    def test_level_and_format_from_environment(self, monkeypatch, capsys):
        """Test that the settings select the root level and JSON renderer."""
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        monkeypatch.setenv("LOG_FORMAT", "json")

        setup_logging_from_settings()
        capsys.readouterr()

        assert logging.getLogger().level == logging.WARNING
        logger = get_logger("itipcheck.tests")
        logger.info("filtered out")
        logger.warning("kept", violation_count=1)

        lines = capsys.readouterr().out.strip().splitlines()
        assert len(lines) == 1
        entry = json.loads(lines[0])
        assert entry["event"] == "kept"
        assert entry["level"] == "warning"
        assert entry["violation_count"] == 1

    def test_defaults_use_text_renderer(self, monkeypatch, capsys):
        """Test that the default settings render INFO entries as text."""
        monkeypatch.delenv("LOG_LEVEL", raising=False)
        monkeypatch.delenv("LOG_FORMAT", raising=False)

        setup_logging_from_settings()

        assert logging.getLogger().level == logging.INFO
        out = capsys.readouterr().out
        assert "[itipcheck] [INFO]" in out
        assert "Logging configured for itipcheck" in out
