"""Unit tests for the logging configuration module.

This test module validates the structured logging configuration and
context binding.
"""

import logging

import pytest
import structlog

from prt.log_config import bind_context, clear_context, configure_logging, get_logger


class TestLoggingConfiguration:
    """Test cases for logging configuration."""

    def test_configure_logging_info_level(self):
        """Test logging configuration with INFO level."""
        configure_logging(level="INFO", json_logs=True)
        logger = get_logger("test")
        assert logger is not None
        assert logging.getLogger().level == logging.INFO

    def test_configure_logging_lower_case_level(self):
        """Test that the level name is case-insensitive."""
        configure_logging(level="debug")
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_logging_invalid_level(self):
        """Test logging configuration with invalid level."""
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(level="INVALID")

    def test_configure_logging_console_renderer(self):
        """Test logging configuration with console renderer."""
        configure_logging(level="INFO", json_logs=False)
        assert structlog.is_configured()

    def test_get_logger_without_name(self):
        """Test getting a logger without a name."""
        configure_logging(level="INFO")
        assert get_logger() is not None


class TestContextBinding:
    """Test cases for context binding functionality."""

    def setup_method(self):
        """Set up test environment before each test."""
        configure_logging(level="INFO", json_logs=True)
        clear_context()

    def teardown_method(self):
        """Clean up after each test."""
        clear_context()

    def test_bind_context(self):
        """Test binding context variables."""
        bind_context(command="validate", roadmap="prt.json")

        context = structlog.contextvars.get_contextvars()
        assert context == {"command": "validate", "roadmap": "prt.json"}

    def test_clear_context(self):
        """Test clearing all context variables."""
        bind_context(command="order")
        clear_context()

        assert structlog.contextvars.get_contextvars() == {}

    def test_context_in_log_output(self, caplog):
        """Test that bound context appears in rendered records."""
        caplog.set_level(logging.INFO)
        bind_context(command="deps")

        get_logger("test_context").info("context_check")

        assert any("deps" in record.getMessage() for record in caplog.records)
