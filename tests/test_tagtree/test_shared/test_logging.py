"""Tests for correlation-aware logging."""

import logging

import pytest

from tagtree.shared import CorrelationLogger, configure_logging, get_logger


class TestCorrelationLogger:
    """Test the logger wrapper."""

    def test_component_defaults_to_module_name(self) -> None:
        """Test the component is derived from the logger name."""
        logger = get_logger("tagtree.tree.editor")
        assert isinstance(logger, CorrelationLogger)
        assert logger.component == "editor"

    def test_records_carry_correlation_fields(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test component and correlation ID are attached to records."""
        logger = get_logger("tagtree.test", "req-42", "unit")
        with caplog.at_level(logging.INFO, logger="tagtree.test"):
            logger.info("hello", extra={"row": 2})

        record = caplog.records[-1]
        assert record.getMessage() == "hello"
        assert record.component == "unit"
        assert record.correlation_id == "req-42"
        assert record.row == 2

    def test_bind_keeps_correlation_id(self) -> None:
        """Test bind creates a sub-component logger."""
        logger = get_logger("tagtree.test", "req-7", "parent").bind("child")
        assert logger.component == "child"
        assert logger.correlation_id == "req-7"


class TestConfigureLogging:
    """Test root logging configuration."""

    def test_invalid_level(self) -> None:
        """Test unknown level names are rejected."""
        with pytest.raises(ValueError):
            configure_logging("LOUD")

    def test_sets_root_level(self) -> None:
        """Test the root logger level follows the argument."""
        root = logging.getLogger()
        saved_level, saved_handlers = root.level, root.handlers[:]
        try:
            configure_logging("debug")
            assert root.level == logging.DEBUG
        finally:
            root.handlers[:] = saved_handlers
            root.setLevel(saved_level)
