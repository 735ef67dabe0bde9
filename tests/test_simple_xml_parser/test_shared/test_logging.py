"""Tests for component-aware logging."""

import logging

import pytest

from simple_xml_parser.shared.logging import (
    ComponentLogger,
    configure_logging,
    get_logger,
)


@pytest.fixture
def package_logger():
    """Package logger, restored after the test."""
    logger = logging.getLogger("simple_xml_parser")
    handlers = list(logger.handlers)
    level = logger.level
    yield logger
    logger.handlers[:] = handlers
    logger.setLevel(level)


class TestComponentLogger:
    """Test ComponentLogger extra data."""

    def test_get_logger(self):
        """Test logger creation."""
        logger = get_logger("simple_xml_parser.events.parser", "req-1", "event_parser")
        assert isinstance(logger, ComponentLogger)
        assert logger.correlation_id == "req-1"
        assert logger.component == "event_parser"

    def test_default_component(self):
        """Test the component defaults to the module name."""
        logger = get_logger("simple_xml_parser.tree.builder")
        assert logger.component == "builder"

    def test_records_carry_component(self, caplog):
        """Test component and correlation ID reach the log record."""
        caplog.set_level(logging.DEBUG, logger="simple_xml_parser")
        logger = get_logger("simple_xml_parser.test", "req-2", "tester")
        logger.info("hello", extra={"count": 3})

        record = caplog.records[-1]
        assert record.getMessage() == "hello"
        assert record.component == "tester"
        assert record.correlation_id == "req-2"
        assert record.count == 3

    def test_error_with_traceback(self, caplog):
        """Test error records can carry the active exception."""
        logger = get_logger("simple_xml_parser.test", component="tester")
        try:
            raise OSError("disk full")
        except OSError:
            logger.error("write failed", extra={"path": "out.xml"}, exc_info=True)

        record = caplog.records[-1]
        assert record.levelno == logging.ERROR
        assert record.path == "out.xml"
        assert record.exc_info[0] is OSError

    def test_is_enabled_for(self, package_logger):
        """Test level checks."""
        package_logger.setLevel(logging.ERROR)
        logger = get_logger("simple_xml_parser.test")
        assert logger.is_enabled_for(logging.ERROR)
        assert not logger.is_enabled_for(logging.DEBUG)


class TestConfigureLogging:
    """Test handler installation."""

    def test_installs_single_handler(self, package_logger):
        """Test repeated configuration replaces the previous handler."""
        first = configure_logging(logging.INFO)
        second = configure_logging("DEBUG")

        assert first not in package_logger.handlers
        assert second in package_logger.handlers
        assert package_logger.level == logging.DEBUG

    def test_foreign_records_are_formatted(self, package_logger):
        """Test records without component data still format."""
        handler = configure_logging(logging.DEBUG)
        record = logging.LogRecord(
            "simple_xml_parser.other", logging.INFO, __file__, 1, "msg", None, None
        )
        assert handler.filter(record)
        assert "[other]" in handler.format(record)
