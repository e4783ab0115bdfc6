"""Tests for correlation-aware logging."""

import logging

import pytest

from xml_subset_parser.shared import configure_logging, get_logger


@pytest.fixture
def package_logger():
    logger = logging.getLogger("xml_subset_parser")
    saved_handlers = list(logger.handlers)
    saved_level = logger.level
    yield logger
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)


class TestCorrelationLogger:
    """Test CorrelationLogger record enrichment."""

    def test_records_carry_component_and_correlation_id(self, caplog):
        """Test that extra fields land on the log record."""
        caplog.set_level(logging.DEBUG)
        logger = get_logger("xml_subset_parser.test", "req-42", "xml_tokenizer")

        logger.info("Tokenization halted", extra={"error_kind": "TAG_MALFORMED"})

        record = caplog.records[-1]
        assert record.getMessage() == "Tokenization halted"
        assert record.component == "xml_tokenizer"
        assert record.correlation_id == "req-42"
        assert record.error_kind == "TAG_MALFORMED"

    def test_component_defaults_to_module_name(self):
        """Test the default component name."""
        logger = get_logger("xml_subset_parser.tree.builder")

        assert logger.component == "builder"

    def test_exception_includes_traceback(self, caplog):
        """Test that exception() records exc_info."""
        logger = get_logger("xml_subset_parser.test")

        try:
            raise OSError("disk gone")
        except OSError:
            logger.exception("Could not read parser input")

        assert caplog.records[-1].exc_info is not None


class TestConfigureLogging:
    """Test package logging setup."""

    def test_handler_added_once(self, package_logger):
        """Test that repeated calls do not duplicate the handler."""
        configure_logging("INFO")
        configure_logging("DEBUG")

        marked = [
            handler for handler in package_logger.handlers
            if getattr(handler, "_xml_subset_parser", False)
        ]
        assert len(marked) == 1
        assert package_logger.level == logging.DEBUG

    def test_numeric_level(self, package_logger):
        """Test that numeric levels are accepted."""
        configure_logging(logging.ERROR)

        assert package_logger.level == logging.ERROR
