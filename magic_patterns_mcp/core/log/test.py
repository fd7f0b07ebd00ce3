"""Tests for core logging module."""

import logging
from io import StringIO

from .lib import RedactSecretsFilter, get_logger, setup_logging


class TestLogging:
    """Test core logging API."""

    def test_get_logger(self) -> None:
        """Verify logger instance creation."""
        logger = get_logger("test")
        assert logger.name == "test"
        assert isinstance(logger, logging.Logger)

    def test_get_logger_default_name(self) -> None:
        """Verify default logger name."""
        logger = get_logger()
        assert logger.name == "magic-patterns-mcp"

    def test_setup_logging_accepts_level_name(self) -> None:
        """Level names are accepted without raising."""
        stream = StringIO()
        setup_logging(level="debug", stream=stream)
        setup_logging(level="not-a-level", stream=stream)
        logger = get_logger("test_setup")
        # basicConfig is a no-op once logging is configured; the level stays on the root.
        assert logger.level == logging.NOTSET


class TestRedactSecretsFilter:
    """Test credential scrubbing."""

    def _record(self, msg: str, *args) -> logging.LogRecord:
        return logging.LogRecord("test", logging.INFO, __file__, 1, msg, args, None)

    def test_redacts_in_formatted_message(self) -> None:
        """Secrets interpolated through args are replaced."""
        record = self._record("calling with key %s", "mp-secret-123")
        assert RedactSecretsFilter(["mp-secret-123"]).filter(record) is True
        assert "mp-secret-123" not in record.getMessage()
        assert "[REDACTED]" in record.getMessage()

    def test_leaves_clean_records_untouched(self) -> None:
        """Records without secrets keep their args."""
        record = self._record("prompt length %d", 12)
        RedactSecretsFilter(["mp-secret-123"]).filter(record)
        assert record.args == (12,)
        assert record.getMessage() == "prompt length 12"

    def test_handler_output_is_scrubbed(self) -> None:
        """A handler with the filter never writes the secret."""
        stream = StringIO()
        handler = logging.StreamHandler(stream)
        handler.addFilter(RedactSecretsFilter(["mp-secret-123"]))
        logger = get_logger("test_redaction")
        logger.addHandler(handler)
        logger.propagate = False
        try:
            logger.warning("request failed for mp-secret-123")
        finally:
            logger.removeHandler(handler)
            logger.propagate = True
        assert "mp-secret-123" not in stream.getvalue()
        assert "request failed" in stream.getvalue()
