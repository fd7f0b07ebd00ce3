"""Core logging implementation for magic-patterns-mcp."""

import logging
import sys
from typing import Iterable, Optional

__all__ = ["RedactSecretsFilter", "get_logger", "setup_logging"]

_REDACTED = "[REDACTED]"


class RedactSecretsFilter(logging.Filter):
    """Replace known secret values in log records with a placeholder."""

    def __init__(self, secrets: Iterable[str] = ()):
        super().__init__()
        self._secrets = tuple(s for s in secrets if s)

    def filter(self, record: logging.LogRecord) -> bool:
        if not self._secrets:
            return True
        message = record.getMessage()
        redacted = message
        for secret in self._secrets:
            redacted = redacted.replace(secret, _REDACTED)
        if redacted != message:
            record.msg = redacted
            record.args = None
        return True


def setup_logging(
    level: int | str = logging.INFO,
    stream=sys.stderr,
    secrets: Iterable[str] = (),
) -> None:
    """Configure basic logging.

    Logs always go to stderr by default: stdout carries the MCP stream.

    Args:
        level: Logging level (number or name).
        stream: Output stream.
        secrets: Values to scrub from every record.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=stream,
    )

    secrets = tuple(secrets)
    if secrets:
        redactor = RedactSecretsFilter(secrets)
        for handler in logging.getLogger().handlers:
            handler.addFilter(redactor)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance.

    Args:
        name: Name of the logger.

    Returns:
        Logger instance.
    """
    return logging.getLogger(name or "magic-patterns-mcp")
