"""Logging micro API for magic-patterns-mcp."""

from .lib import RedactSecretsFilter, get_logger, setup_logging

__all__ = ["RedactSecretsFilter", "get_logger", "setup_logging"]
