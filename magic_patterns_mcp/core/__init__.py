"""Shared infrastructure for magic-patterns-mcp."""

from .log import RedactSecretsFilter, get_logger, setup_logging

__all__ = ["RedactSecretsFilter", "get_logger", "setup_logging"]
