"""Centralized configuration management for magic-patterns-mcp.

Provides unified access to all configuration via the `get_environment()` function.

Example:
    >>> from magic_patterns_mcp.config import EnvVar, get_environment
    >>>
    >>> timeout = get_environment(EnvVar.MAGIC_PATTERNS_TIMEOUT)  # Returns float: 300.0
    >>> api_key = get_api_key()  # Returns SecretStr, raises ConfigurationError if unset

Environment Variable Categories:
    api: Magic Patterns credential and request settings
    service: Server process settings (log level)
"""

from .lib import (
    # Core types
    ConfigurationError,
    EnvConfig,
    EnvVar,
    # Main interface
    describe_environment,
    get_api_key,
    get_environment,
    get_environment_info,
    get_request_timeout,
    # Introspection
    list_environment_variables,
    require_environment,
)

__all__ = [
    # Core types
    "EnvConfig",
    "EnvVar",
    "ConfigurationError",
    # Main interface
    "get_environment",
    "get_environment_info",
    "require_environment",
    # Convenience functions
    "get_api_key",
    "get_request_timeout",
    "describe_environment",
    # Introspection
    "list_environment_variables",
]
