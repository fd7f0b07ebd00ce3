"""Centralized environment configuration management for magic-patterns-mcp.

Provides a unified interface for all environment variables with:
- Single `get_environment()` function for all configuration
- Type-safe enum with metadata (default, type, description)
- Consistent resolution: override > environment > default

Example:
    >>> from magic_patterns_mcp.config import EnvVar, get_environment
    >>>
    >>> # Get values with automatic type conversion
    >>> timeout = get_environment(EnvVar.MAGIC_PATTERNS_TIMEOUT)  # Returns float
    >>> api_key = get_api_key()  # Returns SecretStr, raises if unset
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, overload

from pydantic import SecretStr

# =============================================================================
# Environment Variable Configuration
# =============================================================================


@dataclass(frozen=True)
class EnvConfig:
    """Metadata for an environment variable.

    Attributes:
        name: Environment variable name (e.g., "MAGIC_PATTERNS_TIMEOUT").
        default: Default value if not set in environment.
        var_type: Python type for value conversion (str or float).
        description: Human-readable description.
        category: Grouping category for documentation.
        secret: Whether the value must never be displayed.
    """

    name: str
    default: Any
    var_type: type
    description: str = ""
    category: str = "general"
    secret: bool = False


class EnvVar(Enum):
    """All environment variables used by magic-patterns-mcp.

    Each member contains an EnvConfig with name, default, type, and description.
    Use with `get_environment()` for type-safe access.

    Categories:
        - api: Magic Patterns API credential and request settings
        - service: MCP server process settings
    """

    # -------------------------------------------------------------------------
    # Magic Patterns API
    # -------------------------------------------------------------------------
    MAGIC_PATTERNS_API_KEY = EnvConfig(
        name="MAGIC_PATTERNS_API_KEY",
        default=None,
        var_type=str,
        description="Magic Patterns API key (sent as the x-mp-api-key header)",
        category="api",
        secret=True,
    )
    MAGIC_PATTERNS_TIMEOUT = EnvConfig(
        name="MAGIC_PATTERNS_TIMEOUT",
        default=300.0,
        var_type=float,
        description="Timeout in seconds for one design generation request",
        category="api",
    )

    # -------------------------------------------------------------------------
    # Service Configuration
    # -------------------------------------------------------------------------
    MAGIC_PATTERNS_LOG_LEVEL = EnvConfig(
        name="MAGIC_PATTERNS_LOG_LEVEL",
        default="INFO",
        var_type=str,
        description="Log level for the server (DEBUG, INFO, WARNING, ERROR)",
        category="service",
    )


class ConfigurationError(Exception):
    """A required configuration value is missing or unusable."""

    def __init__(self, env_var: EnvVar, message: str | None = None):
        self.env_var = env_var
        name = env_var.value.name
        super().__init__(message or f"{name} is not set")


# =============================================================================
# Type Conversion Helpers
# =============================================================================


def _convert_value(value: str | None, var_type: type, default: Any) -> Any:
    """Convert string value to target type.

    Args:
        value: Raw string value from environment (or None).
        var_type: Target Python type.
        default: Default value if conversion fails or value is None.

    Returns:
        Converted value or default.
    """
    if value is None:
        return default

    if var_type is float:
        try:
            return float(value)
        except ValueError:
            return default

    return value


# =============================================================================
# Main Interface
# =============================================================================


@overload
def get_environment(env_var: EnvVar, override: float) -> float: ...
@overload
def get_environment(env_var: EnvVar, override: str) -> str: ...
@overload
def get_environment(env_var: EnvVar, override: None = None) -> Any: ...


def get_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get environment variable value with type conversion.

    Resolution priority:
        1. Explicit override parameter (highest)
        2. Environment variable value
        3. Default from EnvConfig (lowest)

    Args:
        env_var: Environment variable enum member.
        override: Optional override value (bypasses env lookup).

    Returns:
        Value converted to the appropriate type (str or float).

    Example:
        >>> get_environment(EnvVar.MAGIC_PATTERNS_TIMEOUT)
        300.0
        >>> get_environment(EnvVar.MAGIC_PATTERNS_TIMEOUT, override=30.0)
        30.0
    """
    config: EnvConfig = env_var.value

    if override is not None:
        return override

    raw_value = os.environ.get(config.name)

    return _convert_value(raw_value, config.var_type, config.default)


def require_environment(env_var: EnvVar, override: Any = None) -> Any:
    """Get an environment variable that must be set.

    Blank strings count as unset.

    Raises:
        ConfigurationError: If no value is available.
    """
    value = get_environment(env_var, override)
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ConfigurationError(env_var)
    return value


def get_environment_info(env_var: EnvVar) -> EnvConfig:
    """Get metadata for an environment variable."""
    return env_var.value


# =============================================================================
# Convenience Functions
# =============================================================================


def get_api_key(override: str | None = None) -> SecretStr:
    """Get the Magic Patterns API key.

    The key is wrapped in a SecretStr so it is masked in reprs and logs.

    Raises:
        ConfigurationError: If MAGIC_PATTERNS_API_KEY is not set.
    """
    value = require_environment(EnvVar.MAGIC_PATTERNS_API_KEY, override)
    return SecretStr(value.strip())


def get_request_timeout(override: float | None = None) -> float:
    """Get the design request timeout in seconds.

    Non-positive values fall back to the default.
    """
    timeout = get_environment(EnvVar.MAGIC_PATTERNS_TIMEOUT, override)
    if timeout <= 0:
        return EnvVar.MAGIC_PATTERNS_TIMEOUT.value.default
    return timeout


def list_environment_variables(category: str | None = None) -> list[EnvVar]:
    """List all environment variables, optionally filtered by category.

    Args:
        category: Filter by category (api, service).
                 None returns all variables.

    Returns:
        List of EnvVar enum members.
    """
    if category is None:
        return list(EnvVar)

    return [var for var in EnvVar if var.value.category == category]


def describe_environment() -> list[dict[str, Any]]:
    """Describe every variable and whether it is set, masking secrets."""
    rows = []
    for var in EnvVar:
        config = var.value
        raw = os.environ.get(config.name)
        if raw is None:
            shown = None
        elif config.secret:
            shown = "********"
        else:
            shown = raw
        rows.append(
            {
                "name": config.name,
                "category": config.category,
                "set": raw is not None,
                "value": shown,
                "default": config.default,
                "description": config.description,
            }
        )
    return rows


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
