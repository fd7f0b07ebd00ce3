"""Core MCP server logic for magic-patterns-mcp.

Provides configuration and metadata for creating MCP server instances.
"""

from dataclasses import dataclass
from typing import Any

from magic_patterns_mcp.config import (
    EnvVar,
    get_environment,
    get_request_timeout,
)
from magic_patterns_mcp.schema import (
    TOOL_ANNOTATIONS,
    TOOL_DESCRIPTION,
    TOOL_NAME,
)

SERVER_NAME = "magic-patterns-mcp"


@dataclass
class ServerConfig:
    """Configuration for MCP server.

    Attributes:
        name: Server display name.
        timeout: Timeout in seconds for one design request.
        log_level: Logging level name.
    """

    name: str = SERVER_NAME
    timeout: float = 300.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Create config from environment variables."""
        return cls(
            name=SERVER_NAME,
            timeout=get_request_timeout(),
            log_level=get_environment(EnvVar.MAGIC_PATTERNS_LOG_LEVEL),
        )


def get_server_version() -> str:
    """Get server version string."""
    return "1.0.0"


def get_server_info() -> dict[str, Any]:
    """Describe the server and its tool for `mcp info` and diagnostics."""
    hints = TOOL_ANNOTATIONS.model_dump(by_alias=True)
    return {
        "name": SERVER_NAME,
        "version": get_server_version(),
        "transport": "stdio",
        "tools": [
            {
                "name": TOOL_NAME,
                "description": TOOL_DESCRIPTION,
                "read_only": hints["readOnlyHint"],
                "destructive": hints["destructiveHint"],
            }
        ],
    }


__all__ = [
    "SERVER_NAME",
    "ServerConfig",
    "get_server_info",
    "get_server_version",
]
