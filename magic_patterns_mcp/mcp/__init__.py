"""MCP (Model Context Protocol) server for magic-patterns-mcp.

This module provides the MCP server implementation that exposes Magic
Patterns design generation to LLM clients like Claude Desktop.

Example:
    # Start server in STDIO mode
    >>> from magic_patterns_mcp.mcp import run_server
    >>> run_server(api_key)

    # Create server for testing
    >>> from magic_patterns_mcp.mcp import create_server
    >>> server = create_server(MagicPatternsClient(key, transport=StubDesignTransport()))

Available Tools:
    - create_design: Generate a UI design from a prompt
"""

from .lib import (
    SERVER_NAME,
    ServerConfig,
    get_server_info,
    get_server_version,
)
from .server import create_server, main, run_server

__all__ = [
    # Server
    "create_server",
    "run_server",
    "main",
    # Configuration
    "SERVER_NAME",
    "ServerConfig",
    # Utilities
    "get_server_version",
    "get_server_info",
]
