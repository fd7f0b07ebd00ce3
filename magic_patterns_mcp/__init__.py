"""MCP server exposing Magic Patterns UI design generation."""

from .client import MagicPatternsClient
from .mcp import create_server, run_server
from .schema import CreateDesignParameters, CreateDesignResponse

__version__ = "1.0.0"

__all__ = [
    "CreateDesignParameters",
    "CreateDesignResponse",
    "MagicPatternsClient",
    "create_server",
    "run_server",
]
