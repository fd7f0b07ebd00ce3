"""FastMCP server for magic-patterns-mcp.

This module binds the Magic Patterns client to an MCP server exposing a
single tool:

    create_design: prompt → generated design bundle (source files, hosted
    build output, editor and preview URLs, conversation history)

Usage:
    # STDIO mode (for Claude Desktop and other MCP hosts)
    python -m magic_patterns_mcp.mcp.server

    # Via CLI
    python . mcp run
"""

import argparse
import asyncio
import logging
import sys
from typing import Annotated

import httpx
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field, SecretStr

from magic_patterns_mcp.client import (
    MagicPatternsClient,
    ProtocolError,
    RemoteError,
    RemoteErrorKind,
    StubDesignTransport,
)
from magic_patterns_mcp.config import ConfigurationError, get_api_key
from magic_patterns_mcp.core import setup_logging
from magic_patterns_mcp.schema import (
    MODE_DESCRIPTION,
    PRESET_ID_DESCRIPTION,
    PROMPT_DESCRIPTION,
    TOOL_ANNOTATIONS,
    TOOL_DESCRIPTION,
    TOOL_NAME,
    CreateDesignResponse,
    DesignMode,
    ValidationError,
    validate_parameters,
)

from .lib import ServerConfig, get_server_version

logger = logging.getLogger(__name__)

# Placeholder credential for --offline runs; never sent anywhere.
OFFLINE_API_KEY = "offline"


# =============================================================================
# Server Instructions (LLM Guidance)
# =============================================================================

SERVER_INSTRUCTIONS = """\
## Magic Patterns MCP Server

Generates UI designs from natural language with the Magic Patterns API.

### Usage
- `create_design(prompt)` creates a new design and returns its source files,
  hosted build output, an editor URL and a preview URL.
- Put everything relevant in the prompt: existing component code, styling
  requirements, behavior. Longer, more specific prompts give better results.
- Use `mode="fast"` only for small, time-sensitive fixes. The default is "best".
- `presetId` selects the design system (default "html-tailwind"; also
  "shadcn-tailwind", "chakraUi-inline", "mantine-inline" or a custom ID).

Share the `previewUrl` with the user so they can review the result.
"""


# =============================================================================
# Error Mapping (Internal)
# =============================================================================


def _describe_remote_error(error: RemoteError) -> str:
    """Build the message reported to the agent for a remote failure."""
    if error.kind is RemoteErrorKind.STATUS:
        message = f"Magic Patterns API returned HTTP {error.status_code}"
        if error.body:
            message += f": {error.body}"
        return message
    if error.kind is RemoteErrorKind.CANCELLED:
        return "Design request was cancelled"
    return f"Could not reach Magic Patterns API: {error}"


# =============================================================================
# Server Factory
# =============================================================================


def create_server(
    client: MagicPatternsClient,
    config: ServerConfig | None = None,
) -> FastMCP:
    """Create the MCP server with the create_design tool bound to a client.

    Args:
        client: Request adapter used by every invocation.
        config: Server configuration (defaults if omitted).

    Returns:
        Configured FastMCP instance.
    """
    config = config or ServerConfig()
    mcp = FastMCP(name=config.name, instructions=SERVER_INSTRUCTIONS)

    @mcp.tool(
        name=TOOL_NAME,
        description=TOOL_DESCRIPTION,
        annotations=TOOL_ANNOTATIONS,
    )
    async def create_design(
        prompt: Annotated[str, Field(min_length=1, description=PROMPT_DESCRIPTION)],
        mode: Annotated[DesignMode | None, Field(description=MODE_DESCRIPTION)] = None,
        presetId: Annotated[  # noqa: N803 - wire name
            str | None, Field(description=PRESET_ID_DESCRIPTION)
        ] = None,
    ) -> CreateDesignResponse:
        try:
            params = validate_parameters(
                {"prompt": prompt, "mode": mode, "presetId": presetId}
            )
        except ValidationError as e:
            raise ToolError(f"Invalid arguments: {e}") from e

        try:
            return await client.create_design(params)
        except RemoteError as e:
            raise ToolError(_describe_remote_error(e)) from e
        except ProtocolError as e:
            raise ToolError(f"Magic Patterns returned an unexpected response: {e}") from e

    return mcp


def run_server(
    api_key: SecretStr,
    config: ServerConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> None:
    """Run the MCP server over stdio until the host disconnects.

    Args:
        api_key: Magic Patterns API key.
        config: Server configuration (read from environment if omitted).
        transport: HTTP transport override, e.g. a stub for offline runs.
    """
    config = config or ServerConfig.from_env()

    async def _serve() -> None:
        async with MagicPatternsClient(
            api_key, timeout=config.timeout, transport=transport
        ) as client:
            server = create_server(client, config)
            await server.run_async(transport="stdio")

    logger.info(f"Starting {config.name} server v{get_server_version()}")
    logger.info("Running in STDIO mode")
    asyncio.run(_serve())


# =============================================================================
# CLI Entry Point
# =============================================================================


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for MCP server.

    Args:
        argv: Command line arguments (uses sys.argv if None).

    Returns:
        Exit code (0 for success, 1 when the server cannot start).
    """
    parser = argparse.ArgumentParser(
        prog="magic-patterns-mcp",
        description="MCP server for Magic Patterns design generation",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Answer with stub designs instead of calling the API",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args(argv)

    config = ServerConfig.from_env()
    log_level = "DEBUG" if args.verbose else config.log_level

    try:
        api_key = SecretStr(OFFLINE_API_KEY) if args.offline else get_api_key()
    except ConfigurationError as e:
        setup_logging(log_level)
        logger.error(f"Cannot start server: {e}. Set it in the environment or .env")
        return 1

    transport = None
    if args.offline:
        setup_logging(log_level)
        transport = StubDesignTransport()
        logger.warning("Offline mode: designs are stubbed, the API is not called")
    else:
        setup_logging(log_level, secrets=[api_key.get_secret_value()])

    try:
        run_server(api_key, config=config, transport=transport)
        return 0
    except KeyboardInterrupt:
        logger.info("Server stopped by user")
        return 0
    except Exception as e:
        logger.error(f"Server error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
