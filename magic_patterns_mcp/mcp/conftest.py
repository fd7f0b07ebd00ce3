"""Pytest fixtures for MCP server tests.

This module provides:
- A stub-backed Magic Patterns client (no network)
- Server and in-memory client fixtures for protocol testing
"""

from __future__ import annotations

from typing import AsyncGenerator

import pytest
from fastmcp import Client, FastMCP

from magic_patterns_mcp.client import MagicPatternsClient, StubDesignTransport

TEST_API_KEY = "mp-test-key-9c41aa"


# =============================================================================
# Server Fixtures
# =============================================================================


@pytest.fixture
def stub_transport() -> StubDesignTransport:
    """Echoing stub transport shared by the client and the test."""
    return StubDesignTransport()


@pytest.fixture
async def design_client(
    stub_transport: StubDesignTransport,
) -> AsyncGenerator[MagicPatternsClient, None]:
    """Magic Patterns client wired to the stub transport."""
    async with MagicPatternsClient(TEST_API_KEY, transport=stub_transport) as client:
        yield client


@pytest.fixture
def mcp_server(design_client: MagicPatternsClient) -> FastMCP:
    """Create MCP server instance for testing."""
    from .server import create_server

    return create_server(design_client)


@pytest.fixture
async def mcp_client(mcp_server: FastMCP) -> AsyncGenerator[Client, None]:
    """Create connected in-memory MCP client for testing."""
    async with Client(mcp_server) as client:
        yield client
