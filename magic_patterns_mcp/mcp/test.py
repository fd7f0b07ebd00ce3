"""Unit tests for MCP server module.

Tests cover:
- Server configuration
- Tool registration and schemas
- Tool invocation through the MCP protocol (in-memory client)
- CLI entry point startup checks
"""

import httpx
import pytest
from pydantic import SecretStr

from magic_patterns_mcp.client import StubDesignTransport, sample_design

from . import server as server_module
from .lib import (
    SERVER_NAME,
    ServerConfig,
    get_server_info,
    get_server_version,
)
from .server import OFFLINE_API_KEY, create_server, main

# =============================================================================
# Configuration Tests
# =============================================================================


class TestServerConfig:
    """Tests for ServerConfig dataclass."""

    @pytest.mark.unit
    def test_default_config(self):
        config = ServerConfig()
        assert config.name == "magic-patterns-mcp"
        assert config.timeout == 300.0
        assert config.log_level == "INFO"

    @pytest.mark.unit
    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("MAGIC_PATTERNS_TIMEOUT", "45")
        monkeypatch.setenv("MAGIC_PATTERNS_LOG_LEVEL", "WARNING")
        config = ServerConfig.from_env()
        assert config.timeout == 45.0
        assert config.log_level == "WARNING"


class TestServerUtilities:
    """Tests for server utility functions."""

    @pytest.mark.unit
    def test_get_server_version(self):
        version = get_server_version()
        assert len(version.split(".")) >= 2

    @pytest.mark.unit
    def test_get_server_info(self):
        info = get_server_info()
        assert info["name"] == SERVER_NAME
        assert [tool["name"] for tool in info["tools"]] == ["create_design"]
        assert info["tools"][0]["read_only"] is False
        assert info["tools"][0]["destructive"] is False


# =============================================================================
# Server Instance Tests
# =============================================================================


class TestServerInstance:
    """Tests for FastMCP server creation."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_server_has_name(self, mcp_server):
        assert mcp_server.name == "magic-patterns-mcp"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_custom_name(self, design_client):
        server = create_server(design_client, ServerConfig(name="designs"))
        assert server.name == "designs"


# =============================================================================
# MCP Protocol Tests
# =============================================================================


@pytest.mark.mcp
class TestToolListing:
    """The tool is discoverable with its full contract."""

    @staticmethod
    async def _listed_tool(mcp_client) -> dict:
        """The single listed tool, dumped with its MCP wire names."""
        (tool,) = await mcp_client.list_tools()
        return tool.model_dump(by_alias=True)

    @pytest.mark.asyncio
    async def test_single_tool(self, mcp_client):
        tools = await mcp_client.list_tools()
        assert [t.name for t in tools] == ["create_design"]

    @pytest.mark.asyncio
    async def test_annotations(self, mcp_client):
        annotations = (await self._listed_tool(mcp_client))["annotations"]
        assert annotations["readOnlyHint"] is False
        assert annotations["destructiveHint"] is False

    @pytest.mark.asyncio
    async def test_input_schema(self, mcp_client):
        schema = (await self._listed_tool(mcp_client))["inputSchema"]
        assert set(schema["properties"]) == {"prompt", "mode", "presetId"}
        assert schema["required"] == ["prompt"]
        for name, prop in schema["properties"].items():
            assert prop.get("description"), f"{name} has no description"

    @pytest.mark.asyncio
    async def test_output_schema(self, mcp_client):
        schema = (await self._listed_tool(mcp_client))["outputSchema"]
        assert schema is not None
        assert {"id", "sourceFiles", "compiledFiles", "editorUrl"} <= set(
            schema["properties"]
        )


@pytest.mark.mcp
class TestToolInvocation:
    """Calling create_design over the protocol."""

    @pytest.mark.asyncio
    async def test_create_design(self, mcp_client, stub_transport):
        result = await mcp_client.call_tool(
            "create_design", {"prompt": "checkout page"}, raise_on_error=False
        )

        assert result.is_error is False
        design = result.structured_content
        assert design["id"] == "stub-0001"
        assert design["sourceFiles"][0]["name"] == "App.tsx"
        assert design["chatMessages"][0]["content"] == "checkout page"
        assert stub_transport.forms()[0]["mode"] == "best"

    @pytest.mark.asyncio
    async def test_explicit_arguments_forwarded(self, mcp_client, stub_transport):
        result = await mcp_client.call_tool(
            "create_design",
            {"prompt": "navbar", "mode": "fast", "presetId": "shadcn-tailwind"},
            raise_on_error=False,
        )

        assert result.is_error is False
        form = stub_transport.forms()[0]
        assert form["mode"] == "fast"
        assert form["presetId"] == "shadcn-tailwind"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "arguments",
        [{}, {"prompt": ""}, {"prompt": "   "}, {"prompt": "x", "mode": "turbo"}],
    )
    async def test_invalid_arguments_rejected(
        self, mcp_client, stub_transport, arguments
    ):
        """Bad arguments fail before any request is sent."""
        result = await mcp_client.call_tool(
            "create_design", arguments, raise_on_error=False
        )

        assert result.is_error is True
        assert stub_transport.request_count == 0


@pytest.mark.mcp
class TestToolFailures:
    """Remote and protocol failures reach the agent as tool errors."""

    async def _call_with(self, handler):
        from fastmcp import Client

        from magic_patterns_mcp.client import MagicPatternsClient

        transport = StubDesignTransport(handler)
        async with MagicPatternsClient("mp-secret-77", transport=transport) as client:
            async with Client(create_server(client)) as mcp_client:
                result = await mcp_client.call_tool(
                    "create_design", {"prompt": "x"}, raise_on_error=False
                )
        return result, transport

    @staticmethod
    def _text(result) -> str:
        return " ".join(getattr(block, "text", "") for block in result.content)

    @pytest.mark.asyncio
    async def test_http_500(self):
        result, transport = await self._call_with(
            lambda request: httpx.Response(500, text="upstream exploded")
        )
        assert result.is_error is True
        assert "HTTP 500" in self._text(result)
        assert "upstream exploded" in self._text(result)
        assert transport.request_count == 1

    @pytest.mark.asyncio
    async def test_contract_drift(self):
        def handler(request):
            body = sample_design("d1")
            body["compiledFiles"][0]["type"] = "wasm"
            return httpx.Response(200, json=body)

        result, transport = await self._call_with(handler)
        assert result.is_error is True
        assert "unexpected response" in self._text(result)
        assert transport.request_count == 1

    @pytest.mark.asyncio
    async def test_transport_failure_hides_key(self):
        def handler(request):
            raise httpx.ConnectError(
                f"refused {request.headers['x-mp-api-key']}", request=request
            )

        result, _ = await self._call_with(handler)
        assert result.is_error is True
        assert "Could not reach" in self._text(result)
        assert "mp-secret-77" not in self._text(result)


# =============================================================================
# CLI Entry Point Tests
# =============================================================================


class TestMain:
    """Startup behavior of the server entry point."""

    @pytest.fixture
    def recorded_runs(self, monkeypatch):
        runs = []

        def fake_run_server(api_key, config=None, transport=None):
            runs.append({"api_key": api_key, "config": config, "transport": transport})

        monkeypatch.setattr(server_module, "run_server", fake_run_server)
        return runs

    @pytest.mark.unit
    def test_missing_key_is_fatal(self, monkeypatch, recorded_runs):
        monkeypatch.delenv("MAGIC_PATTERNS_API_KEY", raising=False)
        assert main([]) == 1
        assert recorded_runs == []

    @pytest.mark.unit
    def test_starts_with_key(self, monkeypatch, recorded_runs):
        monkeypatch.setenv("MAGIC_PATTERNS_API_KEY", "mp-live-key")
        assert main([]) == 0
        (run,) = recorded_runs
        assert isinstance(run["api_key"], SecretStr)
        assert run["api_key"].get_secret_value() == "mp-live-key"
        assert run["transport"] is None

    @pytest.mark.unit
    def test_offline_needs_no_key(self, monkeypatch, recorded_runs):
        monkeypatch.delenv("MAGIC_PATTERNS_API_KEY", raising=False)
        assert main(["--offline"]) == 0
        (run,) = recorded_runs
        assert run["api_key"].get_secret_value() == OFFLINE_API_KEY
        assert isinstance(run["transport"], StubDesignTransport)
