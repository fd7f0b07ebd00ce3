"""End-to-end tests for the create_design workflow.

Covers the full path: MCP host → server → client → (stub) API → structured
result, both in-memory and over a real stdio subprocess.
"""

import asyncio
import sys

import httpx
import pytest
from fastmcp import Client
from fastmcp.client.transports import StdioTransport

from magic_patterns_mcp.client import (
    MagicPatternsClient,
    StubDesignTransport,
    parse_form,
)
from magic_patterns_mcp.mcp import create_server
from magic_patterns_mcp.schema import validate_result

API_KEY = "mp-integration-key-0b7d"


@pytest.mark.integration
class TestInMemoryWorkflow:
    """Server and client wired together in one process."""

    @pytest.mark.asyncio
    async def test_result_round_trips_through_contract(self):
        transport = StubDesignTransport()
        async with MagicPatternsClient(API_KEY, transport=transport) as client:
            async with Client(create_server(client)) as mcp_client:
                result = await mcp_client.call_tool(
                    "create_design",
                    {"prompt": "onboarding wizard", "presetId": "chakraUi-inline"},
                    raise_on_error=False,
                )

        assert result.is_error is False
        design = validate_result(result.structured_content)
        assert design.chat_messages[0].text() == "onboarding wizard"
        assert design.chat_messages[-1].content_kind.value == "blocks"
        assert transport.forms() == [
            {
                "prompt": "onboarding wizard",
                "mode": "best",
                "presetId": "chakraUi-inline",
                "images": "[]",
            }
        ]

    @pytest.mark.asyncio
    async def test_concurrent_invocations(self):
        """Parallel tool calls each get the design for their own prompt."""

        async def handler(request):
            prompt = parse_form(request)["prompt"]
            # Later prompts answer first.
            await asyncio.sleep(0.001 * (10 - int(prompt.split()[-1])))
            return transport.echo(request)

        transport = StubDesignTransport(handler)
        prompts = [f"widget {i}" for i in range(10)]

        async with MagicPatternsClient(API_KEY, transport=transport) as client:
            async with Client(create_server(client)) as mcp_client:
                results = await asyncio.gather(
                    *(
                        mcp_client.call_tool(
                            "create_design", {"prompt": p}, raise_on_error=False
                        )
                        for p in prompts
                    )
                )

        contents = [r.structured_content["chatMessages"][0]["content"] for r in results]
        assert contents == prompts
        assert transport.request_count == len(prompts)

    @pytest.mark.asyncio
    async def test_failure_then_success(self):
        """A failed call leaves the server usable for the next one."""
        responses = iter([httpx.Response(503, text="busy"), None])

        def handler(request):
            response = next(responses)
            return response if response is not None else transport.echo(request)

        transport = StubDesignTransport(handler)
        async with MagicPatternsClient(API_KEY, transport=transport) as client:
            async with Client(create_server(client)) as mcp_client:
                first = await mcp_client.call_tool(
                    "create_design", {"prompt": "a"}, raise_on_error=False
                )
                second = await mcp_client.call_tool(
                    "create_design", {"prompt": "b"}, raise_on_error=False
                )

        assert first.is_error is True
        assert second.is_error is False
        assert second.structured_content["chatMessages"][0]["content"] == "b"


@pytest.mark.integration
class TestStdioServer:
    """The CLI server speaking MCP over stdio."""

    @pytest.mark.asyncio
    async def test_offline_server_over_stdio(self, project_root, offline_env):
        transport = StdioTransport(
            command=sys.executable,
            args=[".", "mcp", "run", "--offline"],
            env=offline_env,
            cwd=str(project_root),
        )

        async with Client(transport) as mcp_client:
            tools = await mcp_client.list_tools()
            result = await mcp_client.call_tool(
                "create_design", {"prompt": "status page"}, raise_on_error=False
            )

        assert [t.name for t in tools] == ["create_design"]
        assert result.is_error is False
        assert result.structured_content["id"] == "stub-0001"
        assert result.structured_content["chatMessages"][0]["content"] == "status page"
