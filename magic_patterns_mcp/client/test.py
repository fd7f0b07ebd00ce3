"""Tests for the Magic Patterns client.

All HTTP traffic goes through StubDesignTransport (no network).
"""

import asyncio
import json
import logging

import httpx
import pytest

from magic_patterns_mcp.schema import CreateDesignParameters, validate_parameters

from .lib import (
    API_KEY_HEADER,
    DEFAULT_ENDPOINT,
    MagicPatternsClient,
    ProtocolError,
    RemoteError,
    RemoteErrorKind,
    build_form,
)
from .stub import StubDesignTransport, parse_form, sample_design

# =============================================================================
# Form Building
# =============================================================================


class TestBuildForm:
    """Tests for build_form."""

    @pytest.mark.unit
    def test_defaults_applied(self):
        """Omitted mode and preset fall back to best / html-tailwind."""
        form = build_form(CreateDesignParameters(prompt="hero section"))
        assert form == {
            "prompt": "hero section",
            "mode": "best",
            "presetId": "html-tailwind",
            "images": "[]",
        }

    @pytest.mark.unit
    def test_explicit_values_kept(self):
        params = validate_parameters(
            {"prompt": "table", "mode": "fast", "presetId": "mantine-inline"}
        )
        form = build_form(params)
        assert form["mode"] == "fast"
        assert form["presetId"] == "mantine-inline"
        assert form["images"] == "[]"


# =============================================================================
# Construction
# =============================================================================


class TestClientConstruction:
    """Tests for client setup and lifecycle."""

    @pytest.mark.unit
    def test_empty_key_rejected(self):
        with pytest.raises(ValueError, match="api_key"):
            MagicPatternsClient("")

    @pytest.mark.unit
    def test_repr_hides_key(self, api_key):
        client = MagicPatternsClient(api_key, transport=StubDesignTransport())
        assert api_key not in repr(client)
        assert DEFAULT_ENDPOINT in repr(client)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_shared_client_not_closed(self, api_key, stub_transport):
        """An injected http client stays open after aclose."""
        shared = httpx.AsyncClient(transport=stub_transport)
        async with MagicPatternsClient(api_key, http_client=shared):
            pass
        assert shared.is_closed is False
        await shared.aclose()

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_owned_client_closed(self, api_key, stub_transport):
        client = MagicPatternsClient(api_key, transport=stub_transport)
        await client.aclose()
        assert client._client.is_closed is True


# =============================================================================
# Request Shape
# =============================================================================


class TestCreateDesignRequest:
    """Tests for the outbound request."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_single_post_to_endpoint(self, api_key, stub_transport):
        async with MagicPatternsClient(api_key, transport=stub_transport) as client:
            await client.create_design(CreateDesignParameters(prompt="login form"))

        assert stub_transport.request_count == 1
        request = stub_transport.requests[0]
        assert request.method == "POST"
        assert str(request.url) == DEFAULT_ENDPOINT

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_key_only_in_header(self, api_key, stub_transport):
        """The credential travels in x-mp-api-key and nowhere else."""
        async with MagicPatternsClient(api_key, transport=stub_transport) as client:
            await client.create_design(CreateDesignParameters(prompt="login form"))

        request = stub_transport.requests[0]
        assert request.headers[API_KEY_HEADER] == api_key
        assert api_key not in str(request.url)
        assert api_key.encode() not in request.content

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_multipart_form_fields(self, api_key, stub_transport):
        async with MagicPatternsClient(api_key, transport=stub_transport) as client:
            await client.create_design(
                validate_parameters(
                    {"prompt": "Dashboard — dark", "mode": "fast", "presetId": "cfg_1"}
                )
            )

        request = stub_transport.requests[0]
        assert request.headers["content-type"].startswith("multipart/form-data")
        assert parse_form(request) == {
            "prompt": "Dashboard — dark",
            "mode": "fast",
            "presetId": "cfg_1",
            "images": "[]",
        }

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_defaults_sent_when_omitted(self, api_key, stub_transport):
        async with MagicPatternsClient(api_key, transport=stub_transport) as client:
            await client.create_design(validate_parameters({"prompt": "pricing"}))

        form = stub_transport.forms()[0]
        assert form["mode"] == "best"
        assert form["presetId"] == "html-tailwind"


# =============================================================================
# Response Handling
# =============================================================================


class TestCreateDesignResponse:
    """Tests for response mapping."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_success(self, api_key, stub_transport):
        async with MagicPatternsClient(api_key, transport=stub_transport) as client:
            design = await client.create_design(
                CreateDesignParameters(prompt="settings page")
            )

        assert design.id == "stub-0001"
        assert len(design.source_files) == 2
        assert len(design.compiled_files) == 1
        assert design.chat_messages[0].content == "settings page"

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_status_500(self, api_key):
        """Non-2xx maps to RemoteError even if the body looks like a design."""
        transport = StubDesignTransport(
            lambda request: httpx.Response(500, json=sample_design("ignored"))
        )
        async with MagicPatternsClient(api_key, transport=transport) as client:
            with pytest.raises(RemoteError) as exc_info:
                await client.create_design(CreateDesignParameters(prompt="x"))

        error = exc_info.value
        assert error.kind is RemoteErrorKind.STATUS
        assert error.status_code == 500
        assert "ignored" in error.body
        assert transport.request_count == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_status_body_truncated(self, api_key):
        transport = StubDesignTransport(
            lambda request: httpx.Response(502, text="x" * 5000)
        )
        async with MagicPatternsClient(api_key, transport=transport) as client:
            with pytest.raises(RemoteError) as exc_info:
                await client.create_design(CreateDesignParameters(prompt="x"))
        assert len(exc_info.value.body) == 500

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_unauthorized(self, api_key):
        transport = StubDesignTransport(
            lambda request: httpx.Response(401, json={"error": "Invalid API key"})
        )
        async with MagicPatternsClient(api_key, transport=transport) as client:
            with pytest.raises(RemoteError, match="HTTP 401"):
                await client.create_design(CreateDesignParameters(prompt="x"))

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_missing_field_is_protocol_error(self, api_key):
        """A conforming-looking body without editorUrl is rejected, once."""

        def handler(request):
            body = sample_design("d1")
            del body["editorUrl"]
            return httpx.Response(200, json=body)

        transport = StubDesignTransport(handler)
        async with MagicPatternsClient(api_key, transport=transport) as client:
            with pytest.raises(ProtocolError, match="editorUrl"):
                await client.create_design(CreateDesignParameters(prompt="x"))
        assert transport.request_count == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_invalid_json_is_protocol_error(self, api_key):
        transport = StubDesignTransport(
            lambda request: httpx.Response(200, text="<html>maintenance</html>")
        )
        async with MagicPatternsClient(api_key, transport=transport) as client:
            with pytest.raises(ProtocolError, match="not valid JSON") as exc_info:
                await client.create_design(CreateDesignParameters(prompt="x"))
        assert exc_info.value.status_code == 200

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_double_encoded_body_is_protocol_error(self, api_key):
        """A design serialized twice arrives as a JSON string and is rejected."""
        transport = StubDesignTransport(
            lambda request: httpx.Response(
                200,
                text=json.dumps(json.dumps(sample_design("dbl"))),
                headers={"content-type": "application/json"},
            )
        )
        async with MagicPatternsClient(api_key, transport=transport) as client:
            with pytest.raises(ProtocolError, match="JSON str, not an object"):
                await client.create_design(CreateDesignParameters(prompt="x"))
        assert transport.request_count == 1

    @pytest.mark.unit
    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", ["[]", "42", "null"])
    async def test_non_object_body_is_protocol_error(self, api_key, body):
        transport = StubDesignTransport(
            lambda request: httpx.Response(200, text=body)
        )
        async with MagicPatternsClient(api_key, transport=transport) as client:
            with pytest.raises(ProtocolError, match="not an object"):
                await client.create_design(CreateDesignParameters(prompt="x"))


# =============================================================================
# Transport Failures
# =============================================================================


class TestTransportFailures:
    """Tests for network errors, timeouts and cancellation."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_connect_error(self, api_key):
        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        transport = StubDesignTransport(handler)
        async with MagicPatternsClient(api_key, transport=transport) as client:
            with pytest.raises(RemoteError) as exc_info:
                await client.create_design(CreateDesignParameters(prompt="x"))

        assert exc_info.value.kind is RemoteErrorKind.TRANSPORT
        assert "Connection refused" in str(exc_info.value)
        assert api_key not in str(exc_info.value)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_timeout(self, api_key):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        transport = StubDesignTransport(handler)
        async with MagicPatternsClient(api_key, transport=transport) as client:
            with pytest.raises(RemoteError, match="timed out") as exc_info:
                await client.create_design(CreateDesignParameters(prompt="x"))
        assert exc_info.value.kind is RemoteErrorKind.TRANSPORT

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_error_echoing_key_is_scrubbed(self, api_key, caplog):
        """A transport error that quotes the key never leaks it."""

        def handler(request):
            raise httpx.ConnectError(
                f"proxy refused header {request.headers[API_KEY_HEADER]}",
                request=request,
            )

        transport = StubDesignTransport(handler)
        caplog.set_level(logging.DEBUG)
        async with MagicPatternsClient(api_key, transport=transport) as client:
            with pytest.raises(RemoteError) as exc_info:
                await client.create_design(CreateDesignParameters(prompt="x"))

        assert api_key not in str(exc_info.value)
        assert "[REDACTED]" in str(exc_info.value)
        assert exc_info.value.__cause__ is None
        assert exc_info.value.__context__ is None
        assert api_key not in caplog.text

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_clean_error_keeps_cause(self, api_key):
        """Errors that never quoted the key stay chained to the httpx error."""

        def handler(request):
            raise httpx.ConnectError("Connection refused", request=request)

        transport = StubDesignTransport(handler)
        async with MagicPatternsClient(api_key, transport=transport) as client:
            with pytest.raises(RemoteError) as exc_info:
                await client.create_design(CreateDesignParameters(prompt="x"))

        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cancellation(self, api_key):
        """Cancelling the caller aborts the request with RemoteError."""
        started = asyncio.Event()

        async def handler(request):
            started.set()
            await asyncio.sleep(3600)
            return httpx.Response(200, json=sample_design("late"))

        transport = StubDesignTransport(handler)
        async with MagicPatternsClient(api_key, transport=transport) as client:
            task = asyncio.create_task(
                client.create_design(CreateDesignParameters(prompt="x"))
            )
            await started.wait()
            task.cancel()
            with pytest.raises(RemoteError) as exc_info:
                await task

        assert exc_info.value.kind is RemoteErrorKind.CANCELLED
        assert transport.request_count == 1


# =============================================================================
# Concurrency and Confidentiality
# =============================================================================


class TestConcurrency:
    """Tests for concurrent use of one client."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_concurrent_calls_are_paired(self, api_key):
        async def handler(request):
            # Finish out of order to expose any cross-talk.
            prompt = parse_form(request)["prompt"]
            await asyncio.sleep(0.001 * (hash(prompt) % 5))
            return transport.echo(request)

        transport = StubDesignTransport(handler)
        prompts = [f"screen number {i}" for i in range(20)]

        async with MagicPatternsClient(api_key, transport=transport) as client:
            designs = await asyncio.gather(
                *(
                    client.create_design(CreateDesignParameters(prompt=p))
                    for p in prompts
                )
            )

        assert [d.chat_messages[0].content for d in designs] == prompts
        assert len({d.id for d in designs}) == len(prompts)
        assert transport.request_count == len(prompts)


class TestConfidentiality:
    """The key never reaches logs."""

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_logs_never_contain_key(self, api_key, stub_transport, caplog):
        caplog.set_level(logging.DEBUG)
        async with MagicPatternsClient(api_key, transport=stub_transport) as client:
            await client.create_design(CreateDesignParameters(prompt="x"))
        assert "Creating design" in caplog.text
        assert api_key not in caplog.text
