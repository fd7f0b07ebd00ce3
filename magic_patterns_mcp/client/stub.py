"""Offline stand-in for the Magic Patterns API.

``StubDesignTransport`` plugs into ``MagicPatternsClient(transport=...)`` and
answers every request locally. It records what was sent so tests can inspect
headers and form fields, and by default echoes a unique design per request
whose conversation starts with the request's prompt.
"""

from __future__ import annotations

import itertools
from email.parser import BytesParser
from email.policy import HTTP
from typing import Any, Awaitable, Callable
from urllib.parse import parse_qsl

import httpx

from magic_patterns_mcp.schema import DEFAULT_PRESET_ID

Handler = Callable[[httpx.Request], "httpx.Response | Awaitable[httpx.Response]"]


def sample_design(
    design_id: str,
    prompt: str = "A simple landing page",
    preset_id: str = DEFAULT_PRESET_ID,
) -> dict[str, Any]:
    """Build a contract-conforming design body.

    Args:
        design_id: Value for ``id`` and the URLs.
        prompt: Text of the first (user) chat message.
        preset_id: Mentioned in the assistant reply.

    Returns:
        JSON-compatible dict with two source files, one compiled file and
        three chat messages (the last with block content).
    """
    return {
        "id": design_id,
        "sourceFiles": [
            {
                "id": f"{design_id}-src-1",
                "name": "App.tsx",
                "code": "export function App() {\n  return <main>Hello</main>;\n}\n",
                "type": "javascript",
            },
            {
                "id": f"{design_id}-src-2",
                "name": "index.css",
                "code": "@tailwind base;\n@tailwind utilities;\n",
                "type": "css",
            },
        ],
        "compiledFiles": [
            {
                "id": f"{design_id}-cmp-1",
                "fileName": "index.js",
                "hostedUrl": f"https://stub.magicpatterns.local/{design_id}/index.js",
                "type": "javascript",
            }
        ],
        "editorUrl": f"https://stub.magicpatterns.local/editor/{design_id}",
        "previewUrl": f"https://stub.magicpatterns.local/preview/{design_id}",
        "chatMessages": [
            {"role": "user", "content": prompt},
            {"role": "assistant", "content": f"Generated with preset {preset_id}."},
            {
                "role": "assistant",
                "content": [{"type": "text", "text": "Open the preview to review it."}],
            },
        ],
    }


def parse_form(request: httpx.Request) -> dict[str, str]:
    """Decode the form fields of a captured request.

    Handles both multipart and urlencoded bodies. The request body must
    already be read (MockTransport does this before dispatching).
    """
    content_type = request.headers.get("content-type", "")
    body = request.content

    if content_type.startswith("application/x-www-form-urlencoded"):
        return dict(parse_qsl(body.decode("utf-8"), keep_blank_values=True))

    message = BytesParser(policy=HTTP).parsebytes(
        b"Content-Type: " + content_type.encode("latin-1") + b"\r\n\r\n" + body
    )
    fields: dict[str, str] = {}
    for part in message.iter_parts():
        name = part.get_param("name", header="content-disposition")
        payload = part.get_payload(decode=True) or b""
        fields[str(name)] = payload.decode("utf-8")
    return fields


class StubDesignTransport(httpx.MockTransport):
    """MockTransport that records requests and echoes designs.

    Example:
        >>> transport = StubDesignTransport()
        >>> client = MagicPatternsClient("key", transport=transport)
        >>> design = await client.create_design(params)
        >>> transport.requests[0].headers["x-mp-api-key"]
        'key'

    Attributes:
        requests: Every request received, in arrival order.
    """

    def __init__(self, handler: Handler | None = None):
        self.requests: list[httpx.Request] = []
        self._handler = handler or self.echo
        self._ids = itertools.count(1)
        super().__init__(self._dispatch)

    @property
    def request_count(self) -> int:
        return len(self.requests)

    def forms(self) -> list[dict[str, str]]:
        """Decoded form fields of every recorded request."""
        return [parse_form(request) for request in self.requests]

    def echo(self, request: httpx.Request) -> httpx.Response:
        """Answer with a fresh design keyed to the request's prompt."""
        form = parse_form(request)
        design_id = f"stub-{next(self._ids):04d}"
        body = sample_design(
            design_id,
            prompt=form.get("prompt", ""),
            preset_id=form.get("presetId", DEFAULT_PRESET_ID),
        )
        return httpx.Response(200, json=body)

    def _dispatch(self, request: httpx.Request):
        self.requests.append(request)
        return self._handler(request)


__all__ = ["StubDesignTransport", "parse_form", "sample_design"]
