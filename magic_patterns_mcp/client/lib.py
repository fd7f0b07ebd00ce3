"""Magic Patterns API client.

Turns validated create_design parameters into one authenticated HTTP request
and the HTTP response into a validated design bundle, or a typed failure.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any

import httpx
from pydantic import SecretStr

from magic_patterns_mcp.schema import (
    DEFAULT_MODE,
    DEFAULT_PRESET_ID,
    CreateDesignParameters,
    CreateDesignResponse,
    ValidationError,
    validate_result,
)

logger = logging.getLogger(__name__)

DEFAULT_ENDPOINT = "https://api.magicpatterns.com/api/v2/pattern"

API_KEY_HEADER = "x-mp-api-key"

# Image attachments are not supported; the API still expects the field.
NO_IMAGES = "[]"

DEFAULT_TIMEOUT = 300.0

_MAX_ERROR_BODY = 500

_REDACTED = "[REDACTED]"


# =============================================================================
# Errors
# =============================================================================


class RemoteErrorKind(str, Enum):
    """Why the remote call did not produce a response."""

    TRANSPORT = "transport"  # connection refused, DNS, timeout
    STATUS = "status"  # non-2xx HTTP status
    CANCELLED = "cancelled"  # awaiting task cancelled mid-request


class DesignError(Exception):
    """Base class for create_design failures."""


class RemoteError(DesignError):
    """The Magic Patterns API was unreachable or rejected the request.

    Attributes:
        kind: Failure category.
        status_code: HTTP status (STATUS only).
        body: Truncated response body (STATUS only).
    """

    def __init__(
        self,
        message: str,
        kind: RemoteErrorKind,
        status_code: int | None = None,
        body: str | None = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.status_code = status_code
        self.body = body


class ProtocolError(DesignError):
    """The API answered successfully but broke the response contract."""

    def __init__(self, detail: str, status_code: int | None = None):
        super().__init__(detail)
        self.detail = detail
        self.status_code = status_code


# =============================================================================
# Request Building
# =============================================================================


def build_form(params: CreateDesignParameters) -> dict[str, str]:
    """Build the form fields for one request, applying defaults.

    Args:
        params: Validated tool parameters.

    Returns:
        Ordered mapping of ``prompt``, ``mode``, ``presetId`` and ``images``.
    """
    mode = params.mode or DEFAULT_MODE
    return {
        "prompt": params.prompt,
        "mode": mode.value if isinstance(mode, Enum) else mode,
        "presetId": params.preset_id or DEFAULT_PRESET_ID,
        "images": NO_IMAGES,
    }


# =============================================================================
# Client
# =============================================================================


class MagicPatternsClient:
    """Async HTTP client for the Magic Patterns design API.

    Holds the API key for its lifetime and nothing else mutable, so a single
    instance can serve concurrent invocations.

    Example:
        >>> async with MagicPatternsClient(api_key) as client:
        ...     params = validate_parameters({"prompt": "login form"})
        ...     design = await client.create_design(params)
        ...     print(design.preview_url)

    Attributes:
        endpoint: Design creation URL.
        timeout: Request timeout in seconds.
    """

    def __init__(
        self,
        api_key: SecretStr | str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        endpoint: str = DEFAULT_ENDPOINT,
    ):
        """Initialize the client.

        Args:
            api_key: Magic Patterns API key.
            timeout: Request timeout in seconds (ignored with http_client).
            http_client: Shared client to use. Not closed by this instance.
            transport: Transport for the owned client, e.g. a stub in tests.
            endpoint: Design creation URL.
        """
        if not isinstance(api_key, SecretStr):
            api_key = SecretStr(api_key)
        if not api_key.get_secret_value():
            raise ValueError("api_key must not be empty")

        self._api_key = api_key
        self.endpoint = endpoint
        self.timeout = timeout
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            timeout=timeout, transport=transport
        )

    def __repr__(self) -> str:
        return f"MagicPatternsClient(endpoint={self.endpoint!r}, api_key={self._api_key!r})"

    async def __aenter__(self) -> "MagicPatternsClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def create_design(
        self, params: CreateDesignParameters
    ) -> CreateDesignResponse:
        """Create a design from a prompt.

        Sends exactly one request. Nothing is retried or cached.

        Args:
            params: Parameters already validated against the tool contract.

        Returns:
            The validated design bundle.

        Raises:
            RemoteError: Transport failure, non-2xx status or cancellation.
            ProtocolError: Body is not JSON or does not match the contract.
        """
        form = build_form(params)
        logger.info(
            "Creating design (mode=%s, preset=%s, prompt_chars=%d)",
            form["mode"],
            form["presetId"],
            len(params.prompt),
        )

        failure: RemoteError | None = None
        try:
            response = await self._client.post(
                self.endpoint,
                headers={API_KEY_HEADER: self._api_key.get_secret_value()},
                files={name: (None, value) for name, value in form.items()},
            )
        except asyncio.CancelledError as e:
            task = asyncio.current_task()
            if task is not None:
                task.uncancel()
            logger.warning("Design request cancelled before a response arrived")
            raise RemoteError(
                "Design request was cancelled", RemoteErrorKind.CANCELLED
            ) from e
        except httpx.TimeoutException as e:
            failure = self._transport_error(f"Design request timed out: {e}", e)
        except httpx.RequestError as e:
            failure = self._transport_error(f"Design request failed: {e}", e)

        # Raised outside the except blocks so no implicit __context__ is attached.
        if failure is not None:
            raise failure

        if not response.is_success:
            body = self._scrub(response.text[:_MAX_ERROR_BODY])
            logger.warning("Magic Patterns returned HTTP %d", response.status_code)
            raise RemoteError(
                f"Magic Patterns returned HTTP {response.status_code}",
                RemoteErrorKind.STATUS,
                status_code=response.status_code,
                body=body,
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error("Magic Patterns response is not valid JSON")
            raise ProtocolError(
                f"Response body is not valid JSON: {e}",
                status_code=response.status_code,
            ) from e

        if not isinstance(payload, dict):
            logger.error("Magic Patterns response is not a JSON object")
            raise ProtocolError(
                f"Response body is a JSON {type(payload).__name__}, not an object",
                status_code=response.status_code,
            )

        try:
            design = validate_result(payload)
        except ValidationError as e:
            logger.error("Magic Patterns response broke the design contract: %s", e)
            raise ProtocolError(
                f"Response does not match the design contract: {e}",
                status_code=response.status_code,
            ) from e

        logger.info(
            "Design %s created (%d source files, %d compiled files)",
            design.id,
            len(design.source_files),
            len(design.compiled_files),
        )
        return design

    def _scrub(self, text: str) -> str:
        """Remove the API key from text destined for errors or logs."""
        return text.replace(self._api_key.get_secret_value(), _REDACTED)

    def _transport_error(self, message: str, cause: httpx.HTTPError) -> RemoteError:
        scrubbed = self._scrub(message)
        logger.warning(scrubbed)
        error = RemoteError(scrubbed, RemoteErrorKind.TRANSPORT)
        # A cause that quoted the key must not travel with the error.
        if scrubbed == message:
            error.__cause__ = cause
        else:
            error.__cause__ = None
            error.__context__ = None
            error.__suppress_context__ = True
        return error


__all__ = [
    "API_KEY_HEADER",
    "DEFAULT_ENDPOINT",
    "DEFAULT_TIMEOUT",
    "NO_IMAGES",
    "DesignError",
    "MagicPatternsClient",
    "ProtocolError",
    "RemoteError",
    "RemoteErrorKind",
    "build_form",
]
