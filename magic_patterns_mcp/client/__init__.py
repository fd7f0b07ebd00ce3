"""Request adapter for the Magic Patterns design API.

Provides an async client that sends one authenticated form POST per design
and validates the JSON reply against the tool contract, plus an offline stub
transport for tests and dry runs.
"""

from .lib import (
    API_KEY_HEADER,
    DEFAULT_ENDPOINT,
    DEFAULT_TIMEOUT,
    NO_IMAGES,
    DesignError,
    MagicPatternsClient,
    ProtocolError,
    RemoteError,
    RemoteErrorKind,
    build_form,
)
from .stub import StubDesignTransport, parse_form, sample_design

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
    # Offline stub
    "StubDesignTransport",
    "parse_form",
    "sample_design",
]
