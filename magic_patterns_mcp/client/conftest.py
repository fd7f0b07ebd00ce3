"""Client test fixtures."""

from __future__ import annotations

import pytest

from .stub import StubDesignTransport

TEST_API_KEY = "mp-test-key-5f0e1d"


@pytest.fixture
def api_key() -> str:
    """A recognizable fake API key."""
    return TEST_API_KEY


@pytest.fixture
def stub_transport() -> StubDesignTransport:
    """Echoing stub transport."""
    return StubDesignTransport()
