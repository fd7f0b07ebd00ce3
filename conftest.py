"""Root pytest configuration and fixtures.

This module provides:
- Environment setup (loads .env)
- Shared design payload fixtures
- Global test configuration
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


# =============================================================================
# Configuration Constants
# =============================================================================

PROJECT_ROOT = Path(__file__).parent


# =============================================================================
# Pytest Hooks
# =============================================================================


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "unit: fast tests with no I/O")
    config.addinivalue_line("markers", "mcp: MCP protocol tests (in-memory)")
    config.addinivalue_line(
        "markers", "integration: end-to-end tests through the CLI or server"
    )


# =============================================================================
# Shared Fixtures
# =============================================================================


@pytest.fixture
def project_root() -> Path:
    """Repository root, the working directory for `python .` commands."""
    return PROJECT_ROOT


@pytest.fixture
def offline_env() -> dict[str, str]:
    """Process environment without a Magic Patterns API key."""
    env = dict(os.environ)
    env.pop("MAGIC_PATTERNS_API_KEY", None)
    return env
