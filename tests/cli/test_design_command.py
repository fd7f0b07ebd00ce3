"""Tests for the CLI commands (subprocess `python .` runs and in-process)."""

import importlib.util
import json
import logging
import subprocess
import sys

import pytest


def _run(project_root, env, *args):
    return subprocess.run(
        [sys.executable, ".", *args],
        capture_output=True,
        text=True,
        cwd=project_root,
        env=env,
        timeout=60,
    )


@pytest.mark.integration
def test_design_offline_prints_urls(project_root, offline_env):
    """design --offline works without an API key."""
    result = _run(project_root, offline_env, "design", "login form", "--offline")
    assert result.returncode == 0, result.stderr
    assert "Preview:  https://stub.magicpatterns.local/preview/stub-0001" in result.stdout
    assert "App.tsx [javascript]" in result.stdout


@pytest.mark.integration
def test_design_offline_json(project_root, offline_env):
    result = _run(
        project_root,
        offline_env,
        "design",
        "kanban board",
        "--mode",
        "fast",
        "--preset",
        "mantine-inline",
        "--offline",
        "--json",
    )
    assert result.returncode == 0, result.stderr
    design = json.loads(result.stdout)
    assert design["chatMessages"][0]["content"] == "kanban board"
    assert design["chatMessages"][1]["content"] == "Generated with preset mantine-inline."


@pytest.mark.integration
def test_design_without_key_fails(project_root, offline_env):
    result = _run(project_root, offline_env, "design", "login form")
    assert result.returncode == 1
    assert "MAGIC_PATTERNS_API_KEY is not set" in result.stderr


@pytest.mark.integration
def test_design_rejects_blank_prompt(project_root, offline_env):
    result = _run(project_root, offline_env, "design", "   ", "--offline")
    assert result.returncode == 1
    assert "Invalid arguments" in result.stderr


@pytest.mark.integration
def test_env_masks_api_key(project_root, offline_env):
    env = {**offline_env, "MAGIC_PATTERNS_API_KEY": "mp-cli-secret-31"}
    result = _run(project_root, env, "env")
    assert result.returncode == 0
    assert "MAGIC_PATTERNS_API_KEY" in result.stdout
    assert "********" in result.stdout
    assert "mp-cli-secret-31" not in result.stdout


@pytest.mark.integration
def test_mcp_info(project_root, offline_env):
    result = _run(project_root, offline_env, "mcp", "info")
    assert result.returncode == 0
    assert "create_design" in result.stdout
    assert "destructive: False" in result.stdout


@pytest.mark.integration
def test_mcp_run_without_key_fails(project_root, offline_env):
    """A missing credential stops the server before it serves anything."""
    result = _run(project_root, offline_env, "mcp", "run")
    assert result.returncode == 1
    assert result.stdout == ""
    assert "MAGIC_PATTERNS_API_KEY" in result.stderr


# =============================================================================
# In-process CLI
# =============================================================================


@pytest.fixture
def cli(project_root):
    """The root `__main__.py` loaded as a regular module."""
    spec = importlib.util.spec_from_file_location(
        "magic_patterns_cli", project_root / "__main__.py"
    )
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.mark.unit
def test_cli_logging_redacts_api_key(cli, monkeypatch, caplog, capsys):
    """CLI commands register the configured key with the log redactor."""
    monkeypatch.setenv("MAGIC_PATTERNS_API_KEY", "mp-cli-secret-58")
    assert cli.main(["env"]) == 0

    logging.getLogger("magic_patterns_mcp.client").warning(
        "upstream echoed %s", "mp-cli-secret-58"
    )
    assert "mp-cli-secret-58" not in caplog.text
    assert "[REDACTED]" in caplog.text


@pytest.mark.unit
def test_no_secrets_without_key(cli, monkeypatch):
    monkeypatch.delenv("MAGIC_PATTERNS_API_KEY", raising=False)
    assert cli._log_secrets() == []
