"""CLI entry point for magic-patterns-mcp.

This module acts as the central entry point for the project's CLI tools.
It delegates commands to the appropriate submodules or runs specific tasks.
"""

import argparse
import asyncio
import json
import subprocess
import sys

from dotenv import load_dotenv

from magic_patterns_mcp.client import (
    DesignError,
    MagicPatternsClient,
    StubDesignTransport,
)
from magic_patterns_mcp.config import (
    ConfigurationError,
    EnvVar,
    describe_environment,
    get_api_key,
    get_environment,
    get_request_timeout,
)
from magic_patterns_mcp.core import get_logger, setup_logging
from magic_patterns_mcp.schema import (
    KNOWN_PRESET_IDS,
    DesignMode,
    ValidationError,
    validate_parameters,
)

# Load environment variables from .env file
load_dotenv()

logger = get_logger("cli")


# =============================================================================
# Design Command
# =============================================================================


async def _create_design(args: argparse.Namespace) -> dict:
    params = validate_parameters(
        {"prompt": args.prompt, "mode": args.mode, "presetId": args.preset}
    )

    if args.offline:
        client = MagicPatternsClient("offline", transport=StubDesignTransport())
    else:
        client = MagicPatternsClient(get_api_key(), timeout=get_request_timeout())

    async with client:
        design = await client.create_design(params)
    return design.to_wire()


def cmd_design(args: argparse.Namespace) -> int:
    """Create one design and print where to find it."""
    try:
        design = asyncio.run(_create_design(args))
    except ConfigurationError as e:
        logger.error(f"{e}. Set it in the environment or .env, or use --offline")
        return 1
    except ValidationError as e:
        logger.error(f"Invalid arguments: {e}")
        return 1
    except DesignError as e:
        logger.error(f"Design failed: {e}")
        return 1

    if args.json:
        print(json.dumps(design, indent=2))
        return 0

    print(f"Design:   {design['id']}")
    print(f"Preview:  {design['previewUrl']}")
    print(f"Editor:   {design['editorUrl']}")
    print(f"\nSource files ({len(design['sourceFiles'])}):")
    for source in design["sourceFiles"]:
        print(f"  {source['name']} [{source['type']}]")
    return 0


def handle_design_command(argv: list[str]) -> int:
    """Handle the one-shot design command.

    Usage:
        python . design "pricing table with three tiers"
        python . design "settings page" --mode fast --preset shadcn-tailwind
        python . design "login form" --offline --json
    """
    parser = argparse.ArgumentParser(
        prog="python . design",
        description="Create a design with the Magic Patterns API",
    )
    parser.add_argument("prompt", help="What to design")
    parser.add_argument(
        "--mode",
        choices=[m.value for m in DesignMode],
        default=None,
        help="Generation mode (default: best)",
    )
    parser.add_argument(
        "--preset",
        default=None,
        help=f"Preset ID, e.g. {', '.join(KNOWN_PRESET_IDS)} (default: html-tailwind)",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        help="Use a local stub instead of calling the API",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the full design bundle as JSON",
    )

    args = parser.parse_args(argv)
    return cmd_design(args)


# =============================================================================
# Environment Command
# =============================================================================


def cmd_env(_argv: list[str]) -> int:
    """Show configuration variables and whether they are set."""
    print("Environment Configuration")
    print("=" * 40)
    for row in describe_environment():
        value = row["value"] if row["set"] else f"(default: {row['default']})"
        print(f"  {row['name']:<28} {value}")
        print(f"    {row['description']}")
    return 0


# =============================================================================
# Test Command
# =============================================================================


def cmd_test(extra_args: list[str]) -> int:
    """Run pytest with provided arguments and test tier options.

    Usage:
        python . test                # Run all tests
        python . test --unit         # Run only unit tests
        python . test --mcp          # Run MCP protocol tests
        python . test --integration  # Run end-to-end tests
        python . test -k "cancel"    # Run tests matching pattern
    """
    tier_markers = {
        "--unit": ["-m", "unit"],
        "--mcp": ["-m", "mcp"],
        "--integration": ["-m", "integration"],
        "--all": [],
    }

    pytest_args: list[str] = []
    remaining_args: list[str] = []

    for arg in extra_args:
        if arg in tier_markers:
            pytest_args.extend(tier_markers[arg])
        else:
            remaining_args.append(arg)

    cmd = [sys.executable, "-m", "pytest", *pytest_args, *remaining_args]
    logger.info(f"Running: {' '.join(cmd)}")

    try:
        return subprocess.call(cmd)
    except KeyboardInterrupt:
        return 130


# =============================================================================
# MCP Command
# =============================================================================


def handle_mcp_command(argv: list[str]) -> int:
    """Handle MCP server commands.

    Usage:
        python . mcp run              # Start in STDIO mode
        python . mcp run --offline    # Serve stub designs (no API key needed)
        python . mcp info             # Show server info
    """
    if not argv:
        print("MCP Server Commands")
        print("\nUsage: python . mcp {command} [options]")
        print("\nCommands:")
        print("  run                 Start server in STDIO mode")
        print("  info                Show server information")
        print("\nOptions for 'run':")
        print("  --offline           Answer with stub designs, no API calls")
        print("  --verbose, -v       Enable verbose logging")
        print("\nClaude Desktop Configuration:")
        print("  Add to claude_desktop_config.json:")
        print("  {")
        print('    "mcpServers": {')
        print('      "magic-patterns": {')
        print('        "command": "python",')
        print('        "args": [".", "mcp", "run"],')
        print('        "cwd": "/path/to/magic-patterns-mcp",')
        print('        "env": {"MAGIC_PATTERNS_API_KEY": "..."}')
        print("      }")
        print("    }")
        print("  }")
        return 1

    subcommand = argv[0]
    subargs = argv[1:]

    if subcommand == "run":
        from magic_patterns_mcp.mcp.server import main as run_main

        return run_main(subargs)

    elif subcommand == "info":
        from magic_patterns_mcp.mcp import get_server_info

        info = get_server_info()
        print("Magic Patterns MCP Server")
        print("=" * 40)
        print(f"Version:   {info['version']}")
        print(f"Transport: {info['transport']}")
        print("\nAvailable Tools:")
        for tool in info["tools"]:
            print(f"  - {tool['name']}: {tool['description']}")
            print(
                f"    read-only: {tool['read_only']}, "
                f"destructive: {tool['destructive']}"
            )
        return 0

    else:
        logger.error(f"Unknown mcp command: {subcommand}")
        return handle_mcp_command([])


def show_help() -> None:
    """Display CLI help message."""
    print("Usage: python . {command} [args]")
    print("\n=== MCP Server ===")
    print("  mcp        Run MCP server (STDIO mode) or show its info")
    print("\n=== Design ===")
    print("  design     Create a design from the command line")
    print("\n=== Configuration ===")
    print("  env        Show environment variables")
    print("\n=== Development ===")
    print("  test       Run the test suite")
    print("\nExamples:")
    print("  python . mcp run                    # Start STDIO server")
    print("  python . mcp info                   # Show server information")
    print("  python . design 'login form with email and password'")
    print("  python . design 'kanban board' --mode fast --offline")
    print("  python . env                        # Check configuration")
    print("  python . test --unit                # Run unit tests")


def _log_secrets() -> list[str]:
    """Values the log redactor must scrub (the API key, when configured)."""
    try:
        return [get_api_key().get_secret_value()]
    except ConfigurationError:
        return []


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI."""
    argv = sys.argv[1:] if argv is None else argv

    if not argv:
        show_help()
        return 1

    command = argv[0]
    rest_args = argv[1:]

    if command in ("-h", "--help"):
        show_help()
        return 0

    # The server configures its own logging (level, secret redaction)
    if command == "mcp":
        return handle_mcp_command(rest_args)

    commands = {
        "design": lambda: handle_design_command(rest_args),
        "env": lambda: cmd_env(rest_args),
        "test": lambda: cmd_test(rest_args),
    }

    if command in commands:
        setup_logging(
            get_environment(EnvVar.MAGIC_PATTERNS_LOG_LEVEL),
            secrets=_log_secrets(),
        )
        return commands[command]()

    logger.error(f"Unknown command: {command}")
    show_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
