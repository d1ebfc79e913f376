"""Entry point for python -m mux_controller.

Supports both TUI mode (default) and CLI subcommands for headless operation.

Usage:
    # Launch TUI
    python -m mux_controller

    # CLI commands (headless)
    python -m mux_controller list
    python -m mux_controller create --cwd ~/src/app "npm run dev"
    python -m mux_controller send SESSION_ID "make test"
    python -m mux_controller view SESSION_ID --no-color
    python -m mux_controller status SESSION_ID
    python -m mux_controller close SESSION_ID
    python -m mux_controller attach SESSION_ID
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from mux_controller.models import AttachBackendType


def _setup_logging(args: argparse.Namespace) -> None:
    """Configure logging based on command-line arguments."""
    from mux_controller.logging_config import enable_debug_mode, setup_logging

    if args.debug:
        enable_debug_mode(log_to_file=not args.no_log_file)
    else:
        setup_logging(
            level=args.log_level,
            log_to_console=False,
            log_to_file=not args.no_log_file,
        )


def _print_json(data: Any) -> None:
    """Print data as JSON to stdout."""
    print(json.dumps(data, indent=2, default=str))


def _print_table(rows: list[dict[str, Any]], columns: list[str]) -> None:
    """Print data as a simple table."""
    if not rows:
        print("No results.")
        return

    widths = {col: len(col) for col in columns}
    for row in rows:
        for col in columns:
            widths[col] = max(widths[col], len(str(row.get(col, ""))))

    header = "  ".join(col.ljust(widths[col]) for col in columns)
    print(header)
    print("-" * len(header))

    for row in rows:
        print("  ".join(str(row.get(col, "")).ljust(widths[col]) for col in columns))


def _settings_overrides(args: argparse.Namespace) -> dict[str, Any]:
    """Collect AppSettings overrides from global flags."""
    backend = getattr(args, "backend", None)
    return {
        "executable": getattr(args, "executable", None),
        "attach_backend": AttachBackendType(backend) if backend else None,
    }


async def _init_api(args: argparse.Namespace):  # noqa: ANN202
    """Create and initialize the API, or print the error and return None."""
    from mux_controller.api import SessionControllerAPI

    api = SessionControllerAPI()
    result = await api.initialize(**_settings_overrides(args))
    if not result.success:
        print(f"Error: {result.error}", file=sys.stderr)
        return None
    return api


def _report_failure(error: str | None) -> int:
    print(f"Error: {error}", file=sys.stderr)
    return 1


# =============================================================================
# CLI Command Handlers
# =============================================================================


async def cmd_list(args: argparse.Namespace) -> int:
    """Handle list command."""
    api = await _init_api(args)
    if api is None:
        return 1

    result = await api.list_sessions()
    if not result.success:
        return _report_failure(result.error)

    if args.json:
        _print_json([
            {"id": s.id, "command": s.command, "cwd": s.cwd}
            for s in result.sessions
        ])
        return 0

    if not result.sessions:
        print("No sessions.")
        return 0

    _print_table(
        [
            {"ID": s.id, "Command": s.command, "Directory": s.cwd or "-"}
            for s in result.sessions
        ],
        ["ID", "Command", "Directory"],
    )
    return 0


async def cmd_create(args: argparse.Namespace) -> int:
    """Handle create command."""
    api = await _init_api(args)
    if api is None:
        return 1

    result = await api.create_session(args.session_command, args.cwd)
    if not result.success:
        return _report_failure(result.error)

    if args.json:
        _print_json({"id": result.session_id})
    else:
        print(result.session_id)
    return 0


async def cmd_send(args: argparse.Namespace) -> int:
    """Handle send command."""
    api = await _init_api(args)
    if api is None:
        return 1

    result = await api.send_keys(args.session, args.text, no_newline=args.no_newline)
    if not result.success:
        return _report_failure(result.error)
    return 0


async def cmd_view(args: argparse.Namespace) -> int:
    """Handle view command."""
    api = await _init_api(args)
    if api is None:
        return 1

    result = await api.view_session(args.session, no_color=args.no_color or None)
    if not result.success:
        return _report_failure(result.error)

    sys.stdout.write(result.output or "")
    return 0


async def cmd_status(args: argparse.Namespace) -> int:
    """Handle status command."""
    api = await _init_api(args)
    if api is None:
        return 1

    result = await api.session_status(args.session)
    if not result.success:
        return _report_failure(result.error)

    print(result.output)
    return 0


async def cmd_close(args: argparse.Namespace) -> int:
    """Handle close command."""
    api = await _init_api(args)
    if api is None:
        return 1

    result = await api.close_session(args.session)
    if not result.success:
        return _report_failure(result.error)

    print(f"Closed {result.session_id}")
    return 0


async def cmd_attach(args: argparse.Namespace) -> int:
    """Handle attach command."""
    api = await _init_api(args)
    if api is None:
        return 1

    result = await api.attach_session(args.session)
    if not result.success:
        return _report_failure(result.error)

    print(f"Attached {result.session_id} in {result.output}")
    return 0


def _run_async(coro: Any) -> int:
    """Run an async coroutine and return exit code."""
    return asyncio.run(coro)


# =============================================================================
# Argument Parser Setup
# =============================================================================


def _add_session_arg(parser: argparse.ArgumentParser) -> None:
    """Add the positional session reference."""
    parser.add_argument("session", help="Session ID (as shown by 'list')")


def _create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="mux-controller",
        description="Mux Controller - drive terminal sessions of a multiplexer daemon",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Launch the TUI application
  mux-controller

  # List sessions
  mux-controller list --json

  # Run a command in a new session and watch it
  mux-controller create --cwd ~/src/app "npm run dev"
  mux-controller view SESSION_ID

  # Type into a session, then close it
  mux-controller send SESSION_ID "rs"
  mux-controller close SESSION_ID
""",
    )

    # Global arguments
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to console",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set log level (default: INFO)",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Disable logging to file",
    )
    parser.add_argument(
        "--executable",
        help="Session daemon executable (overrides config)",
    )
    parser.add_argument(
        "--backend",
        choices=[backend.value for backend in AttachBackendType],
        help="Attach backend (overrides config)",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    list_parser = subparsers.add_parser("list", help="List sessions")
    list_parser.add_argument("--json", action="store_true", help="Output in JSON format")

    create_parser = subparsers.add_parser("create", help="Create a session")
    create_parser.add_argument(
        "session_command",
        metavar="COMMAND",
        help="Shell command the session runs",
    )
    create_parser.add_argument("--cwd", help="Working directory for the session")
    create_parser.add_argument("--json", action="store_true", help="Output in JSON format")

    send_parser = subparsers.add_parser("send", help="Send text to a session")
    _add_session_arg(send_parser)
    send_parser.add_argument("text", help="Text to send")
    send_parser.add_argument(
        "--no-newline",
        action="store_true",
        help="Do not press Enter after the text",
    )

    view_parser = subparsers.add_parser("view", help="Print a session's terminal contents")
    _add_session_arg(view_parser)
    view_parser.add_argument(
        "--no-color",
        action="store_true",
        help="Strip ANSI colour sequences",
    )

    status_parser = subparsers.add_parser("status", help="Print a session's status line")
    _add_session_arg(status_parser)

    close_parser = subparsers.add_parser("close", help="Close a session")
    _add_session_arg(close_parser)

    attach_parser = subparsers.add_parser("attach", help="Attach to a session's terminal")
    _add_session_arg(attach_parser)

    return parser


COMMANDS = {
    "list": cmd_list,
    "create": cmd_create,
    "send": cmd_send,
    "view": cmd_view,
    "status": cmd_status,
    "close": cmd_close,
    "attach": cmd_attach,
}


def main() -> int:
    """Main entry point for Mux Controller."""
    parser = _create_parser()
    args = parser.parse_args()

    _setup_logging(args)

    handler = COMMANDS.get(args.command)
    if handler is not None:
        return _run_async(handler(args))

    # No subcommand - launch TUI
    from mux_controller.app import MuxControllerApp

    app = MuxControllerApp(overrides=_settings_overrides(args))
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
