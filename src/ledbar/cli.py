"""Command-line interface for ledbar.

``ledbar run`` starts the supervised status process the bar executes;
``ledbar send <command>`` is what the bar's scroll and click bindings
invoke to relay a user action to it.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from ledbar.domain.models import Command

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="ledbar",
        description="Status-bar companion for a remote LED controller",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: ~/.config/ledbar/ledbar.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging and mirror the log to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    run_parser = subparsers.add_parser("run", help="Run the status process")
    run_parser.add_argument(
        "--transport", choices=["websocket", "http"], default=None,
        help="Override the remote transport from the config",
    )

    send_parser = subparsers.add_parser("send", help="Send a command to the running status process")
    send_parser.add_argument("token", choices=Command.tokens(), help="Command to send")

    return parser.parse_args(argv)


async def _run(settings) -> int:
    from ledbar.supervisor.loop import Supervisor

    supervisor = Supervisor(settings)
    return await supervisor.run()


async def _send(settings, token: str) -> int:
    from ledbar.local.client import send_command

    try:
        await send_command(settings.local.socket_path, Command(token))
    except (OSError, asyncio.TimeoutError) as e:
        print(f"ledbar: cannot reach {settings.local.socket_path}: {e}", file=sys.stderr)
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the ledbar CLI."""
    args = parse_args(argv)

    if args.command is None:
        parse_args(["--help"])
        return 0

    from ledbar.config.settings import load_settings

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"
        settings.logging.console = True

    if args.command == "send":
        return asyncio.run(_send(settings, args.token))

    if args.transport:
        settings.remote.transport = args.transport

    try:
        return asyncio.run(_run(settings))
    except Exception as e:
        print(f"Uncaught supervisor error: {e!r}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
