"""Command-line interface for ledconsole.

Loads configuration, sets up logging, and runs an interactive (or
headless) console session against an AnimatedLEDStrip server.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    parser = argparse.ArgumentParser(
        prog="ledconsole",
        description="Interactive console for an AnimatedLEDStrip server",
    )
    parser.add_argument(
        "address",
        nargs="?",
        default=None,
        help="Server to connect to, as HOST or HOST:PORT (default: from config)",
    )
    parser.add_argument(
        "-c", "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file (default: config/ledconsole.yaml)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Headless mode: read commands from stdin, render nothing",
    )
    parser.add_argument(
        "--no-connect",
        action="store_true",
        help="Do not connect on startup",
    )
    return parser.parse_args(argv)


def build_session(settings, term=None):
    """Assemble a SessionController from settings."""
    from ledconsole.commands.router import CommandRouter
    from ledconsole.formatting.strip import StripMessageFormatter
    from ledconsole.input.readers import KeyReader, LineReader
    from ledconsole.session.controller import SessionController
    from ledconsole.session.renderer import Renderer
    from ledconsole.transport.tcp import TcpTransport

    console = settings.console
    transport = TcpTransport(connect_timeout=settings.server.connect_timeout)

    if console.quiet:
        renderer = None
        input_source = LineReader(sys.stdin)
    else:
        from blessed import Terminal

        term = term or Terminal()
        renderer = Renderer(term)
        input_source = KeyReader(term, poll_interval=console.poll_interval)

    return SessionController(
        transport=transport,
        formatter=StripMessageFormatter(),
        router=CommandRouter(),
        renderer=renderer,
        input_source=input_source,
        config=console,
    )


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the ledconsole CLI."""
    args = parse_args(argv)

    from ledconsole.config.settings import load_settings
    from ledconsole.domain.models import ServerAddress
    from ledconsole.utils.logging import setup_logging

    settings = load_settings(args.config)

    if args.verbose:
        settings.logging.level = "DEBUG"
    if args.quiet:
        settings.console.quiet = True
    if args.no_connect:
        settings.console.auto_connect = False

    setup_logging(settings.logging, console=settings.console.quiet)

    if args.address:
        try:
            address = ServerAddress.parse(args.address, default_port=settings.server.port)
        except ValueError as e:
            print(f"ledconsole: {e}", file=sys.stderr)
            sys.exit(2)
    else:
        address = ServerAddress(host=settings.server.host, port=settings.server.port)

    session = build_session(settings)
    logger.info("Starting console for %s", address)
    try:
        session.start(address)
    except KeyboardInterrupt:
        logger.info("Interrupted")


if __name__ == "__main__":
    main()
