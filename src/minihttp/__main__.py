"""
=============================================================================
CLI ENTRY POINT
=============================================================================

    # Defaults: 0.0.0.0:4221, no file routes
    python -m minihttp

    # Serve and store files under /tmp/data
    python -m minihttp --directory /tmp/data/

    # Also available as a console script
    minihttp --directory /tmp/data/ --log-level DEBUG

Exit status is 1 when the port cannot be bound or accept() fails, 2 for
invalid settings, and 0 after a clean SIGINT/SIGTERM shutdown.

=============================================================================
"""

import argparse
import dataclasses
import logging
import sys

from . import __version__
from .config import ServerConfig, LOG_FORMATS
from .core import ServerError
from .server import create_app


logger = logging.getLogger("minihttp")


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """Argument parser whose defaults come from the environment-derived config."""
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Minimal HTTP/1.1 server: echo, user-agent and file routes",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m minihttp                           # Listen on 0.0.0.0:4221
  python -m minihttp --directory /tmp/data/    # Enable /files/{name}
  python -m minihttp --port 8080 -l DEBUG      # Other port, verbose logs
        """
    )

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})"
    )

    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )

    parser.add_argument(
        "--buffer-size",
        type=int,
        default=defaults.buffer_size,
        help=f"Bytes read per connection (default: {defaults.buffer_size})"
    )

    parser.add_argument(
        "--backlog",
        type=int,
        default=defaults.backlog,
        help=f"listen() backlog (default: {defaults.backlog})"
    )

    parser.add_argument(
        "--timeout", "-t",
        type=float,
        default=defaults.timeout,
        help="Per-connection socket timeout in seconds (default: none)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--directory", "-d",
        default=defaults.directory,
        help="Directory served by /files/{name}"
    )

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level})"
    )

    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=defaults.log_format,
        help=f"Access log format (default: {defaults.log_format})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttp {__version__}"
    )

    return parser


def load_config(argv=None) -> ServerConfig:
    """
    Environment configuration with command-line arguments applied on top.

    Raises:
        ValueError: If an environment variable does not parse.
    """
    defaults = ServerConfig.from_env()
    args = build_parser(defaults).parse_args(argv)

    return dataclasses.replace(
        defaults,
        host=args.host,
        port=args.port,
        buffer_size=args.buffer_size,
        backlog=args.backlog,
        timeout=args.timeout,
        directory=args.directory,
        log_level=args.log_level,
        log_format=args.log_format,
    )


def main(argv=None) -> int:
    """
    Parse arguments, build the server and run it until shutdown.

    Returns:
        Process exit status.
    """
    try:
        config = load_config(argv)
    except ValueError as e:
        print(f"Invalid environment configuration: {e}", file=sys.stderr)
        return 2

    try:
        server = create_app(config)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    try:
        server.run()
    except ServerError as e:
        logger.error(f"Fatal: {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
