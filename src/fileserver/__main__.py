"""
=============================================================================
FILE SERVER CLI ENTRY POINT
=============================================================================

    # Serve ./resources on 0.0.0.0:8080
    python -m fileserver

    # Custom port and directory
    python -m fileserver --port 3000 --root ./public

    # Verbose
    python -m fileserver --log-level DEBUG

Defaults come from the environment (FILESERVER_*), see config.py.
The server runs until the process is interrupted or killed.

=============================================================================
"""

import argparse
import sys

from . import __version__
from .config import ServerConfig
from .server import FileServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    """Build the argument parser, using `defaults` for every option."""
    parser = argparse.ArgumentParser(
        prog="fileserver",
        description="Minimal concurrent HTTP file server",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m fileserver                      # ./resources on port 8080
  python -m fileserver --port 3000          # Custom port
  python -m fileserver --root ./public      # Custom document root
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
        "--timeout",
        type=float,
        default=defaults.timeout,
        help="Seconds a client socket may block before the worker gives up (default: never)"
    )

    # ─────────────────────────────────────────────────────────────────────
    # FILE ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--root", "-r",
        default=defaults.document_root,
        help=f"Directory to serve files from (default: {defaults.document_root})"
    )

    parser.add_argument(
        "--chunk-size",
        type=int,
        default=defaults.chunk_size,
        help=f"Streaming buffer size in bytes (default: {defaults.chunk_size})"
    )

    # ─────────────────────────────────────────────────────────────────────
    # META ARGUMENTS
    # ─────────────────────────────────────────────────────────────────────

    parser.add_argument(
        "--log-level", "-l",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level.upper()})"
    )

    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"fileserver {__version__}"
    )

    return parser


def main(argv=None) -> int:
    """
    Main CLI entry point.

    Returns:
        Process exit status: 1 if the server could not start.
    """
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid environment: {e}", file=sys.stderr)
        return 1

    args = build_parser(defaults).parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        timeout=args.timeout,
        document_root=args.root,
        chunk_size=args.chunk_size,
        log_level=args.log_level,
    )

    try:
        server = FileServer(config)
        server.run()
    except (OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
