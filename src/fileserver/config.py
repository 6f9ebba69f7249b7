"""
=============================================================================
SERVER CONFIGURATION
=============================================================================

Centralized configuration for the file server.

The defaults ARE the classic behaviour: port 8080 on every interface,
files from ./resources, 1 KB streaming chunks, no socket timeouts.
Nothing needs to be configured to get that.

=============================================================================
CONFIGURATION SOURCES
=============================================================================

    ┌─────────────────────────────────────────────────────────────────────┐
    │                    CONFIGURATION HIERARCHY                          │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │   Priority (highest to lowest):                                     │
    │                                                                      │
    │   1. Command-line arguments                                         │
    │      └── python -m fileserver --port 3000                          │
    │                                                                      │
    │   2. Environment variables                                          │
    │      └── FILESERVER_PORT=3000 python -m fileserver                 │
    │                                                                      │
    │   3. Default values (in this dataclass)                            │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional


@dataclass
class ServerConfig:
    """
    Configuration for the file server.

    =========================================================================
    CONFIGURATION GROUPS
    =========================================================================

    NETWORK SETTINGS
    - host, port, backlog, timeout, poll_interval

    FILES
    - document_root, index_file, not_found_page, chunk_size

    PROTOCOL
    - max_request_line

    LOGGING
    - log_level

    =========================================================================
    """

    # ─────────────────────────────────────────────────────────────────────
    # NETWORK SETTINGS
    # ─────────────────────────────────────────────────────────────────────

    host: str = "0.0.0.0"
    """
    The IP address to bind to.
    - "0.0.0.0" - All network interfaces (default)
    - "127.0.0.1" - Localhost only
    """

    port: int = 8080
    """
    The port number to listen on.
    0 lets the OS pick a free port (handy in tests).
    """

    backlog: int = 50
    """
    Maximum number of connections queued by the OS before accept().
    """

    timeout: Optional[float] = None
    """
    Timeout in seconds for each blocking call on a client socket.
    None = block forever. A silent client then holds its worker
    thread and file descriptor until it goes away.
    """

    poll_interval: float = 0.5
    """
    How often the accept loop wakes up to notice shutdown().
    Has no visible effect on clients.
    """

    # ─────────────────────────────────────────────────────────────────────
    # FILES
    # ─────────────────────────────────────────────────────────────────────

    document_root: str = "resources"
    """
    Directory containing the servable files.
    Relative paths are relative to the working directory.
    """

    index_file: str = "index.html"
    """File served for a request to "/"."""

    not_found_page: str = "404.html"
    """
    Optional custom body for 404 responses, looked up in document_root.
    When absent a built-in HTML snippet is sent instead.
    """

    chunk_size: int = 1024
    """Bytes read from a file and written to the socket per iteration."""

    # ─────────────────────────────────────────────────────────────────────
    # PROTOCOL
    # ─────────────────────────────────────────────────────────────────────

    max_request_line: int = 8192
    """
    Longest request line accepted, in bytes.
    Longer lines are dropped like any malformed request.
    """

    # ─────────────────────────────────────────────────────────────────────
    # LOGGING
    # ─────────────────────────────────────────────────────────────────────

    log_level: str = "INFO"
    """Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)."""

    @property
    def document_path(self) -> Path:
        """The document root as a Path."""
        return Path(self.document_root)

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """
        Create configuration from environment variables.

        =====================================================================
        ENVIRONMENT VARIABLES
        =====================================================================

        FILESERVER_HOST        Server host (default: 0.0.0.0)
        FILESERVER_PORT        Server port (default: 8080)
        FILESERVER_ROOT        Document root (default: resources)
        FILESERVER_CHUNK_SIZE  Streaming chunk size (default: 1024)
        FILESERVER_TIMEOUT     Client socket timeout, unset = none
        FILESERVER_LOG_LEVEL   Logging level (default: INFO)

        =====================================================================
        """
        timeout = os.getenv("FILESERVER_TIMEOUT")
        return cls(
            host=os.getenv("FILESERVER_HOST", "0.0.0.0"),
            port=int(os.getenv("FILESERVER_PORT", "8080")),
            document_root=os.getenv("FILESERVER_ROOT", "resources"),
            chunk_size=int(os.getenv("FILESERVER_CHUNK_SIZE", "1024")),
            timeout=float(timeout) if timeout else None,
            log_level=os.getenv("FILESERVER_LOG_LEVEL", "INFO"),
        )

    def validate(self) -> None:
        """
        Validate configuration values.

        Called when the server is constructed, so a bad value fails at
        startup instead of on the first request.

        Raises:
            ValueError: On the first invalid value found.
        """
        if not 0 <= self.port < 65536:
            raise ValueError(f"Invalid port: {self.port}. Must be 0-65535.")

        if self.backlog < 1:
            raise ValueError("backlog must be >= 1")

        if self.chunk_size < 1:
            raise ValueError("chunk_size must be >= 1")

        if self.max_request_line < 16:
            raise ValueError("max_request_line must be >= 16")

        if self.timeout is not None and self.timeout <= 0:
            raise ValueError("timeout must be > 0")

        if self.poll_interval <= 0:
            raise ValueError("poll_interval must be > 0")

        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError(f"Unknown log level: {self.log_level}")

        if not self.index_file or not self.not_found_page:
            raise ValueError("index_file and not_found_page must be set")
