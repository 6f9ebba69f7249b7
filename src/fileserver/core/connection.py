"""
=============================================================================
CONNECTION MANAGEMENT
=============================================================================

Wraps one accepted client socket for exactly one request/response exchange.

=============================================================================
ONE CONNECTION, ONE EXCHANGE
=============================================================================

There is no keep-alive. Every connection goes through the same short life:

    NEW ──────► READING ──────► WRITING ──────► CLOSING ──────► CLOSED
     │             │                               ▲
     │             │  (EOF, non-GET, malformed)    │
     └─────────────┴───────────────────────────────┘

The worker that accepted the connection owns it exclusively, and closes
it on EVERY exit path: after a response, after a dropped request, and
after an I/O error. Use it as a context manager:

    with conn:
        line = conn.read_line()
        ...
    # socket released here, no matter what

=============================================================================
READING ONE LINE FROM A BYTE STREAM
=============================================================================

TCP does not preserve message boundaries, so "the first line" may arrive
split over several recv() calls, or glued to the headers that follow:

    recv() → "GET /ind"
    recv() → "ex.html HTTP/1.1\r\nHost: localhost\r\n\r\n"

socket.makefile("rb") gives us a buffered reader whose readline() does the
accumulation for us. We pass a size limit so a client that never sends a
newline cannot make us buffer forever.

=============================================================================
"""

import logging
import socket
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import BinaryIO, Optional

from ..http.request import HTTPParseError


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Connection lifecycle states."""
    NEW = "new"              # Just accepted, haven't read anything yet
    READING = "reading"      # Reading the request line
    WRITING = "writing"      # Sending the response
    CLOSING = "closing"      # Shutdown sequence in progress
    CLOSED = "closed"        # Socket released


@dataclass
class Connection:
    """
    Represents a client connection.

    Attributes:
        socket: The client socket.
        address: Client's (ip, port) tuple.
        id: Unique connection identifier (for logging).
        state: Current connection state.
        created_at: Timestamp when connection was accepted.
    """

    # Required parameters
    socket: socket.socket
    address: tuple

    # Generated/default parameters
    id: str = field(default_factory=lambda: str(uuid.uuid4())[:8])
    state: ConnectionState = ConnectionState.NEW
    created_at: float = field(default_factory=time.time)

    # Configuration (passed from ServerConfig)
    timeout: Optional[float] = None   # None = block forever
    max_line_size: int = 8192         # Longest request line we accept

    logger: logging.Logger = field(default=logger, repr=False)

    _reader: Optional[BinaryIO] = field(default=None, repr=False)

    def __post_init__(self):
        """Configure the socket. Called automatically after __init__."""
        # Accepted sockets inherit nothing useful from the listener; make
        # the blocking behaviour explicit
        self.socket.settimeout(self.timeout)

    @property
    def client_ip(self) -> str:
        """Get the client IP address."""
        return self.address[0]

    @property
    def client_port(self) -> int:
        """Get the client port."""
        return self.address[1]

    @property
    def is_closed(self) -> bool:
        return self.state == ConnectionState.CLOSED

    # =========================================================================
    # READING
    # =========================================================================

    def read_line(self) -> Optional[str]:
        """
        Read the request line.

        Returns:
            The line without its CRLF/LF terminator, or None if the client
            closed the connection before sending anything.

        Raises:
            HTTPParseError: If no newline arrives within max_line_size bytes.
            OSError: If the socket fails (reset, timeout).
        """
        self.state = ConnectionState.READING

        if self._reader is None:
            self._reader = self.socket.makefile("rb")

        # +1 so a line of exactly max_line_size bytes plus "\n" still fits
        raw = self._reader.readline(self.max_line_size + 1)
        if not raw:
            return None

        if not raw.endswith(b"\n") and len(raw) > self.max_line_size:
            raise HTTPParseError(f"Request line exceeds {self.max_line_size} bytes")

        # ISO-8859-1 maps every byte to a character, so decoding never fails
        return raw.decode("iso-8859-1").rstrip("\r\n")

    # =========================================================================
    # WRITING
    # =========================================================================

    def output_stream(self) -> BinaryIO:
        """
        Get a buffered binary stream for writing the response.

        Closing the stream does NOT close the socket; close() does that.
        """
        self.state = ConnectionState.WRITING
        return self.socket.makefile("wb")

    # =========================================================================
    # CLOSING
    # =========================================================================

    def close(self):
        """
        Close the connection gracefully.

        1. shutdown(SHUT_WR): tell the client we're done (sends FIN)
        2. Drain whatever the client sent that we never read (its headers)
        3. close(): release the file descriptor

        Step 2 matters: closing a socket with unread data makes the kernel
        send RST instead of FIN, and the client may lose the tail of the
        response we just wrote.
        """
        if self.is_closed:
            return  # Already closed

        self.state = ConnectionState.CLOSING

        if self._reader is not None:
            try:
                self._reader.close()
            except OSError:
                pass

        try:
            self.socket.shutdown(socket.SHUT_WR)
        except OSError:
            pass  # Already disconnected, that's fine

        try:
            self.socket.settimeout(0.5)  # Quick timeout
            while self.socket.recv(1024):
                pass  # Discard any remaining data
        except OSError:
            pass  # socket.timeout is an OSError too; we're closing anyway

        try:
            self.socket.close()
        except OSError:
            pass

        self.state = ConnectionState.CLOSED
        self.logger.debug(f"[{self.id}] Connection closed after {time.time() - self.created_at:.3f}s")

    # =========================================================================
    # CONTEXT MANAGER
    # =========================================================================

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit - ensure connection is closed."""
        self.close()
        return False  # Don't suppress exceptions
