"""
=============================================================================
HTTP RESPONSE WRITING
=============================================================================

Writes a complete, minimal HTTP response to an output stream and then
closes it.

=============================================================================
RESPONSE FORMAT
=============================================================================

Every response has the same shape: a status line, exactly three headers
in a fixed order, a blank line, and the body.

    HTTP/1.1 200 OK\r\n                 ← Status line
    Content-Type: text/css\r\n          ← From the Content-Type resolver
    Content-Length: 1234\r\n            ← EXACT number of body bytes
    Connection: close\r\n               ← We never keep connections alive
    \r\n                                ← Empty line = end of headers
    <1234 bytes of body>

No Date, no Server, nothing else.

=============================================================================
STREAMING, NOT BUFFERING
=============================================================================

File bodies are copied in fixed-size chunks (1024 bytes by default):

    ┌──────────┐   read(1024)   ┌────────┐   write(chunk)   ┌──────────┐
    │   File   │ ─────────────► │ chunk  │ ───────────────► │  Socket  │
    └──────────┘                └────────┘                  └──────────┘
          ▲                                                       │
          └──────────── repeat until Content-Length sent ─────────┘

A 2 GB file costs 1 KB of memory, not 2 GB.

=============================================================================
THE CONTENT-LENGTH CONTRACT
=============================================================================

The client trusts Content-Length to know where the body ends. If we
announce 1000 bytes and send 900, the client hangs waiting. If we send
1100, the extra bytes are garbage.

So the size is taken from the OPEN file handle (fstat) and the copy loop
stops at exactly that many bytes. If the file shrinks underneath us, we
raise IncompleteBodyError rather than lie.

=============================================================================
"""

import logging
import os
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .status_codes import HTTPStatus


DEFAULT_CHUNK_SIZE = 1024

# Sent when there is no custom 404.html in the document root
NOT_FOUND_BODY = (
    "<html><body><h1>404 Not Found</h1>"
    "<p>El recurso solicitado no existe.</p></body></html>"
)


class IncompleteBodyError(OSError):
    """Raised when a file ends before Content-Length bytes were sent."""

    def __init__(self, expected: int, sent: int):
        super().__init__(f"Body ended after {sent} of {expected} bytes")
        self.expected = expected
        self.sent = sent


def format_head(status: HTTPStatus, content_type: str, content_length: int) -> bytes:
    """
    Serialize the status line and headers, including the blank line.

    Args:
        status: Response status.
        content_type: Value of the Content-Type header.
        content_length: Value of the Content-Length header.

    Returns:
        Header bytes ready to be written before the body.
    """
    lines = [
        f"HTTP/1.1 {int(status)} {status.phrase}",
        f"Content-Type: {content_type}",
        f"Content-Length: {content_length}",
        "Connection: close",
        "",
        "",
    ]
    return "\r\n".join(lines).encode("latin-1")


class ResponseWriter:
    """
    Writes exactly one response to an output stream.

    The writer owns the stream: after send_file() or send_body() it is
    flushed and closed, whatever happened.

    Usage:
        writer = ResponseWriter(conn.output_stream())
        writer.send_file(HTTPStatus.OK, "text/html", Path("resources/index.html"))
    """

    def __init__(
        self,
        stream: BinaryIO,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        logger: Optional[logging.Logger] = None,
    ):
        """
        Args:
            stream: Writable binary stream, usually socket.makefile("wb").
            chunk_size: Bytes copied per read/write while streaming files.
            logger: Logger for diagnostics. Defaults to this module's logger.
        """
        self.stream = stream
        self.chunk_size = chunk_size
        self.logger = logger or logging.getLogger(__name__)
        self.bytes_sent = 0

    def send_file(
        self,
        status: HTTPStatus,
        content_type: str,
        path: Union[str, Path],
    ) -> int:
        """
        Send a response whose body is the content of a file.

        Args:
            status: Response status.
            content_type: Value of the Content-Type header.
            path: File to stream.

        Returns:
            Number of body bytes written.

        Raises:
            OSError: If the file cannot be opened. Nothing has been
                     written yet and the stream is still open, so the
                     caller may send another response instead.
            OSError: If reading fails or the client goes away mid-body.
            IncompleteBodyError: If the file shrank while being sent.
        """
        source = open(path, "rb")
        try:
            with source:
                # Size of what we actually opened, not of what the path
                # pointed to a moment ago
                length = os.fstat(source.fileno()).st_size
                self.stream.write(format_head(status, content_type, length))
                self._copy(source, length)
            self.logger.debug(f"Streamed {self.bytes_sent} bytes from {path}")
        finally:
            self.close()
        return self.bytes_sent

    def send_body(self, status: HTTPStatus, content_type: str, body: Union[str, bytes]) -> int:
        """
        Send a response with an in-memory body.

        Strings are encoded as UTF-8 and Content-Length counts the
        encoded BYTES, not characters.

        Returns:
            Number of body bytes written.
        """
        if isinstance(body, str):
            body = body.encode("utf-8")
        try:
            self.stream.write(format_head(status, content_type, len(body)))
            self.stream.write(body)
            self.bytes_sent = len(body)
        finally:
            self.close()
        return self.bytes_sent

    def _copy(self, source: BinaryIO, length: int):
        """Copy exactly `length` bytes from source to the stream."""
        remaining = length
        while remaining > 0:
            chunk = source.read(min(self.chunk_size, remaining))
            if not chunk:
                raise IncompleteBodyError(length, self.bytes_sent)
            self.stream.write(chunk)
            self.bytes_sent += len(chunk)
            remaining -= len(chunk)

    def close(self):
        """Flush and close the output stream. Safe to call twice."""
        if self.stream.closed:
            return
        try:
            self.stream.flush()
        finally:
            self.stream.close()
