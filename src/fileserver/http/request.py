"""
=============================================================================
REQUEST LINE PARSING
=============================================================================

The server reads exactly ONE line from each client: the request line.
Headers and body (if the client sends any) are never parsed.

=============================================================================
REQUEST LINE FORMAT
=============================================================================

    METHOD SP REQUEST-PATH SP HTTP-VERSION CRLF

    Example: "GET /css/style.css HTTP/1.1"
              ─┬─ ───────┬────── ────┬───
               │         │           │
             Method     Path      Version (ignored)

The line is split on single spaces. The path is kept RAW: no URL decoding,
no query string splitting. "/a%20b.html" asks for a file literally named
"a%20b.html".

=============================================================================
WHAT COUNTS AS MALFORMED?
=============================================================================

    ""                          → HTTPParseError (nothing to parse)
    "GET"                       → HTTPParseError (no path token)
    "GET HTTP/1.1"              → HTTPParseError (second token is not a path)
    "GET  /x HTTP/1.1"          → HTTPParseError (double space, empty token)
    "POST /form HTTP/1.1"       → parses fine, the handler ignores it
    "GET /index.html HTTP/1.1"  → RequestLine("GET", "/index.html", "HTTP/1.1")

Malformed lines never crash a worker: the caller catches HTTPParseError
and drops the connection without a response.

=============================================================================
"""

from dataclasses import dataclass
from typing import Optional


class HTTPParseError(ValueError):
    """
    Raised when the request line cannot be parsed.

    Carries the offending line so the caller can log it.
    """

    def __init__(self, message: str, line: Optional[str] = None):
        super().__init__(message)
        self.line = line


@dataclass(frozen=True)
class RequestLine:
    """
    The parsed first line of a request.

    Attributes:
        method: Request method, e.g. "GET".
        path: Raw resource path, always starting with "/".
        version: Protocol version token, possibly empty. Not interpreted.
    """

    method: str
    path: str
    version: str = ""

    @property
    def is_get(self) -> bool:
        """Only GET requests are served."""
        return self.method == "GET"


def parse_request_line(line: Optional[str]) -> RequestLine:
    """
    Parse a request line into its components.

    Args:
        line: The request line, with or without its trailing CRLF.

    Returns:
        The parsed RequestLine. Non-GET methods are returned as-is.

    Raises:
        HTTPParseError: If the line is empty or a GET line has no path.
    """
    line = (line or "").rstrip("\r\n")
    if not line:
        raise HTTPParseError("Empty request line", line)

    parts = line.split(" ")
    method = parts[0]

    if method != "GET":
        # Not our business to validate the rest of a request we won't serve
        return RequestLine(method=method, path=parts[1] if len(parts) > 1 else "")

    if len(parts) < 2 or not parts[1].startswith("/"):
        raise HTTPParseError(f"Missing resource path in request line: {line!r}", line)

    version = parts[2] if len(parts) > 2 else ""
    return RequestLine(method=method, path=parts[1], version=version)


def resource_name(path: str, index_file: str = "index.html") -> str:
    """
    Map a request path to a file name under the document root.

        "/"               → "index.html"
        "/index.html"     → "index.html"
        "/css/style.css"  → "css/style.css"

    Only ONE leading slash is stripped.

    Args:
        path: Raw request path starting with "/".
        index_file: File served for the root path.

    Returns:
        Relative file name.
    """
    if path == "/":
        return index_file
    return path[1:]
