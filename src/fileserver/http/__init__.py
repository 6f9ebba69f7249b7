"""
=============================================================================
HTTP PROTOCOL COMPONENTS
=============================================================================

The (very small) slice of HTTP/1.1 this server speaks:

    request.py       Parse the request line: "GET /path HTTP/1.1"
    response.py      Write status line, three headers and a streamed body
    status_codes.py  200 and 404, with reason phrases
    mime_types.py    File name → Content-Type

=============================================================================
"""

from .request import HTTPParseError, RequestLine, parse_request_line, resource_name
from .response import (
    DEFAULT_CHUNK_SIZE,
    NOT_FOUND_BODY,
    IncompleteBodyError,
    ResponseWriter,
    format_head,
)
from .status_codes import HTTPStatus
from .mime_types import DEFAULT_CONTENT_TYPE, get_content_type

__all__ = [
    # Request
    "HTTPParseError",
    "RequestLine",
    "parse_request_line",
    "resource_name",
    # Response
    "DEFAULT_CHUNK_SIZE",
    "NOT_FOUND_BODY",
    "IncompleteBodyError",
    "ResponseWriter",
    "format_head",
    # Status codes
    "HTTPStatus",
    # Content types
    "DEFAULT_CONTENT_TYPE",
    "get_content_type",
]
