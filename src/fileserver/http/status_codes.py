"""
=============================================================================
HTTP STATUS CODES
=============================================================================

The server only ever answers with two statuses:

    200 OK          The resolved resource exists and is a regular file
    404 Not Found   Anything else (missing file, directory, outside root)

Requests it does not understand get no response at all, so there is no
400/405/500 here.

=============================================================================
"""

from enum import IntEnum


class HTTPStatus(IntEnum):
    """
    HTTP status codes used by the server.

    This enum extends IntEnum, so status codes can be used as integers:

        >>> HTTPStatus.OK == 200
        True
        >>> HTTPStatus.NOT_FOUND.phrase
        'Not Found'
    """

    OK = 200            # Resource found, body follows
    NOT_FOUND = 404     # Resource doesn't exist

    @property
    def phrase(self) -> str:
        """
        Get the reason phrase for this status code.

            HTTP/1.1 404 Not Found
                     ─── ─────────
                      │      │
                      │      └── Reason phrase
                      └───────── Status code
        """
        return _STATUS_PHRASES[self]


_STATUS_PHRASES = {
    HTTPStatus.OK: "OK",
    HTTPStatus.NOT_FOUND: "Not Found",
}
