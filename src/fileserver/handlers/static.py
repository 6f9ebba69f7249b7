"""
=============================================================================
STATIC FILE HANDLER
=============================================================================

Turns a parsed request line into a 200 (file body) or a 404.

=============================================================================
FROM REQUEST PATH TO FILE
=============================================================================

    GET /              → <document root>/index.html
    GET /index.html    → <document root>/index.html
    GET /css/site.css  → <document root>/css/site.css
    GET /missing.xyz   → 404
    GET /css           → 404 (a directory is not a file)

The path is used verbatim: no URL decoding, no query string handling.

=============================================================================
SECURITY: PATH TRAVERSAL
=============================================================================

Joining user input onto a directory is dangerous:

    GET /../../etc/passwd HTTP/1.1

    resources/../../etc/passwd  →  /etc/passwd  (SECURITY BREACH!)

Our protection:
1. Resolve the full path (follow .. and symlinks)
2. Check if it's still inside the document root
3. If not, answer exactly as if the file did not exist (404)

Answering 404 rather than 403 keeps the response set to two statuses and
tells an attacker nothing about what exists outside the root.

=============================================================================
NOT FOUND PAGE
=============================================================================

If <document root>/404.html exists it becomes the 404 body; otherwise a
built-in HTML snippet is sent. Either way the Content-Type is text/html.

=============================================================================
"""

import logging
from pathlib import Path
from typing import Optional

from ..http.mime_types import get_content_type
from ..http.request import RequestLine, resource_name
from ..http.response import NOT_FOUND_BODY, ResponseWriter
from ..http.status_codes import HTTPStatus


class StaticFileHandler:
    """
    Serves files from a document root.

    Usage:
        handler = StaticFileHandler("resources")
        status = handler.handle(request_line, ResponseWriter(stream))
    """

    def __init__(
        self,
        root_dir: str,
        index_file: str = "index.html",
        not_found_page: str = "404.html",
        logger: Optional[logging.Logger] = None,
    ):
        """
        Initialize static file handler.

        Args:
            root_dir: Directory to serve files from. All served files
                      MUST be inside it.
            index_file: File served for "/".
            not_found_page: Optional custom 404 body inside root_dir.
            logger: Where "not found" notices go. Defaults to this
                    module's logger.
        """
        self.root_dir = Path(root_dir)
        self.index_file = index_file
        self.not_found_page = not_found_page
        self.logger = logger or logging.getLogger(__name__)

        if not self.root_dir.is_dir():
            # Not fatal: every request will simply be a 404
            self.logger.warning(f"Document root does not exist: {self.root_dir}")

    def resolve(self, path: str) -> Optional[Path]:
        """
        Map a request path to a filesystem path inside the document root.

        Args:
            path: Raw request path, starting with "/".

        Returns:
            The resolved path, or None if it would escape the root or
            cannot be represented on this filesystem (e.g. a NUL byte).
            The returned path may not exist.
        """
        name = resource_name(path, self.index_file)
        try:
            root = self.root_dir.resolve()
            # resolve() follows symlinks and normalizes .. components
            full_path = (root / name).resolve()
        except (OSError, ValueError):
            return None

        try:
            full_path.relative_to(root)
        except ValueError:
            # Path is outside the document root - this is an attack!
            self.logger.warning(f"Path traversal attempt: {path}")
            return None

        return full_path

    def handle(self, request: RequestLine, writer: ResponseWriter) -> HTTPStatus:
        """
        Write the response for one GET request.

        Args:
            request: The parsed request line.
            writer: Writer for this connection; closed when this returns.

        Returns:
            The status that was sent.

        Raises:
            OSError: On file or socket failure. The writer is closed first.
        """
        name = resource_name(request.path, self.index_file)
        target = self.resolve(request.path)

        try:
            if target is not None and target.is_file():
                try:
                    writer.send_file(HTTPStatus.OK, get_content_type(name), target)
                    return HTTPStatus.OK
                except FileNotFoundError:
                    pass  # Deleted since is_file(); nothing written yet

            self.logger.info(f"Resource not found: {name}. Sending 404.")
            self.send_not_found(writer)
            return HTTPStatus.NOT_FOUND
        except OSError:
            # A failed open() (EACCES, EMFILE) leaves the writer open
            writer.close()
            raise

    def send_not_found(self, writer: ResponseWriter) -> int:
        """
        Send a 404, using the custom page when there is one.

        Returns:
            Number of body bytes written.
        """
        page = self.root_dir / self.not_found_page
        if page.is_file():
            try:
                return writer.send_file(HTTPStatus.NOT_FOUND, "text/html", page)
            except FileNotFoundError:
                pass
        return writer.send_body(HTTPStatus.NOT_FOUND, "text/html", NOT_FOUND_BODY)
