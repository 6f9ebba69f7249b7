"""
=============================================================================
CONTENT-TYPE RESOLUTION
=============================================================================

Maps a file name to the MIME type sent in the Content-Type header.

=============================================================================
HOW THE MATCH WORKS
=============================================================================

The lookup is a plain suffix test, checked in a fixed order:

    ┌────────────────────────────────────────────────────────────────────┐
    │  SUFFIX            →  CONTENT-TYPE                                 │
    ├────────────────────────────────────────────────────────────────────┤
    │  .html / .htm      →  text/html                                    │
    │  .css              →  text/css                                     │
    │  .js               →  application/javascript                       │
    │  .ico              →  image/x-icon                                 │
    │  .jpg / .jpeg      →  image/jpeg                                   │
    │  .png              →  image/png                                    │
    │  .gif              →  image/gif                                    │
    │  (anything else)   →  application/octet-stream                     │
    └────────────────────────────────────────────────────────────────────┘

The match is CASE-SENSITIVE:

    style.css   → text/css
    photo.JPG   → application/octet-stream   (".JPG" is not ".jpg")

No charset parameter is appended and the file content is never sniffed.

=============================================================================
"""

from pathlib import PurePath
from typing import Union


# Ordered: the first entry whose suffix matches wins.
CONTENT_TYPES = (
    ((".html", ".htm"), "text/html"),
    ((".css",), "text/css"),
    ((".js",), "application/javascript"),
    ((".ico",), "image/x-icon"),
    ((".jpg", ".jpeg"), "image/jpeg"),
    ((".png",), "image/png"),
    ((".gif",), "image/gif"),
)

# "I don't know what this is, treat as binary"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def get_content_type(name: Union[str, PurePath]) -> str:
    """
    Get the Content-Type for a file name.

    Args:
        name: File name or path. Only the trailing characters matter.

    Returns:
        The MIME type string.

    Examples:
        >>> get_content_type("index.html")
        'text/html'

        >>> get_content_type("js/app.js")
        'application/javascript'

        >>> get_content_type("photo.JPG")
        'application/octet-stream'
    """
    name = str(name)
    for suffixes, content_type in CONTENT_TYPES:
        if name.endswith(suffixes):
            return content_type
    return DEFAULT_CONTENT_TYPE
