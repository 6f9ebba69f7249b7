"""
=============================================================================
FILESERVER - Minimal Concurrent HTTP File Server
=============================================================================

Serves the files of one directory over plain HTTP, one thread per
connection, using nothing but raw sockets.

=============================================================================
WHAT IT DOES (AND DOESN'T)
=============================================================================

    ✓ Accepts TCP connections on port 8080
    ✓ Reads ONE line per connection: "GET /path HTTP/1.1"
    ✓ Streams the matching file with Content-Type / Content-Length
    ✓ Answers 404 (custom 404.html or a built-in page) otherwise
    ✓ Closes every connection after one response

    ✗ Keep-alive, chunked encoding, request bodies, TLS
    ✗ Caching, compression, ranges, directory listings
    ✗ Limits on concurrent connections

=============================================================================
PACKAGE STRUCTURE
=============================================================================

    fileserver/
    ├── __init__.py          # This file - package exports
    ├── __main__.py          # CLI entry point (python -m fileserver)
    ├── server.py            # FileServer: dispatch + connection handling
    ├── config.py            # ServerConfig dataclass
    ├── core/                # Low-level components
    │   ├── socket_server.py # TCP accept loop
    │   └── connection.py    # Connection wrapper
    ├── http/                # HTTP protocol components
    │   ├── request.py       # Request line parsing
    │   ├── response.py      # Response writing / streaming
    │   ├── status_codes.py  # 200 and 404
    │   └── mime_types.py    # Content-Type resolution
    └── handlers/
        └── static.py        # Document root → 200 or 404

=============================================================================
QUICK START
=============================================================================

    from fileserver import FileServer, ServerConfig

    FileServer(ServerConfig(document_root="public")).run()

=============================================================================
"""

__version__ = "1.0.0"

from .server import FileServer
from .config import ServerConfig

__all__ = ["FileServer", "ServerConfig", "__version__"]
