"""
Request handlers.

    static.py    Serve files from the document root, 404 otherwise
"""

from .static import StaticFileHandler

__all__ = ["StaticFileHandler"]
