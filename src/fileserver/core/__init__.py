"""
=============================================================================
CORE SERVER COMPONENTS
=============================================================================

The networking plumbing under the file server:

    ┌─────────────────────────────────────────────────────────────────────┐
    │                         SOCKET SERVER                                │
    │  • Creates the TCP listening socket, binds, listens                 │
    │  • Runs the accept() loop                                           │
    │  • Hands each connection to a callback and goes straight back       │
    └─────────────────────────────────────────────────────────────────────┘
                                    │
                                    │ One new thread per connection
                                    ▼
    ┌─────────────────────────────────────────────────────────────────────┐
    │                          CONNECTION                                  │
    │  • Wraps a client socket for ONE request/response exchange          │
    │  • Reads the request line (TCP is a stream, not messages!)          │
    │  • Provides the output stream for the response                      │
    │  • Closes cleanly on every exit path                                │
    └─────────────────────────────────────────────────────────────────────┘

=============================================================================
"""

from .socket_server import SocketServer
from .connection import Connection, ConnectionState

__all__ = [
    "SocketServer",     # TCP acceptor loop
    "Connection",       # Wrapper for client socket - handles I/O
    "ConnectionState",  # Enum for connection lifecycle states
]
