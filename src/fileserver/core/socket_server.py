"""
=============================================================================
LOW-LEVEL TCP SOCKET SERVER
=============================================================================

The acceptor loop: bind, listen, and hand every accepted connection to a
callback as fast as possible.

=============================================================================
SOCKET LIFECYCLE (Server Side)
=============================================================================

    1. socket()    Create a TCP socket
    2. bind()      Reserve IP:PORT (fails if another process has it)
    3. listen()    Let the OS queue incoming connections (backlog)
    4. accept()    BLOCK until a client connects, get a NEW socket for it
    5. close()     Release the listening socket

                    ┌───────────────────────┐
                    │   Listening Socket    │ ◄── Created once at startup
                    │   (Server Socket)     │     Bound to 0.0.0.0:8080
                    └───────────┬───────────┘     Never sends/receives data
                                │
        ┌───────────────────────┼───────────────────────┐
        ▼                       ▼                       ▼
    ┌───────────┐         ┌───────────┐         ┌───────────┐
    │ Client    │         │ Client    │         │ Client    │
    │ Socket 1  │         │ Socket 2  │         │ Socket 3  │
    └───────────┘         └───────────┘         └───────────┘
    Each accept() creates a new socket for that specific client

=============================================================================
THE LOOP NEVER WAITS FOR A CLIENT TO BE SERVED
=============================================================================

    while running:
        log "Waiting for client..."
        conn = accept()             ← the ONLY blocking point
        log "Client connected"
        callback(conn)              ← starts a worker and returns at once

If the callback did the actual HTTP work, one slow client would stall
every other client behind it.

=============================================================================
STOPPING
=============================================================================

Run from the command line, the loop runs until the process is killed.
Embedded (tests, other programs), shutdown() can be called from another
thread. accept() is given a short timeout so the loop notices:

    try:
        accept()          # at most poll_interval seconds
    except timeout:
        continue          # check running flag, loop again

The "Waiting for client..." line is logged once per wait, not per poll.

Any other accept() error (EMFILE when every descriptor is held by a
worker, ECONNABORTED, ...) is logged and retried after poll_interval.
Only shutdown() ends the loop.

=============================================================================
"""

import logging
import socket
import threading
import time
from typing import Callable, Optional, Tuple

from ..config import ServerConfig
from .connection import Connection


class SocketServer:
    """
    Low-level TCP socket server.

    Manages socket lifecycle and connection acceptance. Knows nothing
    about HTTP.

    Usage:
        def handle_connection(conn: Connection):
            threading.Thread(target=serve, args=(conn,)).start()

        server = SocketServer(config)
        server.start(handle_connection)  # Blocks until shutdown
    """

    def __init__(self, config: ServerConfig, logger: Optional[logging.Logger] = None):
        """
        Initialize the socket server.

        Args:
            config: Server configuration (host, port, backlog, ...).
            logger: Where operational messages go. Defaults to this
                    module's logger.

        Note: This does NOT create the socket. That happens in start().
        """
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

        self._socket: Optional[socket.socket] = None
        self._running = False

        # Set once the socket is listening, so other threads can connect
        self._listening = threading.Event()
        self._shutdown_event = threading.Event()

    @property
    def is_running(self) -> bool:
        """Check if server is running."""
        return self._running

    @property
    def address(self) -> Tuple[str, int]:
        """
        Get the server's bound address (IP, port).

        Once listening this is the REAL address, so port 0 in the config
        reports the port the OS picked.
        """
        if self._socket is not None:
            return self._socket.getsockname()[:2]
        return (self.config.host, self.config.port)

    def _create_socket(self) -> socket.socket:
        """Create and configure the server socket."""
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)

        # Avoids "Address already in use" while old connections sit in
        # TIME_WAIT after a restart
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)

        sock.settimeout(self.config.poll_interval)
        return sock

    def start(self, connection_handler: Callable[[Connection], None]):
        """
        Bind, listen and run the accept loop.

        This method BLOCKS until shutdown() is called.

        Args:
            connection_handler: Called with each new connection. Must
                                return quickly (hand the work to a thread).

        Raises:
            OSError: If the address cannot be bound. Not retried.
        """
        self._socket = self._create_socket()

        try:
            self._socket.bind((self.config.host, self.config.port))
        except OSError as e:
            self.logger.error(f"Failed to bind to {self.config.host}:{self.config.port}: {e}")
            self._socket.close()
            self._socket = None
            raise

        self._socket.listen(self.config.backlog)

        self._running = True
        self._shutdown_event.clear()
        self._listening.set()

        host, port = self.address
        self.logger.info(f"Server listening on {host}:{port}")

        try:
            self._accept_loop(connection_handler)
        finally:
            self._cleanup()

    def _accept_loop(self, connection_handler: Callable[[Connection], None]):
        """
        Main loop for accepting connections.

        Args:
            connection_handler: Callback for each new connection.
        """
        while self._running:
            self.logger.info("Waiting for client...")

            accepted = self._accept()
            if accepted is None:
                break  # shutdown() was called

            client_socket, client_address = accepted
            conn = Connection(
                socket=client_socket,
                address=client_address,
                timeout=self.config.timeout,
                max_line_size=self.config.max_request_line,
                logger=self.logger,
            )
            self.logger.info(f"Client connected: {conn.client_ip}:{conn.client_port}")

            connection_handler(conn)

    def _accept(self) -> Optional[Tuple[socket.socket, tuple]]:
        """
        Wait for the next client.

        Returns:
            (client_socket, client_address), or None once shutting down.
        """
        while self._running:
            try:
                return self._socket.accept()
            except socket.timeout:
                continue  # Check running flag, loop again
            except OSError as e:
                if not self._running:
                    return None  # Listening socket closed under us
                # Out of descriptors, aborted handshake: back off, keep going
                self.logger.error(f"Accept error: {e}")
                time.sleep(self.config.poll_interval)
        return None

    def shutdown(self):
        """
        Stop the accept loop.

        Safe to call from any thread, and more than once. The loop exits
        within poll_interval seconds. Workers already running are not
        touched: each finishes its own connection.
        """
        self.logger.info("Shutting down socket server...")
        self._running = False

    def _cleanup(self):
        """Close the listening socket."""
        self._running = False
        self._listening.clear()

        if self._socket:
            try:
                self._socket.close()
            except OSError:
                pass  # Already closed
            self._socket = None

        self._shutdown_event.set()
        self.logger.info("Socket server stopped")

    def wait_until_listening(self, timeout: Optional[float] = None) -> bool:
        """
        Block until the server is accepting connections.

        Returns:
            True if listening, False on timeout.
        """
        return self._listening.wait(timeout)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """
        Wait for the server to shut down.

        Returns:
            True if shutdown completed, False if timeout.
        """
        return self._shutdown_event.wait(timeout)
