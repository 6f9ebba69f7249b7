"""
=============================================================================
FILE SERVER
=============================================================================

Ties the pieces together: accept loop, one worker thread per connection,
request line parsing, and the static file handler.

=============================================================================
REQUEST LIFECYCLE
=============================================================================

    1. CLIENT CONNECTS
       └── SocketServer accepts, logs, wraps it in a Connection

    2. DISPATCH
       └── A brand new thread is started for this connection
       └── The accept loop is already waiting for the next client

    3. READ ONE LINE (worker thread)
       └── "GET /index.html HTTP/1.1"
       └── EOF, non-GET or malformed? → close, no response

    4. RESPOND
       └── StaticFileHandler picks 200 + file or 404
       └── ResponseWriter streams it and closes the output stream

    5. CLOSE
       └── Always. No keep-alive.

=============================================================================
CONCURRENCY MODEL
=============================================================================

Thread-per-connection, with NO upper bound:

    accept ──► Thread(worker-1a2b3c4d) ──► serve ──► close
    accept ──► Thread(worker-5e6f7a8b) ──► serve ──► close
    accept ──► ...

Workers share nothing: each owns its socket and its file handle. A worker
that fails (client reset mid-transfer, unreadable file) logs the error and
dies alone; the accept loop never finds out.

There is no pool and therefore no backpressure: a flood of slow clients
means a flood of threads.

=============================================================================
"""

import logging
import threading
from typing import Optional

from .config import ServerConfig
from .core import Connection, SocketServer
from .handlers import StaticFileHandler
from .http import HTTPParseError, HTTPStatus, ResponseWriter, parse_request_line, resource_name


class FileServer:
    """
    Minimal concurrent HTTP file server.

    =========================================================================
    USAGE
    =========================================================================

        # Serve ./resources on 0.0.0.0:8080 (blocks)
        FileServer().run()

        # Somewhere else, in a background thread
        server = FileServer(ServerConfig(port=0, document_root="/srv/www"))
        threading.Thread(target=server.serve_forever, daemon=True).start()
        server.wait_until_listening()
        ...
        server.shutdown()

    =========================================================================
    """

    def __init__(self, config: Optional[ServerConfig] = None, logger: Optional[logging.Logger] = None):
        """
        Initialize the file server.

        Args:
            config: Server configuration. Uses the defaults if not provided.
            logger: Logger handed to every component. Defaults to this
                    module's logger.

        Raises:
            ValueError: If the configuration is invalid.
        """
        self.config = config or ServerConfig()
        self.config.validate()  # Fail-fast on invalid config

        self.logger = logger or logging.getLogger(__name__)

        self._socket_server = SocketServer(self.config, logger=self.logger)
        self._handler = StaticFileHandler(
            self.config.document_root,
            index_file=self.config.index_file,
            not_found_page=self.config.not_found_page,
            logger=self.logger,
        )

    @property
    def address(self):
        """The (host, port) the server is bound to."""
        return self._socket_server.address

    @property
    def is_running(self) -> bool:
        return self._socket_server.is_running

    # =========================================================================
    # SERVER LIFECYCLE
    # =========================================================================

    def run(self):
        """
        Configure logging and serve until interrupted (blocking).

        Raises:
            OSError: If the port cannot be bound.
        """
        self._setup_logging()
        self.logger.info(
            f"Serving {self.config.document_path.resolve()} "
            f"on http://{self.config.host}:{self.config.port}"
        )
        try:
            self.serve_forever()
        except KeyboardInterrupt:
            self.logger.info("Received keyboard interrupt")

    def serve_forever(self):
        """
        Run the accept loop (blocking), without touching logging setup.

        Returns after shutdown() is called from another thread.
        """
        self._socket_server.start(self._dispatch)

    def shutdown(self):
        """Stop accepting connections. In-flight workers finish on their own."""
        self._socket_server.shutdown()

    def wait_until_listening(self, timeout: Optional[float] = None) -> bool:
        """Block until the listening socket is ready."""
        return self._socket_server.wait_until_listening(timeout)

    def wait_for_shutdown(self, timeout: Optional[float] = None) -> bool:
        """Block until the accept loop has exited."""
        return self._socket_server.wait_for_shutdown(timeout)

    def _setup_logging(self):
        """Configure logging based on config."""
        level = getattr(logging, self.config.log_level.upper(), logging.INFO)

        logging.basicConfig(
            level=level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

        logging.getLogger("fileserver").setLevel(level)

    # =========================================================================
    # REQUEST HANDLING
    # =========================================================================

    def _dispatch(self, conn: Connection):
        """
        Start a worker thread for a connection and return immediately.

        Called by SocketServer for each accepted connection.
        """
        worker = threading.Thread(
            target=self._worker,
            args=(conn,),
            name=f"worker-{conn.id}",
            daemon=True,
        )
        worker.start()

    def _worker(self, conn: Connection):
        """Thread body: serve the connection, keep failures to this thread."""
        try:
            self.handle_connection(conn)
        except Exception as e:
            self.logger.exception(f"[{conn.id}] Connection error: {e}")

    def handle_connection(self, conn: Connection) -> Optional[HTTPStatus]:
        """
        Serve exactly one request on a connection, then close it.

        Args:
            conn: The client connection.

        Returns:
            The status sent, or None if the request was dropped.

        Raises:
            OSError: On socket or file I/O failure. The connection is
                     closed before the error propagates.
        """
        with conn:  # Context manager ensures connection is closed
            try:
                line = conn.read_line()
                if line is None:
                    self.logger.debug(f"[{conn.id}] Client closed without sending a request")
                    return None
                request = parse_request_line(line)
            except HTTPParseError as e:
                self.logger.debug(f"[{conn.id}] Dropping malformed request: {e}")
                return None

            if not request.is_get:
                self.logger.debug(f"[{conn.id}] Ignoring {request.method} request")
                return None

            self.logger.info(f"Client requested: {resource_name(request.path, self.config.index_file)}")

            writer = ResponseWriter(
                conn.output_stream(),
                chunk_size=self.config.chunk_size,
                logger=self.logger,
            )
            return self._handler.handle(request, writer)
