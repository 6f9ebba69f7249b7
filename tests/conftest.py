"""
pytest configuration and fixtures.
"""

import socket
import threading
from pathlib import Path
from typing import Callable, Dict, Generator, Tuple
import pytest

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from fileserver import FileServer, ServerConfig


INDEX_HTML = b"<html><body><h1>Hello from the index</h1></body></html>\n"
STYLE_CSS = b"body { color: #333; }\n"
APP_JS = b"console.log('app');\n"
GUIDE_HTML = b"<html><body><p>Nested guide</p></body></html>\n"
CUSTOM_404 = b"<html><body><h1>Custom 404</h1></body></html>\n"

# Binary, not a multiple of the 1024-byte chunk, contains \r\n and NULs
LOGO_PNG = bytes((i * 7) % 256 for i in range(5000)) + b"\r\n\r\n\x00end"


@pytest.fixture
def document_root(tmp_path: Path) -> Path:
    """A populated document root inside a temp dir."""
    root = tmp_path / "resources"
    root.mkdir()
    (root / "index.html").write_bytes(INDEX_HTML)
    (root / "style.css").write_bytes(STYLE_CSS)
    (root / "app.js").write_bytes(APP_JS)
    (root / "logo.png").write_bytes(LOGO_PNG)
    (root / "empty.txt").write_bytes(b"")
    (root / "docs").mkdir()
    (root / "docs" / "guide.html").write_bytes(GUIDE_HTML)

    # Outside the root: must never be served
    (tmp_path / "secret.txt").write_bytes(b"top secret")
    return root


@pytest.fixture
def custom_404(document_root: Path) -> bytes:
    """Install a custom 404.html in the document root."""
    (document_root / "404.html").write_bytes(CUSTOM_404)
    return CUSTOM_404


@pytest.fixture
def config(document_root: Path) -> ServerConfig:
    """Test server configuration serving the temp document root."""
    return ServerConfig(
        host="127.0.0.1",
        port=0,  # Let OS pick a free port
        document_root=str(document_root),
        poll_interval=0.05,
        log_level="WARNING",
    )


@pytest.fixture
def free_port() -> int:
    """Get a free port for testing."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(('127.0.0.1', 0))
        return s.getsockname()[1]


class TestServer:
    """Test server helper that runs in a background thread."""

    __test__ = False

    def __init__(self, server: FileServer):
        self.server = server
        self._thread: threading.Thread = None

    @property
    def port(self) -> int:
        return self.server.address[1]

    def start(self):
        """Start server in background thread."""
        self._thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self._thread.start()

        if not self.server.wait_until_listening(timeout=5.0):
            raise RuntimeError("Server failed to start")

    def stop(self):
        """Stop the server."""
        self.server.shutdown()

        if self._thread and self._thread.is_alive():
            self._thread.join(timeout=5.0)


@pytest.fixture
def test_server(config: ServerConfig) -> Generator[TestServer, None, None]:
    """A running server on an ephemeral port."""
    test_srv = TestServer(FileServer(config))
    test_srv.start()

    yield test_srv

    test_srv.stop()


def recv_all(sock: socket.socket) -> bytes:
    """Read until the peer closes."""
    chunks = []
    while True:
        chunk = sock.recv(4096)
        if not chunk:
            return b"".join(chunks)
        chunks.append(chunk)


def split_response(raw: bytes) -> Tuple[str, Dict[str, str], bytes]:
    """Split a raw response into (status line, headers, body)."""
    head, _, body = raw.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    headers = {}
    for line in lines[1:]:
        name, _, value = line.partition(": ")
        headers[name] = value
    return lines[0], headers, body


@pytest.fixture
def send_raw(test_server: TestServer) -> Callable[[bytes], bytes]:
    """Send raw bytes to the test server and return everything it answers."""
    def _send(data: bytes) -> bytes:
        with socket.create_connection(("127.0.0.1", test_server.port), timeout=5.0) as sock:
            sock.sendall(data)
            return recv_all(sock)
    return _send


@pytest.fixture
def http_get(send_raw) -> Callable[[str], Tuple[str, Dict[str, str], bytes]]:
    """GET a path from the test server, returning (status line, headers, body)."""
    def _get(path: str) -> Tuple[str, Dict[str, str], bytes]:
        raw = send_raw(f"GET {path} HTTP/1.1\r\nHost: localhost\r\n\r\n".encode("latin-1"))
        return split_response(raw)
    return _get
