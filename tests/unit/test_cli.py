"""
Unit tests for the command line entry point.
"""

import socket

import pytest

from fileserver import __version__
from fileserver.__main__ import build_parser, main
from fileserver.config import ServerConfig


class TestParser:
    """Tests for build_parser()."""

    def test_defaults(self):
        args = build_parser(ServerConfig()).parse_args([])

        assert args.host == "0.0.0.0"
        assert args.port == 8080
        assert args.root == "resources"
        assert args.chunk_size == 1024
        assert args.timeout is None
        assert args.log_level == "INFO"

    def test_short_options(self):
        args = build_parser(ServerConfig()).parse_args(
            ["-H", "127.0.0.1", "-p", "3000", "-r", "public", "-l", "debug"]
        )

        assert args.host == "127.0.0.1"
        assert args.port == 3000
        assert args.root == "public"
        assert args.log_level == "DEBUG"

    @pytest.mark.parametrize("level", ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    def test_every_valid_log_level(self, level):
        """Test the CLI accepts every level the config accepts."""
        ServerConfig(log_level=level).validate()

        args = build_parser(ServerConfig()).parse_args(["--log-level", level.lower()])

        assert args.log_level == level

    def test_defaults_follow_config(self):
        """Test environment-derived defaults show up in the parser."""
        args = build_parser(ServerConfig(port=9000, document_root="www")).parse_args([])

        assert args.port == 9000
        assert args.root == "www"

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser(ServerConfig()).parse_args(["--version"])

        assert exc_info.value.code == 0
        assert __version__ in capsys.readouterr().out


class TestMain:
    """Tests for main()."""

    def test_invalid_config(self, capsys):
        """Test a bad value exits with status 1 before binding."""
        assert main(["--chunk-size", "0"]) == 1
        assert "chunk_size" in capsys.readouterr().err

    def test_invalid_env(self, monkeypatch, capsys):
        monkeypatch.setenv("FILESERVER_PORT", "not-a-port")

        assert main([]) == 1
        assert "invalid environment" in capsys.readouterr().err

    def test_port_in_use(self, document_root, capsys):
        """Test a bind failure exits with status 1."""
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as blocker:
            blocker.bind(("127.0.0.1", 0))
            blocker.listen(1)
            port = blocker.getsockname()[1]

            status = main(["--host", "127.0.0.1", "--port", str(port), "--root", str(document_root)])

        assert status == 1
        assert "Error:" in capsys.readouterr().err
