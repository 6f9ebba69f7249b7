"""
Unit tests for server configuration.
"""

from pathlib import Path

import pytest

from fileserver import FileServer, ServerConfig


class TestDefaults:
    """Tests for the default configuration."""

    def test_classic_defaults(self):
        """Test the defaults give port 8080, ./resources and 1 KB chunks."""
        config = ServerConfig()

        assert config.host == "0.0.0.0"
        assert config.port == 8080
        assert config.document_root == "resources"
        assert config.index_file == "index.html"
        assert config.not_found_page == "404.html"
        assert config.chunk_size == 1024
        assert config.timeout is None
        assert config.log_level == "INFO"

    def test_defaults_are_valid(self):
        ServerConfig().validate()

    def test_document_path(self):
        assert ServerConfig(document_root="public").document_path == Path("public")


class TestValidate:
    """Tests for ServerConfig.validate()."""

    @pytest.mark.parametrize("overrides", [
        {"port": -1},
        {"port": 65536},
        {"backlog": 0},
        {"chunk_size": 0},
        {"max_request_line": 4},
        {"timeout": 0},
        {"timeout": -2.5},
        {"poll_interval": 0},
        {"log_level": "LOUD"},
        {"index_file": ""},
        {"not_found_page": ""},
    ])
    def test_invalid_values(self, overrides):
        """Test each invalid value is rejected."""
        with pytest.raises(ValueError):
            ServerConfig(**overrides).validate()

    def test_log_level_case_insensitive(self):
        ServerConfig(log_level="debug").validate()

    def test_port_zero_allowed(self):
        """Test port 0 (OS picks) is accepted."""
        ServerConfig(port=0).validate()

    def test_server_validates_on_init(self):
        """Test FileServer refuses a bad config before binding anything."""
        with pytest.raises(ValueError, match="Invalid port"):
            FileServer(ServerConfig(port=70000))


class TestFromEnv:
    """Tests for ServerConfig.from_env()."""

    def test_no_env_gives_defaults(self, monkeypatch):
        for name in ("HOST", "PORT", "ROOT", "CHUNK_SIZE", "TIMEOUT", "LOG_LEVEL"):
            monkeypatch.delenv(f"FILESERVER_{name}", raising=False)

        assert ServerConfig.from_env() == ServerConfig()

    def test_reads_env(self, monkeypatch):
        """Test every supported variable is picked up."""
        monkeypatch.setenv("FILESERVER_HOST", "127.0.0.1")
        monkeypatch.setenv("FILESERVER_PORT", "3000")
        monkeypatch.setenv("FILESERVER_ROOT", "/srv/www")
        monkeypatch.setenv("FILESERVER_CHUNK_SIZE", "4096")
        monkeypatch.setenv("FILESERVER_TIMEOUT", "2.5")
        monkeypatch.setenv("FILESERVER_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.host == "127.0.0.1"
        assert config.port == 3000
        assert config.document_root == "/srv/www"
        assert config.chunk_size == 4096
        assert config.timeout == 2.5
        assert config.log_level == "DEBUG"

    def test_bad_number(self, monkeypatch):
        """Test non-numeric values raise ValueError."""
        monkeypatch.setenv("FILESERVER_PORT", "eighty")

        with pytest.raises(ValueError):
            ServerConfig.from_env()
