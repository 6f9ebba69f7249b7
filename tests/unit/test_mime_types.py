"""
Unit tests for Content-Type resolution.
"""

from pathlib import Path

import pytest

from fileserver.http.mime_types import DEFAULT_CONTENT_TYPE, get_content_type


class TestGetContentType:
    """Tests for get_content_type()."""

    @pytest.mark.parametrize("name,expected", [
        ("index.html", "text/html"),
        ("old.htm", "text/html"),
        ("style.css", "text/css"),
        ("app.js", "application/javascript"),
        ("favicon.ico", "image/x-icon"),
        ("photo.jpg", "image/jpeg"),
        ("photo.jpeg", "image/jpeg"),
        ("logo.png", "image/png"),
        ("spinner.gif", "image/gif"),
    ])
    def test_known_suffixes(self, name, expected):
        """Test every suffix in the table."""
        assert get_content_type(name) == expected

    def test_nested_names(self):
        """Test that only the end of the name matters."""
        assert get_content_type("css/site/main.css") == "text/css"
        assert get_content_type("a.b.c.js") == "application/javascript"

    @pytest.mark.parametrize("name", [
        "notes.txt",
        "archive.tar.gz",
        "README",
        "",
        "data.json",
    ])
    def test_unknown_falls_back(self, name):
        """Test unknown or missing suffixes default to octet-stream."""
        assert get_content_type(name) == DEFAULT_CONTENT_TYPE
        assert DEFAULT_CONTENT_TYPE == "application/octet-stream"

    def test_case_sensitive(self):
        """Test that upper-case suffixes are not recognised."""
        assert get_content_type("photo.JPG") == "application/octet-stream"
        assert get_content_type("INDEX.HTML") == "application/octet-stream"

    def test_suffix_must_be_at_end(self):
        """Test that a known suffix in the middle of the name is ignored."""
        assert get_content_type("index.html.bak") == DEFAULT_CONTENT_TYPE
        assert get_content_type("html") == DEFAULT_CONTENT_TYPE

    def test_accepts_path(self):
        """Test Path objects work like strings."""
        assert get_content_type(Path("resources") / "index.html") == "text/html"
