"""
Tests for settings.
"""

from pathlib import Path

import pytest

from static_cache.config import Settings


def test_defaults_are_valid():
    """Test default settings construct cleanly."""
    settings = Settings(port=8080, trusted_protocols=("https",))

    assert settings.trust_header == "x-forwarded-proto"
    assert settings.public_path == Path(settings.public_dir)


@pytest.mark.parametrize("port", [0, 70000])
def test_rejects_bad_port(port):
    """Test the port must be a valid TCP port."""
    with pytest.raises(ValueError):
        Settings(port=port)


def test_rejects_empty_trusted_protocols():
    """Test at least one trusted protocol is required."""
    with pytest.raises(ValueError):
        Settings(trusted_protocols=())


def test_inject_html_from_value():
    """Test the inline fragment is used when no file is configured."""
    settings = Settings(inject_html="<i>x</i>", inject_html_file=None)

    assert settings.load_inject_html() == "<i>x</i>"


def test_inject_html_file_wins(tmp_path):
    """Test a fragment file overrides the inline value."""
    fragment = tmp_path / "fragment.html"
    fragment.write_text("<script>f()</script>", encoding="utf-8")
    settings = Settings(inject_html="<i>x</i>", inject_html_file=str(fragment))

    assert settings.load_inject_html() == "<script>f()</script>"
