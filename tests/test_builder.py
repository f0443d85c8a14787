"""
Tests for the startup cache builder.
"""

import logging
import os
from pathlib import Path

import pytest

from static_cache.entities import CacheEntry
from static_cache.repositories import InMemoryCacheRepository, MinifyTransformer
from static_cache.services import CacheBuilder, EntryLoader, canonical_path

from .conftest import APP_JS, FRAGMENT, INDEX_HTML, LOGO_PNG, SITE_CSS


def test_builds_transformed_entries(asset_root, loader):
    """Test text assets are cached transformed, binaries raw."""
    store = CacheBuilder(loader).build(asset_root)

    assert store.size() == 4
    assert store.get("/index.html") == CacheEntry(
        content=INDEX_HTML.replace("</body>", FRAGMENT + "</body>").encode(),
        content_type="text/html",
    )
    assert store.get("/app.js") == CacheEntry(
        content=("/*min*/" + APP_JS).encode(),
        content_type="application/javascript",
    )
    assert store.get("/css/site.css") == CacheEntry(b"/*css*/body{color:red;}", "text/css")
    assert store.get("/img/logo.png") == CacheEntry(LOGO_PNG, "image/png")
    assert store.get("/missing.css") is None


def test_transform_failure_falls_back_to_raw(asset_root, failing_loader, caplog):
    """Test failed transforms keep the raw bytes and log a warning."""
    with caplog.at_level(logging.WARNING):
        store = CacheBuilder(failing_loader).build(asset_root)

    assert store.get("/app.js") == CacheEntry(APP_JS.encode(), "application/javascript")
    assert store.get("/css/site.css") == CacheEntry(SITE_CSS.encode(), "text/css")
    assert store.get("/index.html") == CacheEntry(INDEX_HTML.encode(), "text/html")
    assert "/app.js" in caplog.text
    assert "minifier exploded" in caplog.text


def test_populates_given_store(asset_root, loader):
    """Test an existing store is filled and returned."""
    store = InMemoryCacheRepository()
    result = CacheBuilder(loader).build(asset_root, store=store)

    assert result is store
    assert store.size() == 4


def test_directories_are_not_cached(asset_root, loader):
    """Test only regular files become entries."""
    (asset_root / "empty").mkdir()
    store = CacheBuilder(loader).build(asset_root)

    assert store.get("/css") is None
    assert store.get("/empty") is None


@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks not supported")
def test_symlinks_are_skipped(asset_root, loader, tmp_path):
    """Test symlinked files and directories are left out."""
    outside = tmp_path / "outside"
    outside.mkdir()
    (outside / "secret.txt").write_text("secret")
    try:
        (asset_root / "link.txt").symlink_to(outside / "secret.txt")
        (asset_root / "linked").symlink_to(outside, target_is_directory=True)
    except OSError:
        pytest.skip("cannot create symlinks")

    store = CacheBuilder(loader).build(asset_root)

    assert store.get("/link.txt") is None
    assert store.get("/linked/secret.txt") is None
    assert store.size() == 4


def test_unreadable_file_is_skipped(asset_root, loader, monkeypatch, caplog):
    """Test a read error skips the file without aborting the build."""
    real_read_bytes = Path.read_bytes

    def read_bytes(self):
        if self.name == "app.js":
            raise PermissionError(13, "Permission denied", str(self))
        return real_read_bytes(self)

    monkeypatch.setattr(Path, "read_bytes", read_bytes)
    with caplog.at_level(logging.WARNING):
        store = CacheBuilder(loader).build(asset_root)

    assert store.get("/app.js") is None
    assert store.get("/index.html") is not None
    assert store.size() == 3
    assert "Skipping /app.js" in caplog.text


def test_missing_root_aborts(tmp_path, loader):
    """Test the build fails when there is nothing to walk."""
    with pytest.raises(OSError):
        CacheBuilder(loader).build(tmp_path / "nope")


def test_root_that_is_a_file_aborts(tmp_path, loader):
    """Test a non-directory root fails the build."""
    not_a_dir = tmp_path / "file.txt"
    not_a_dir.write_text("x")

    with pytest.raises(OSError):
        CacheBuilder(loader).build(not_a_dir)


@pytest.mark.parametrize(
    ("relative", "expected"),
    [
        ("index.html", "/index.html"),
        ("css/site.css", "/css/site.css"),
        ("css\\site.css", "/css/site.css"),
        (Path("a") / "b" / "c.js", "/a/b/c.js"),
    ],
)
def test_canonical_path(relative, expected):
    """Test cache keys use a leading slash and forward slashes."""
    assert canonical_path(relative) == expected


def test_scenario_with_real_minifiers(tmp_path):
    """Test index.html and app.js end to end with the real minifiers."""
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_text(INDEX_HTML)
    (root / "app.js").write_text(APP_JS)
    loader = EntryLoader(MinifyTransformer.create(inject_html=FRAGMENT))

    store = CacheBuilder(loader).build(root)

    index = store.get("/index.html")
    assert index is not None
    assert index.content.index(FRAGMENT.encode()) < index.content.index(b"</body>")
    script = store.get("/app.js")
    assert script is not None
    assert b"return 1" in script.content
    assert len(script.content) < len(APP_JS)
    assert store.get("/missing.css") is None
