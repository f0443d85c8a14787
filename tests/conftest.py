"""
Shared fixtures for the static cache tests.
"""

from pathlib import Path

import pytest

from static_cache.repositories import MinifyTransformer
from static_cache.services import EntryLoader

FRAGMENT = "<script>injected()</script>"

INDEX_HTML = "<html><body>Hi</body></html>"
APP_JS = "function f(){ return 1; }"
SITE_CSS = "body {\n  color: red;\n}\n"
LOGO_PNG = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"


def squash_markup(text: str) -> str:
    return text.replace("\n", "").strip()


def tag_script(text: str) -> str:
    return "/*min*/" + text.strip()


def tag_stylesheet(text: str) -> str:
    return "/*css*/" + "".join(text.split())


STAND_IN_MINIFIERS = {
    "markup": squash_markup,
    "script": tag_script,
    "stylesheet": tag_stylesheet,
}


@pytest.fixture
def asset_root(tmp_path: Path) -> Path:
    """Create a small asset tree."""
    root = tmp_path / "public"
    (root / "css").mkdir(parents=True)
    (root / "img").mkdir()
    (root / "index.html").write_text(INDEX_HTML)
    (root / "app.js").write_text(APP_JS)
    (root / "css" / "site.css").write_text(SITE_CSS)
    (root / "img" / "logo.png").write_bytes(LOGO_PNG)
    return root


@pytest.fixture
def transformer() -> MinifyTransformer:
    """Transformer with deterministic stand-in minifiers."""
    return MinifyTransformer.create(inject_html=FRAGMENT, minifiers=STAND_IN_MINIFIERS)


@pytest.fixture
def loader(transformer: MinifyTransformer) -> EntryLoader:
    return EntryLoader(transformer)


class FailingTransformer(MinifyTransformer):
    """Transformer whose minifiers always raise."""

    def __init__(self) -> None:
        def boom(text: str) -> str:
            raise RuntimeError("minifier exploded")

        super().__init__(
            inject_html=FRAGMENT,
            minifiers={"markup": boom, "script": boom, "stylesheet": boom},
        )


@pytest.fixture
def failing_loader() -> EntryLoader:
    return EntryLoader(FailingTransformer())
