"""Minifying implementation of AssetTransformer.

Wraps the third-party minifiers behind a single result-returning call:

- markup (.html, .htm): minify-html, then the configured fragment is
  injected before the first ``</body>`` (or appended when there is none)
- stylesheet (.css): rcssmin
- script (.js, .mjs): rjsmin

Every other extension passes through untouched.
"""

from collections.abc import Callable, Mapping

import minify_html
import rcssmin
import rjsmin

from static_cache.errors import TransformFailed, Transformed, TransformResult
from static_cache.repositories.mime import content_type_for

Minifier = Callable[[str], str]

MARKUP = "markup"
STYLESHEET = "stylesheet"
SCRIPT = "script"

TEXT_KINDS: dict[str, str] = {
    ".html": MARKUP,
    ".htm": MARKUP,
    ".css": STYLESHEET,
    ".js": SCRIPT,
    ".mjs": SCRIPT,
}

BODY_CLOSE = "</body>"


def minify_markup(text: str) -> str:
    """Minify an HTML document, including inline CSS and JS."""
    return minify_html.minify(
        text,
        minify_css=True,
        minify_js=True,
        keep_closing_tags=True,
        keep_html_and_head_opening_tags=True,
    )


DEFAULT_MINIFIERS: dict[str, Minifier] = {
    MARKUP: minify_markup,
    STYLESHEET: rcssmin.cssmin,
    SCRIPT: rjsmin.jsmin,
}


class MinifyTransformer:
    """Minifying implementation of AssetTransformer protocol.

    This class satisfies the AssetTransformer protocol through structural
    typing - no explicit inheritance needed.

    Example:
        ```python
        transformer = MinifyTransformer.create(inject_html="<!-- hi -->")
        result = transformer.transform(b"<html><body>Hi</body></html>", ".html")
        if isinstance(result, Transformed):
            print(result.content)
        ```
    """

    def __init__(
        self,
        inject_html: str = "",
        minifiers: Mapping[str, Minifier] | None = None,
    ) -> None:
        """Initialize the transformer.

        Args:
            inject_html: Fragment inserted into every HTML document. Empty
                disables injection.
            minifiers: Override minifiers by kind ("markup", "stylesheet",
                "script"). Missing kinds use the defaults.
        """
        self._inject_html = inject_html
        self._minifiers: dict[str, Minifier] = {**DEFAULT_MINIFIERS, **(minifiers or {})}

    @classmethod
    def create(
        cls,
        inject_html: str = "",
        minifiers: Mapping[str, Minifier] | None = None,
    ) -> "MinifyTransformer":
        """Factory method to create MinifyTransformer with defaults.

        Args:
            inject_html: Fragment inserted into HTML documents.
            minifiers: Optional minifier overrides by kind.

        Returns:
            Configured MinifyTransformer
        """
        return cls(inject_html=inject_html, minifiers=minifiers)

    def transform(self, data: bytes, extension: str) -> TransformResult:
        """Transform file contents according to their kind.

        Args:
            data: Raw file bytes
            extension: File extension including the dot (any case)

        Returns:
            Transformed with the output bytes, or TransformFailed carrying the
            original error. Never raises.
        """
        ext = extension.lower()
        content_type = content_type_for(ext)
        kind = TEXT_KINDS.get(ext)
        if kind is None:
            return Transformed(content=data, content_type=content_type)

        try:
            text = data.decode("utf-8")
            output = self._minifiers[kind](text)
            if kind == MARKUP:
                output = self._inject(output)
        except Exception as e:
            return TransformFailed(error=e, content_type=content_type)

        return Transformed(content=output.encode("utf-8"), content_type=content_type)

    def _inject(self, html: str) -> str:
        if not self._inject_html:
            return html
        if BODY_CLOSE in html:
            return html.replace(BODY_CLOSE, self._inject_html + BODY_CLOSE, 1)
        return html + self._inject_html
