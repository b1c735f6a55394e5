"""Markdown to HTML rendering and code highlighting for book chapters."""

from __future__ import annotations

import logging
from typing import Iterable, Optional, Protocol, Sequence

try:
    import markdown  # type: ignore[import-untyped]
except ImportError as exc:  # pragma: no cover - surfaced at runtime
    raise SystemExit(
        "Missing dependency 'markdown'. Install with pip install markdown"
    ) from exc

try:
    from bs4 import BeautifulSoup  # type: ignore[import-not-found]
except ImportError as exc:  # pragma: no cover - surfaced at runtime
    raise SystemExit(
        "Missing dependency 'beautifulsoup4'. Install with pip install"
        " beautifulsoup4"
    ) from exc

try:
    from pygments import highlight
    from pygments.formatters import HtmlFormatter
    from pygments.lexers import get_lexer_by_name
    from pygments.util import ClassNotFound
except ImportError as exc:  # pragma: no cover - surfaced at runtime
    raise SystemExit(
        "Missing dependency 'pygments'. Install with pip install pygments"
    ) from exc

from .transforms import unescape_entities

LOGGER = logging.getLogger(__name__)

DEFAULT_EXTENSIONS = ("fenced_code", "tables")
LANGUAGE_CLASS_PREFIXES = ("language-", "lang-")


class MarkdownRenderer(Protocol):
    """Anything that turns a Markdown string into an HTML fragment."""

    def render(self, text: str) -> str:
        ...


class PythonMarkdownRenderer:
    """Render Markdown with Python-Markdown.

    A new converter is built for each call so a single renderer can be
    shared by concurrently exported posts.
    """

    def __init__(
        self,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        *,
        output_format: str = "xhtml",
    ) -> None:
        self.extensions = list(extensions)
        self.output_format = output_format

    def render(self, text: str) -> str:
        return markdown.markdown(
            text,
            extensions=self.extensions,
            output_format=self.output_format,
        )


def _code_language(classes: Optional[Iterable[str]]) -> Optional[str]:
    for css_class in classes or ():
        for prefix in LANGUAGE_CLASS_PREFIXES:
            if css_class.startswith(prefix) and len(css_class) > len(prefix):
                return css_class[len(prefix):]
    return None


def highlight_code_blocks(html: str, *, style: str = "default") -> str:
    """Highlight ``<pre><code class="language-*">`` blocks with inline styles."""

    soup = BeautifulSoup(html, "lxml")
    body = soup.body
    if body is None:
        return html

    formatter = HtmlFormatter(nowrap=True, noclasses=True, style=style)
    highlighted = 0
    for code in body.select("pre > code"):
        language = _code_language(code.get("class"))
        if not language:
            continue
        try:
            lexer = get_lexer_by_name(language)
        except ClassNotFound:
            LOGGER.debug("No lexer for language %r; leaving block as-is", language)
            continue

        source = code.get_text()
        fragment = BeautifulSoup(
            highlight(source, lexer, formatter), "html.parser"
        )
        code.clear()
        for node in list(fragment.contents):
            code.append(node)
        highlighted += 1

    LOGGER.debug("Highlighted %d code blocks", highlighted)
    return body.decode_contents()


def render_book_html(markdown_text: str, renderer: MarkdownRenderer) -> str:
    """Render prepared Markdown, then unescape and highlight the result."""

    html = renderer.render(markdown_text)
    html = unescape_entities(html)
    return highlight_code_blocks(html)


__all__ = [
    "DEFAULT_EXTENSIONS",
    "MarkdownRenderer",
    "PythonMarkdownRenderer",
    "highlight_code_blocks",
    "render_book_html",
]
