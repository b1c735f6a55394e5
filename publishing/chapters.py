"""Split rendered HTML into book chapters."""

from __future__ import annotations

from html import escape
from typing import Any, List, Tuple

try:
    from bs4 import BeautifulSoup, Comment, NavigableString  # type: ignore[import-not-found]
except ImportError as exc:  # pragma: no cover - surfaced at runtime
    raise SystemExit(
        "Missing dependency 'beautifulsoup4'. Install with pip install"
        " beautifulsoup4"
    ) from exc

from .models import Chapter

SIGNOFF_TITLE = "Thank you"


def split_chapters(html: str, *, fallback_title: str = "") -> List[Chapter]:
    """Return one chapter per top-level ``<h1>`` in ``html``.

    Content ahead of the first heading is folded into the first chapter.
    A fragment without any ``<h1>`` becomes a single chapter titled
    ``fallback_title``; an empty fragment yields no chapters.
    """

    soup = BeautifulSoup(html, "lxml")
    body = soup.body
    if body is None:
        return []

    preamble: List[str] = []
    sections: List[Tuple[str, List[str]]] = []
    for node in body.children:
        if getattr(node, "name", None) == "h1":
            sections.append((node.get_text(" ", strip=True), []))
            continue
        target = sections[-1][1] if sections else preamble
        target.append(_serialize(node))

    if not sections:
        if not "".join(preamble).strip():
            return []
        sections.append((fallback_title, []))
    sections[0][1][:0] = preamble

    return [
        Chapter(title=title, data="".join(parts).strip())
        for title, parts in sections
    ]


def _serialize(node: Any) -> str:
    if isinstance(node, Comment):
        return ""
    if isinstance(node, NavigableString):
        return escape(str(node), quote=False)
    return str(node)


def signoff_chapter(
    title: str,
    *,
    author: str = "",
    site_url: str = "",
    contact_email: str = "",
) -> Chapter:
    """Build the closing "Thank you" chapter appended to every book."""

    paragraphs = [
        "<p>Thank you for purchasing this guide. I hope it has helped you"
        f" get started with {escape(title)}!</p>"
    ]
    if site_url:
        link = f'<a href="{escape(site_url)}">{escape(_display_host(site_url))}</a>'
        paragraphs.append(f"<p>Please be sure to check {link} for more guides.</p>")
    if contact_email:
        mail = escape(contact_email)
        paragraphs.append(
            "<p>If you have feedback or ideas to share, you can reach me"
            f' anytime at <a href="mailto:{mail}">{mail}</a>.</p>'
        )
    paragraphs.append("<p>Many thanks,</p>")
    if author or site_url:
        signature = [escape(author)] if author else []
        if site_url:
            signature.append(
                f'<a href="{escape(site_url)}">{escape(_display_host(site_url))}</a>'
            )
        paragraphs.append("<p>" + "<br/>\n".join(signature) + "</p>")
    return Chapter(title=SIGNOFF_TITLE, data="\n".join(paragraphs))


def _display_host(url: str) -> str:
    return url.split("://", 1)[-1].rstrip("/")


__all__ = ["SIGNOFF_TITLE", "signoff_chapter", "split_chapters"]
