"""String-level rewrites applied to a post before and after rendering."""

from __future__ import annotations

import re
from pathlib import Path
from typing import List

try:
    from bs4 import BeautifulSoup  # type: ignore[import-not-found]
except ImportError as exc:  # pragma: no cover - surfaced at runtime
    raise SystemExit(
        "Missing dependency 'beautifulsoup4'. Install with pip install"
        " beautifulsoup4"
    ) from exc

DEFAULT_ASSET_PREFIX = "/assets"

RE_FENCE = re.compile(r"^[ ]{0,3}(`{3,}|~{3,})")
RE_SHIFTABLE_HEADING = re.compile(r"^([ ]{0,3})#(#{1,5})(?!#)")
RE_TAG = re.compile(r"(<[^>]*>)")

QUOTE_ENTITIES = {
    "&quot;": '"',
    "&#x27;": "'",
    "&#39;": "'",
}

LINK_ATTRIBUTES = ("src", "href", "poster", "data-src")


def shift_headings(markdown_text: str) -> str:
    """Promote every ``##``-``######`` heading by one level.

    ``##`` becomes ``#``, ``###`` becomes ``##`` and so on; level-one
    headings and lines inside fenced code blocks are left alone. As with
    Python-Markdown, no space is needed after the hashes (``##Title``).
    Applying this twice promotes headings twice, so callers run it once
    per post.
    """

    lines = markdown_text.split("\n")
    fence: str | None = None
    for index, line in enumerate(lines):
        fence_match = RE_FENCE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker
            elif marker[0] == fence[0] and len(marker) >= len(fence):
                fence = None
            continue
        if fence is not None:
            continue
        lines[index] = RE_SHIFTABLE_HEADING.sub(r"\1\2", line, count=1)
    return "\n".join(lines)


def _asset_pattern(prefix: str) -> re.Pattern[str]:
    return re.compile(
        r"(?<![\w/.\-~])" + re.escape(prefix.rstrip("/")) + r"(?=/)"
    )


def rewrite_asset_urls(
    markdown_text: str,
    assets_dir: Path | str,
    *,
    prefix: str = DEFAULT_ASSET_PREFIX,
) -> str:
    """Point root-relative ``/assets/...`` references at ``assets_dir``."""

    absolute = Path(assets_dir).resolve().as_posix()
    return _asset_pattern(prefix).sub(lambda _match: absolute, markdown_text)


def unescape_entities(html: str) -> str:
    """Undo the quote entities Markdown rendering adds to code and text.

    Only text between tags is touched; attribute values keep their
    entities. ``&lt;``, ``&gt;`` and ``&amp;`` are kept so the document
    stays well-formed XHTML for the book package.
    """

    parts = RE_TAG.split(html)
    for index, part in enumerate(parts):
        if index % 2:
            continue
        for entity, character in QUOTE_ENTITIES.items():
            part = part.replace(entity, character)
        parts[index] = part
    return "".join(parts)


def find_relative_asset_refs(
    html: str, *, prefix: str = DEFAULT_ASSET_PREFIX
) -> List[str]:
    """Return link-like attribute values that still start with ``prefix``."""

    soup = BeautifulSoup(html, "lxml")
    prefix = prefix.rstrip("/") + "/"
    leftovers: List[str] = []
    for tag in soup.find_all(True):
        for attribute in LINK_ATTRIBUTES:
            value = tag.get(attribute)
            if isinstance(value, str) and value.startswith(prefix):
                leftovers.append(value)
    return leftovers


def prepare_markdown(
    markdown_text: str,
    assets_dir: Path | str,
    *,
    prefix: str = DEFAULT_ASSET_PREFIX,
) -> str:
    """Apply the pre-render rewrites in order: headings, then asset URLs."""

    shifted = shift_headings(markdown_text)
    return rewrite_asset_urls(shifted, assets_dir, prefix=prefix)


__all__ = [
    "DEFAULT_ASSET_PREFIX",
    "find_relative_asset_refs",
    "prepare_markdown",
    "rewrite_asset_urls",
    "shift_headings",
    "unescape_entities",
]
