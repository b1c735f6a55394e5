"""Locate Markdown posts and parse their YAML front matter."""

from __future__ import annotations

import glob
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence, Tuple

try:
    import yaml  # type: ignore[import-untyped]
except ImportError as exc:  # pragma: no cover - surfaced at runtime
    raise SystemExit(
        "Missing dependency 'pyyaml'. Install with pip install pyyaml"
    ) from exc

from .models import ContentItem

LOGGER = logging.getLogger(__name__)

TEMPLATE_MARKER = "_template"
DEFAULT_REQUIRED_FIELDS = ("title", "slug")
OPTIONAL_FIELDS = {"description": "description", "homeImage": "home_image"}

RE_FENCE_LINE = re.compile(r"^---[ \t]*$", re.MULTILINE)


class FrontMatterError(ValueError):
    """Raised when a post's front matter cannot be used."""

    def __init__(self, path: Path | str, message: str) -> None:
        super().__init__(f"{path}: {message}")
        self.path = Path(path)


class MissingFrontMatterError(FrontMatterError):
    """Raised when required front-matter fields are absent or empty."""

    def __init__(self, path: Path | str, missing: Sequence[str]) -> None:
        super().__init__(
            path, f"missing required front matter: {', '.join(missing)}"
        )
        self.missing = tuple(missing)


def discover_content(
    pattern: str, marker: str = TEMPLATE_MARKER
) -> List[Path]:
    """Return files matching ``pattern`` that do not contain ``marker``."""

    matches = glob.glob(pattern, recursive=True)
    paths = [
        Path(match)
        for match in sorted(matches)
        if marker not in match and Path(match).is_file()
    ]
    LOGGER.debug(
        "Discovered %d content files for %s (%d excluded)",
        len(paths),
        pattern,
        len(matches) - len(paths),
    )
    return paths


def parse_front_matter(
    text: str, *, path: Path | str = "<string>"
) -> Tuple[Dict[str, Any], str]:
    """Split ``text`` into its front-matter mapping and Markdown body."""

    if text.startswith("\ufeff"):
        text = text[1:]
    opening = RE_FENCE_LINE.match(text)
    if not opening:
        return {}, text

    closing = RE_FENCE_LINE.search(text, opening.end())
    if not closing:
        raise FrontMatterError(path, "front matter block is never closed")

    raw_block = text[opening.end():closing.start()]
    body = text[closing.end():].lstrip("\r\n")

    try:
        data = yaml.safe_load(raw_block)
    except yaml.YAMLError as exc:
        raise FrontMatterError(path, f"invalid YAML: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            path,
            f"front matter must be a mapping, got {type(data).__name__}",
        )
    return data, body


def _text_field(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def load_item(
    path: Path | str,
    *,
    required: Iterable[str] = DEFAULT_REQUIRED_FIELDS,
) -> ContentItem:
    """Read ``path`` and return a validated :class:`ContentItem`."""

    path = Path(path)
    text = path.read_text(encoding="utf-8")
    metadata, body = parse_front_matter(text, path=path)

    missing = [key for key in required if not _text_field(metadata.get(key))]
    if missing:
        raise MissingFrontMatterError(path, missing)

    slug = _text_field(metadata.get("slug"))
    if "/" in slug or "\\" in slug:
        raise FrontMatterError(path, f"slug must not contain '/': {slug!r}")

    optional: Dict[str, str] = {}
    for key, attribute in OPTIONAL_FIELDS.items():
        value = _text_field(metadata.get(key))
        if not value:
            LOGGER.warning("%s has no '%s' front matter", path, key)
        optional[attribute] = value

    return ContentItem(
        title=_text_field(metadata.get("title")),
        slug=slug,
        description=optional["description"],
        home_image=optional["home_image"],
        body=body,
        source_path=path,
        metadata=dict(metadata),
    )


__all__ = [
    "FrontMatterError",
    "MissingFrontMatterError",
    "TEMPLATE_MARKER",
    "discover_content",
    "load_item",
    "parse_front_matter",
]
