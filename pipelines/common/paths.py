"""Deterministic artifact paths derived from settings and item slugs."""

from __future__ import annotations

import re
from pathlib import Path

from config_loader import Settings  # type: ignore[import]

RE_PATH_SEPARATORS = re.compile(r"[\\/]")

BOOK_SUFFIX = ".epub"
SQUARE_SUFFIX = "-square"
THUMB_SUFFIX = "-thumb"
MEDIUM_SUFFIX = "-medium"


def book_filename(title: str) -> str:
    """Return ``<title>.epub`` with path separators replaced by ``-``."""
    return RE_PATH_SEPARATORS.sub("-", title.strip()) + BOOK_SUFFIX


def book_path(settings: Settings, title: str) -> Path:
    return settings.books_dir / book_filename(title)


def social_path(settings: Settings, slug: str) -> Path:
    return settings.social_dir / f"{slug}.png"


def social_square_path(settings: Settings, slug: str) -> Path:
    return settings.social_dir / f"{slug}{SQUARE_SUFFIX}.png"


def cover_path(settings: Settings, slug: str) -> Path:
    return settings.covers_dir / f"{slug}.png"


def cover_thumb_path(settings: Settings, slug: str) -> Path:
    return settings.covers_dir / f"{slug}{THUMB_SUFFIX}.png"


def cover_medium_path(settings: Settings, slug: str) -> Path:
    return settings.covers_dir / f"{slug}{MEDIUM_SUFFIX}.png"
