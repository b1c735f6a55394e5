"""Shared dataclasses for post export artifacts."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional


@dataclass(frozen=True, slots=True)
class ContentItem:
    """One Markdown post with its parsed front matter."""

    title: str
    slug: str
    description: str
    home_image: str
    body: str
    source_path: Path
    metadata: Dict[str, Any] = field(default_factory=dict)


@dataclass(slots=True)
class Chapter:
    """A titled HTML fragment packaged as one book section."""

    title: str
    data: str


@dataclass(slots=True)
class BookManuscript:
    """Everything a packager needs to write one book."""

    title: str
    slug: str
    author: str
    language: str
    css: str
    chapters: List[Chapter]
    cover_path: Optional[Path] = None


@dataclass(slots=True)
class BookArtifact:
    """Location and shape of a packaged book."""

    slug: str
    path: Path
    chapter_count: int


@dataclass(slots=True)
class ImageArtifacts:
    """The five image files rendered for a single post."""

    slug: str
    social: Path
    social_square: Path
    cover: Path
    cover_thumb: Path
    cover_medium: Path

    @property
    def paths(self) -> List[Path]:
        """Return every artifact path in render order."""

        return [
            self.social,
            self.social_square,
            self.cover,
            self.cover_thumb,
            self.cover_medium,
        ]
