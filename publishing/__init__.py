"""Ebook and image publishing helpers for Markdown posts."""

from .discovery import (
    FrontMatterError,
    MissingFrontMatterError,
    discover_content,
    load_item,
)
from .models import (
    BookArtifact,
    BookManuscript,
    Chapter,
    ContentItem,
    ImageArtifacts,
)

__all__ = [
    "BookArtifact",
    "BookManuscript",
    "Chapter",
    "ContentItem",
    "FrontMatterError",
    "ImageArtifacts",
    "MissingFrontMatterError",
    "discover_content",
    "load_item",
]
