"""Markdown post to EPUB export pipeline."""

from .runner import BookExporter, run

__all__ = ["BookExporter", "run"]
