"""Social card and book cover rendering pipeline."""

from .runner import ImageRenderer, run

__all__ = ["ImageRenderer", "run"]
