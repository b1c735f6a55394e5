"""Downscaled cover variants generated with Pillow."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Tuple

try:
    from PIL import Image  # type: ignore[import-not-found]
except ImportError as exc:  # pragma: no cover - surfaced at runtime
    raise SystemExit(
        "Missing dependency 'pillow'. Install with pip install pillow"
    ) from exc

LOGGER = logging.getLogger(__name__)

THUMB_SIZE = (250, 400)
MEDIUM_SIZE = (500, 800)


def resize_image(source: Path, destination: Path, size: Tuple[int, int]) -> Path:
    """Write ``source`` resized to exactly ``size`` as a PNG."""

    destination.parent.mkdir(parents=True, exist_ok=True)
    with Image.open(source) as image:
        resized = image.resize(size, Image.Resampling.LANCZOS)
        resized.save(destination, format="PNG")
    LOGGER.debug("Resized %s to %dx%d -> %s", source, *size, destination)
    return destination


def derive_cover_variants(
    cover: Path, thumb: Path, medium: Path
) -> Tuple[Path, Path]:
    return (
        resize_image(cover, thumb, THUMB_SIZE),
        resize_image(cover, medium, MEDIUM_SIZE),
    )


__all__ = ["MEDIUM_SIZE", "THUMB_SIZE", "derive_cover_variants", "resize_image"]
