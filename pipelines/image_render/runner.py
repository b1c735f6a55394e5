"""Execution wrapper for the social and cover image pipeline."""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from config_loader import Settings  # type: ignore[import]
from pipelines.common import paths  # type: ignore[import]
from pipelines.common.batch import (  # type: ignore[import]
    ItemOutcome,
    SkippedItem,
    run_bounded,
)
from publishing.discovery import (
    MissingFrontMatterError,
    discover_content,
    load_item,
)
from publishing.models import ContentItem, ImageArtifacts
from publishing.screenshots import (
    BOOK_ROUTE,
    COVER_VIEWPORT,
    SOCIAL_ROUTE,
    SOCIAL_VIEWPORT,
    SQUARE_VIEWPORT,
    PlaywrightCapturer,
    ScreenshotCapturer,
    build_template_url,
)
from publishing.thumbnails import derive_cover_variants

LOGGER = logging.getLogger(__name__)


class ImageRenderer:
    """Render the five image artifacts of each post with one capturer."""

    def __init__(self, settings: Settings, capturer: ScreenshotCapturer) -> None:
        self.settings = settings
        self.capturer = capturer

    def artifacts_for(self, item: ContentItem) -> ImageArtifacts:
        settings = self.settings
        return ImageArtifacts(
            slug=item.slug,
            social=paths.social_path(settings, item.slug),
            social_square=paths.social_square_path(settings, item.slug),
            cover=paths.cover_path(settings, item.slug),
            cover_thumb=paths.cover_thumb_path(settings, item.slug),
            cover_medium=paths.cover_medium_path(settings, item.slug),
        )

    async def render_item(self, item: ContentItem) -> ImageArtifacts:
        artifacts = self.artifacts_for(item)
        base_url = self.settings.preview_base_url
        fields = {
            "title": item.title,
            "description": item.description,
            "image": item.home_image,
        }
        social_url = build_template_url(base_url, SOCIAL_ROUTE, **fields)
        book_url = build_template_url(base_url, BOOK_ROUTE, **fields)

        await self.capturer.capture(social_url, artifacts.social, SOCIAL_VIEWPORT)
        await self.capturer.capture(
            social_url, artifacts.social_square, SQUARE_VIEWPORT
        )
        await self.capturer.capture(book_url, artifacts.cover, COVER_VIEWPORT)
        await asyncio.to_thread(
            derive_cover_variants,
            artifacts.cover,
            artifacts.cover_thumb,
            artifacts.cover_medium,
        )
        for path in artifacts.paths:
            print(f"✅ Image written: {path}")
        return artifacts

    async def render_path(self, path: Path) -> ImageArtifacts:
        try:
            item = await asyncio.to_thread(load_item, path)
        except MissingFrontMatterError as exc:
            if self.settings.skip_incomplete:
                raise SkippedItem(str(exc)) from exc
            raise
        LOGGER.info("Rendering images for %s", item.slug)
        return await self.render_item(item)


async def run(
    settings: Settings,
    *,
    sources: Optional[Sequence[Path]] = None,
    capturer: Optional[ScreenshotCapturer] = None,
) -> List[ItemOutcome[Path, ImageArtifacts]]:
    """Render images for every discovered post (or ``sources``).

    Without an explicit ``capturer`` one Playwright browser is launched for
    the whole run and closed once every item has finished.
    """

    if sources is None:
        sources = discover_content(
            settings.content_glob, settings.template_marker
        )
    if not sources:
        LOGGER.warning("No content found for %s", settings.content_glob)
        return []

    items = list(sources)
    if capturer is not None:
        renderer = ImageRenderer(settings, capturer)
        return await run_bounded(
            items, renderer.render_path, limit=settings.concurrency
        )

    async with PlaywrightCapturer(
        wait_until=settings.wait_until,
        timeout_ms=settings.navigation_timeout_ms,
    ) as browser_capturer:
        renderer = ImageRenderer(settings, browser_capturer)
        return await run_bounded(
            items, renderer.render_path, limit=settings.concurrency
        )


__all__ = ["ImageRenderer", "run"]
