"""Execution wrapper for the ebook export pipeline."""

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
from publishing.book import BookPackager, EpubPackager
from publishing.chapters import signoff_chapter, split_chapters
from publishing.discovery import (
    MissingFrontMatterError,
    discover_content,
    load_item,
)
from publishing.models import BookArtifact, BookManuscript, ContentItem
from publishing.rendering import (
    MarkdownRenderer,
    PythonMarkdownRenderer,
    render_book_html,
)
from publishing.transforms import find_relative_asset_refs, prepare_markdown

LOGGER = logging.getLogger(__name__)


def load_stylesheet(path: Path) -> str:
    if not path.is_file():
        LOGGER.warning("Book stylesheet not found: %s", path)
        return ""
    return path.read_text(encoding="utf-8")


class BookExporter:
    """Turn one post at a time into a packaged book."""

    def __init__(
        self,
        settings: Settings,
        *,
        renderer: Optional[MarkdownRenderer] = None,
        packager: Optional[BookPackager] = None,
        css: Optional[str] = None,
    ) -> None:
        self.settings = settings
        self.renderer = renderer or PythonMarkdownRenderer()
        self.packager = packager or EpubPackager()
        self.css = load_stylesheet(settings.book_css_path) if css is None else css

    def build_manuscript(self, item: ContentItem) -> BookManuscript:
        """Run the Markdown and HTML transformations for ``item``."""

        settings = self.settings
        prepared = prepare_markdown(
            item.body, settings.assets_dir, prefix=settings.asset_url_prefix
        )
        html = render_book_html(prepared, self.renderer)

        leftovers = find_relative_asset_refs(
            html, prefix=settings.asset_url_prefix
        )
        if leftovers:
            LOGGER.warning(
                "%s still references %d relative assets: %s",
                item.source_path,
                len(leftovers),
                ", ".join(leftovers),
            )

        chapters = split_chapters(html, fallback_title=item.title)
        chapters.append(
            signoff_chapter(
                item.title,
                author=settings.author,
                site_url=settings.site_url,
                contact_email=settings.contact_email,
            )
        )

        cover: Optional[Path] = paths.cover_path(settings, item.slug)
        if not cover.is_file():
            LOGGER.warning(
                "Cover image missing for %s: %s", item.slug, cover
            )
            cover = None

        return BookManuscript(
            title=item.title,
            slug=item.slug,
            author=settings.author,
            language=settings.language,
            css=self.css,
            chapters=chapters,
            cover_path=cover,
        )

    def export_item(self, item: ContentItem) -> BookArtifact:
        manuscript = self.build_manuscript(item)
        destination = paths.book_path(self.settings, item.title)
        written = self.packager.package(manuscript, destination)
        return BookArtifact(
            slug=item.slug,
            path=Path(written),
            chapter_count=len(manuscript.chapters),
        )

    async def export_path(self, path: Path) -> BookArtifact:
        try:
            item = await asyncio.to_thread(load_item, path)
        except MissingFrontMatterError as exc:
            if self.settings.skip_incomplete:
                raise SkippedItem(str(exc)) from exc
            raise

        LOGGER.info("Exporting book for %s", item.slug)
        artifact = await asyncio.to_thread(self.export_item, item)
        print(f"✅ Book written: {artifact.path}")
        return artifact


async def run(
    settings: Settings,
    *,
    sources: Optional[Sequence[Path]] = None,
    renderer: Optional[MarkdownRenderer] = None,
    packager: Optional[BookPackager] = None,
) -> List[ItemOutcome[Path, BookArtifact]]:
    """Export every discovered post (or ``sources``) as a book."""

    if sources is None:
        sources = discover_content(
            settings.content_glob, settings.template_marker
        )
    if not sources:
        LOGGER.warning("No content found for %s", settings.content_glob)
        return []

    exporter = BookExporter(settings, renderer=renderer, packager=packager)
    return await run_bounded(
        list(sources), exporter.export_path, limit=settings.concurrency
    )


__all__ = ["BookExporter", "load_stylesheet", "run"]
