"""Render images and export books for every post in one run."""

from __future__ import annotations

import argparse
import asyncio
from typing import Optional, Sequence

from config_loader import Settings  # type: ignore[import]
from pipelines import ebook_export, image_render  # type: ignore[import]
from pipelines.common.console import (  # type: ignore[import]
    add_common_arguments,
    configure_logging,
    print_summary,
    settings_from_args,
)
from publishing.discovery import discover_content


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for the combined post processor."""

    parser = argparse.ArgumentParser(
        description=(
            "Render social/cover images, then export books, for every post."
        )
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--base-url", help="Override the preview server URL."
    )
    parser.add_argument(
        "--skip-images", action="store_true", help="Do not render images."
    )
    parser.add_argument(
        "--skip-books", action="store_true", help="Do not export books."
    )
    return parser.parse_args(argv)


async def process(
    settings: Settings, *, images: bool = True, books: bool = True
) -> int:
    """Run the enabled pipelines in order and return the exit status."""

    sources = discover_content(settings.content_glob, settings.template_marker)
    if not sources:
        print(f"No posts matched {settings.content_glob}")
        return 0

    status = 0
    if images:
        # Covers must exist before books embed them.
        outcomes = await image_render.run(settings, sources=sources)
        status |= print_summary("Images", outcomes)
    if books:
        outcomes = await ebook_export.run(settings, sources=sources)
        status |= print_summary("Books", outcomes)
    return status


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the combined CLI."""

    args = parse_args(argv)
    configure_logging(args.verbose, args.quiet)
    settings = settings_from_args(args, preview_base_url=args.base_url)
    return asyncio.run(
        process(settings, images=not args.skip_images, books=not args.skip_books)
    )


if __name__ == "__main__":
    raise SystemExit(main())
