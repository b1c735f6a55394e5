"""Render social cards and book covers for every Markdown post."""

from __future__ import annotations

import argparse
import asyncio
from typing import Optional, Sequence

from pipelines.common.console import (  # type: ignore[import]
    add_common_arguments,
    configure_logging,
    print_summary,
    settings_from_args,
)
from pipelines.image_render import run


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for the image renderer."""

    parser = argparse.ArgumentParser(
        description=(
            "Screenshot the preview server's social and book templates"
            " with Playwright."
        )
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--base-url",
        help="Override the preview server URL (e.g. http://localhost:8080).",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the image rendering CLI."""

    args = parse_args(argv)
    configure_logging(args.verbose, args.quiet)
    settings = settings_from_args(args, preview_base_url=args.base_url)
    outcomes = asyncio.run(run(settings))
    return print_summary("Images", outcomes)


if __name__ == "__main__":
    raise SystemExit(main())
