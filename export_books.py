"""Export every Markdown post as an EPUB book."""

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
from pipelines.ebook_export import run


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse CLI arguments for the book exporter."""

    parser = argparse.ArgumentParser(
        description="Package each post as an EPUB with a closing chapter."
    )
    add_common_arguments(parser)
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Entry point for the book export CLI."""

    args = parse_args(argv)
    configure_logging(args.verbose, args.quiet)
    settings = settings_from_args(args)
    outcomes = asyncio.run(run(settings))
    return print_summary("Books", outcomes)


if __name__ == "__main__":
    raise SystemExit(main())
