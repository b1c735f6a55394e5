"""Logging setup and run summaries shared by the command-line tools."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Sequence

from config_loader import ConfigError, Settings, load_settings  # type: ignore[import]
from pipelines.common.batch import ItemOutcome, summarize  # type: ignore[import]

LOG_FORMAT = "%(levelname)s: %(message)s"


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT, force=True)


def print_summary(label: str, outcomes: Sequence[ItemOutcome]) -> int:
    """Print the per-run totals and return the process exit status."""

    counts = summarize(outcomes)
    for outcome in outcomes:
        if outcome.error is not None:
            print(f"⚠️ {label} failed for {outcome.item}: {outcome.error}")

    line = (
        f"{label}: {counts.successful}/{counts.total} succeeded,"
        f" {counts.failed} failed"
    )
    if counts.skipped:
        line += f", {counts.skipped} skipped"
    if counts.failed:
        print(f"⚠️ {line}")
        return 1
    print(f"✅ {line}")
    return 0


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Register the flags every command accepts."""

    parser.add_argument("--config", help="Path to config JSON file.")
    parser.add_argument(
        "--concurrency",
        type=int,
        help="Maximum number of posts processed at once.",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output."
    )
    verbosity.add_argument(
        "-q", "--quiet", action="store_true", help="Only log warnings."
    )


def settings_from_args(
    args: argparse.Namespace, **overrides: Any
) -> Settings:
    """Load settings for ``args``, exiting with a config error message."""

    overrides["concurrency"] = args.concurrency
    try:
        return load_settings(args.config, overrides=overrides)
    except ConfigError as exc:
        raise SystemExit(f"Config error: {exc}") from exc


__all__ = [
    "LOG_FORMAT",
    "add_common_arguments",
    "configure_logging",
    "print_summary",
    "settings_from_args",
]
