"""Bounded-concurrency execution of per-item async work."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, Generic, List, Optional, Sequence, TypeVar

LOGGER = logging.getLogger(__name__)

ItemT = TypeVar("ItemT")
ResultT = TypeVar("ResultT")


class SkippedItem(Exception):
    """Raised by a worker to leave an item out of the failure count."""


@dataclass(slots=True)
class ItemOutcome(Generic[ItemT, ResultT]):
    """What happened to one item of a batch."""

    item: ItemT
    result: Optional[ResultT] = None
    error: Optional[BaseException] = None
    skipped: bool = False

    @property
    def ok(self) -> bool:
        return self.error is None and not self.skipped


@dataclass(frozen=True, slots=True)
class BatchCounts:
    total: int
    successful: int
    failed: int
    skipped: int = 0


async def run_bounded(
    items: Sequence[ItemT],
    worker: Callable[[ItemT], Awaitable[ResultT]],
    *,
    limit: int,
) -> List[ItemOutcome[ItemT, ResultT]]:
    """Run ``worker`` over ``items`` with at most ``limit`` in flight.

    Every item is awaited before this returns and outcomes keep input
    order. An exception from one item is recorded on its outcome and does
    not cancel the rest; ``SkippedItem`` marks the outcome as skipped.
    """

    if limit < 1:
        raise ValueError(f"limit must be at least 1, got {limit}")

    semaphore = asyncio.Semaphore(limit)

    async def _guarded(item: ItemT) -> ItemOutcome[ItemT, ResultT]:
        async with semaphore:
            try:
                result = await worker(item)
            except SkippedItem as exc:
                LOGGER.warning("Skipped %s: %s", item, exc)
                return ItemOutcome(item=item, error=None, skipped=True)
            except Exception as exc:
                LOGGER.error("Failed %s: %s", item, exc)
                LOGGER.debug("Traceback for %s", item, exc_info=exc)
                return ItemOutcome(item=item, error=exc)
            return ItemOutcome(item=item, result=result)

    return list(await asyncio.gather(*(_guarded(item) for item in items)))


def summarize(outcomes: Sequence[ItemOutcome[ItemT, ResultT]]) -> BatchCounts:
    skipped = sum(1 for outcome in outcomes if outcome.skipped)
    failed = sum(1 for outcome in outcomes if outcome.error is not None)
    return BatchCounts(
        total=len(outcomes),
        successful=len(outcomes) - failed - skipped,
        failed=failed,
        skipped=skipped,
    )


__all__ = [
    "BatchCounts",
    "ItemOutcome",
    "SkippedItem",
    "run_bounded",
    "summarize",
]
