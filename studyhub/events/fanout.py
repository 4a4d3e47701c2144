"""
Best-effort concurrent fan-out.

Used inside a task node when a batch of independent items should be processed
concurrently without one item's failure failing the node. Failures are logged
and handed back to the caller instead of being raised.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class ItemError:
    """A single item that failed during a best-effort fan-out."""

    index: int
    item: str
    error: Exception

    @property
    def message(self) -> str:
        return f"{type(self.error).__name__}: {self.error}"


@dataclass
class FanOutResult(Generic[R]):
    results: list[R] = field(default_factory=list)
    errors: list[ItemError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


async def run_best_effort(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    *,
    describe: Callable[[T], str] = str,
) -> FanOutResult[R]:
    """
    Run ``worker`` for every item concurrently and collect per-item failures.

    Args:
        items: Inputs, one worker call each
        worker: Async function processing a single item
        describe: Produces the label stored in ItemError and log lines

    Returns:
        FanOutResult with the successful values (input order) and the failures
    """
    outcome: FanOutResult[R] = FanOutResult()
    if not items:
        return outcome

    raw: list[Any] = await asyncio.gather(*(worker(item) for item in items), return_exceptions=True)

    for index, (item, value) in enumerate(zip(items, raw)):
        if isinstance(value, Exception):
            label = describe(item)
            logger.warning(f"⚠️  {label} failed (continuing with remaining items): {value}")
            outcome.errors.append(ItemError(index=index, item=label, error=value))
        elif isinstance(value, BaseException):
            raise value
        else:
            outcome.results.append(value)

    logger.info(f"📦 Fan-out finished: {len(outcome.results)}/{len(items)} succeeded")
    return outcome
