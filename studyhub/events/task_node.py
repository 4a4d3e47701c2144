"""
Task node: a named unit of asynchronous work inside an orchestrated run.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from studyhub.events.context import RunContext

logger = logging.getLogger(__name__)

WorkFunction = Callable[[RunContext], Awaitable[Any]]


class NodeState(str, Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    SKIPPED = "skipped"  # never started because a predecessor failed


@dataclass(frozen=True)
class TaskNode:
    """
    A named step with its final, fully bound work function.

    Nodes compare and hash by ``node_id`` so they can key a dependency graph.
    The work function receives the run context and reads any predecessor
    output from it; the node never holds a result itself.
    """

    node_id: str
    label: str = field(compare=False)
    description: str = field(compare=False)
    work: WorkFunction = field(compare=False, repr=False)

    async def execute(self, context: RunContext) -> Any:
        """
        Run the work function and store its value in ``context``.

        Raises whatever the work function raises; nothing is stored then.
        """
        start_time = time.time()
        logger.debug(f"   ▶️  {self.label} ({self.node_id}) started")

        value = await self.work(context)
        context.set_result(self.node_id, value)

        logger.debug(f"   ✅ {self.label} ({self.node_id}) finished in {time.time() - start_time:.3f}s")
        return value


@dataclass
class NodeRun:
    """Lifecycle record of one node during one run."""

    node_id: str
    state: NodeState = NodeState.PENDING
    started_at: float | None = None
    finished_at: float | None = None
    error: Exception | None = None

    @property
    def duration(self) -> float | None:
        if self.started_at is None or self.finished_at is None:
            return None
        return self.finished_at - self.started_at
