"""
Event orchestrator: runs a dependency graph of task nodes wave by wave.

Scheduling is level-synchronous (Kahn's algorithm):
1. Nodes with no predecessors form the first wave.
2. Every node of a wave is launched concurrently and the whole wave is awaited.
3. Each completed node releases its successors; a successor whose last
   predecessor just completed joins the next wave.
4. A failed node releases nothing. Its siblings in the same wave still run to
   completion, then the run stops and every node that never started is
   marked skipped.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from studyhub.events.context import RunContext
from studyhub.events.errors import OrchestrationError, StepFailedError
from studyhub.events.graph import Adjacency, DependencyGraph
from studyhub.events.task_node import NodeRun, NodeState, TaskNode

logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    """Outcome of one orchestrator run."""

    context: RunContext
    runs: dict[str, NodeRun]
    waves: list[list[str]] = field(default_factory=list)
    errors: dict[str, Exception] = field(default_factory=dict)
    failed_node: str | None = None
    duration: float = 0.0

    @property
    def succeeded(self) -> bool:
        return not self.errors and all(run.state is NodeState.COMPLETED for run in self.runs.values())

    def state(self, node_id: str) -> NodeState:
        return self.runs[node_id].state

    def result(self, node_id: str) -> Any:
        return self.context.result(node_id)

    def nodes_in_state(self, state: NodeState) -> set[str]:
        return {node_id for node_id, run in self.runs.items() if run.state is state}


class EventOrchestrator:
    """
    Drives one dependency graph to completion.

    The orchestrator is payload-agnostic: it only knows whether a node
    completed or failed. Data moves between nodes through the run context.
    """

    def __init__(self, graph: DependencyGraph | Adjacency, name: str = "pipeline"):
        self.graph = graph if isinstance(graph, DependencyGraph) else DependencyGraph(graph)
        self.name = name

    async def run(self, inputs: Mapping[str, Any] | None = None) -> RunReport:
        """
        Execute every node of the graph.

        Args:
            inputs: Request-level values exposed to work functions as ``context.inputs``

        Returns:
            RunReport with COMPLETED state for every node

        Raises:
            StepFailedError: If any node failed; carries the full report
        """
        start_time = time.time()
        context = RunContext(inputs)
        report = RunReport(
            context=context,
            runs={node_id: NodeRun(node_id) for node_id in self.graph.node_ids()},
        )
        remaining = self.graph.in_degrees()
        ready = self.graph.roots()

        logger.info(f"🚀 Starting {self.name}: {len(self.graph)} steps, {self.graph.edge_count} dependencies")

        while ready and not report.errors:
            wave_number = len(report.waves) + 1
            report.waves.append(list(ready))
            logger.info(f"🌊 Wave {wave_number}: {', '.join(ready)}")

            outcomes = await asyncio.gather(
                *(self._execute(self.graph.node(node_id), context, report.runs[node_id]) for node_id in ready),
                return_exceptions=True,
            )

            next_ready: list[str] = []
            for node_id, outcome in zip(ready, outcomes):
                if isinstance(outcome, Exception):
                    report.errors[node_id] = outcome
                    if report.failed_node is None:
                        report.failed_node = node_id
                    continue
                if isinstance(outcome, BaseException):
                    # Cancellation and interpreter exits are not step failures
                    raise outcome
                for successor in self.graph.successors(node_id):
                    remaining[successor] -= 1
                    if remaining[successor] == 0:
                        next_ready.append(successor)
            ready = next_ready

        report.duration = time.time() - start_time

        if report.errors:
            for run in report.runs.values():
                if run.state is NodeState.PENDING:
                    run.state = NodeState.SKIPPED
            skipped = sorted(report.nodes_in_state(NodeState.SKIPPED))
            logger.error(
                f"❌ {self.name} failed at '{report.failed_node}' after {report.duration:.2f}s "
                f"({len(report.errors)} failed, skipped: {', '.join(skipped) or 'none'})"
            )
            raise StepFailedError(report.failed_node, report) from report.errors[report.failed_node]

        if not report.succeeded:
            pending = sorted(report.nodes_in_state(NodeState.PENDING))
            raise OrchestrationError(f"{self.name} stopped with unreachable steps: {', '.join(pending)}")

        logger.info(f"🎉 {self.name} completed {len(report.runs)} steps in {len(report.waves)} waves ({report.duration:.2f}s)")
        return report

    async def _execute(self, node: TaskNode, context: RunContext, run: NodeRun) -> Any:
        run.state = NodeState.RUNNING
        run.started_at = time.monotonic()
        try:
            value = await node.execute(context)
        except Exception as e:
            run.finished_at = time.monotonic()
            run.state = NodeState.FAILED
            run.error = e
            logger.error(f"❌ Step '{node.label}' ({node.node_id}) failed after {run.duration:.2f}s: {e}", exc_info=True)
            raise
        run.finished_at = time.monotonic()
        run.state = NodeState.COMPLETED
        logger.info(f"✅ Step '{node.label}' completed in {run.duration:.2f}s")
        return value
