"""
Exception hierarchy for the event orchestrator.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from studyhub.events.orchestrator import RunReport


class OrchestrationError(Exception):
    """Base exception for orchestrator failures."""

    pass


class GraphValidationError(OrchestrationError):
    """The dependency graph is malformed (cycle, conflicting node ids)."""

    pass


class ResultNotReadyError(OrchestrationError):
    """A result slot was read before its node completed."""

    def __init__(self, node_id: str):
        super().__init__(f"Result for node '{node_id}' is not available yet")
        self.node_id = node_id


class StepFailedError(OrchestrationError):
    """
    A task node failed and the run was aborted.

    The original exception is chained as ``__cause__``. ``report`` holds the
    state of every node when the run stopped, including all captured errors
    when several nodes of the same wave failed.
    """

    def __init__(self, node_id: str, report: RunReport):
        error = report.errors[node_id]
        super().__init__(f"Step '{node_id}' failed: {error}")
        self.node_id = node_id
        self.report = report

    @property
    def error(self) -> Exception:
        return self.report.errors[self.node_id]
