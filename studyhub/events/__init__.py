"""
Dependency-graph task orchestration.
"""

from studyhub.events.context import RunContext
from studyhub.events.errors import (
    GraphValidationError,
    OrchestrationError,
    ResultNotReadyError,
    StepFailedError,
)
from studyhub.events.fanout import FanOutResult, ItemError, run_best_effort
from studyhub.events.graph import DependencyGraph
from studyhub.events.orchestrator import EventOrchestrator, RunReport
from studyhub.events.task_node import NodeRun, NodeState, TaskNode

__all__ = [
    "DependencyGraph",
    "EventOrchestrator",
    "FanOutResult",
    "GraphValidationError",
    "ItemError",
    "NodeRun",
    "NodeState",
    "OrchestrationError",
    "ResultNotReadyError",
    "RunContext",
    "RunReport",
    "StepFailedError",
    "TaskNode",
    "run_best_effort",
]
