"""
Per-run result store handed to every task node.
"""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from studyhub.events.errors import ResultNotReadyError


class RunContext:
    """
    Results of one orchestrator run, keyed by node id, plus the run inputs.

    A fresh context is created for every run so a node can only ever see
    results produced during the same run. Each slot is written once.
    """

    def __init__(self, inputs: Mapping[str, Any] | None = None):
        self.inputs: Mapping[str, Any] = MappingProxyType(dict(inputs or {}))
        self._results: dict[str, Any] = {}

    def result(self, node_id: str) -> Any:
        if node_id not in self._results:
            raise ResultNotReadyError(node_id)
        return self._results[node_id]

    def set_result(self, node_id: str, value: Any) -> None:
        if node_id in self._results:
            raise RuntimeError(f"Result for node '{node_id}' was already stored in this run")
        self._results[node_id] = value

    def __repr__(self) -> str:
        return f"RunContext(completed={sorted(self._results)})"
