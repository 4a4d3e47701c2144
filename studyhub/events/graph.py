"""
Dependency graph for the event orchestrator.

The graph is given as forward edges: each node maps to the nodes that may only
start after it completes. Validation happens once, at construction, so a
malformed graph is rejected before anything is scheduled.

Edges can be passed as a mapping or as a sequence of ``(node, successors)``
pairs. Nodes hash by id, so a mapping has already merged keys that share an
id; pass pairs when two declarations might collide and should be rejected.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Union

from studyhub.events.errors import GraphValidationError
from studyhub.events.task_node import TaskNode

logger = logging.getLogger(__name__)

Adjacency = Union[Mapping[TaskNode, Sequence[TaskNode]], Iterable[tuple[TaskNode, Sequence[TaskNode]]]]


class DependencyGraph:
    """Validated, acyclic adjacency list of task nodes."""

    def __init__(self, adjacency: Adjacency):
        pairs = list(adjacency.items()) if isinstance(adjacency, Mapping) else list(adjacency)

        self._nodes: dict[str, TaskNode] = {}
        self._successors: dict[str, list[str]] = {}
        self._predecessors: dict[str, list[str]] = {}

        for node, successors in pairs:
            self._register(node)
            for successor in successors:
                self._register(successor)

        # A node listed twice (same object) has its successor lists merged
        for node, successors in pairs:
            edges = self._successors[node.node_id]
            for successor in successors:
                # Duplicate edges collapse: in-degree counts distinct predecessors
                if successor.node_id in edges:
                    continue
                edges.append(successor.node_id)
                self._predecessors[successor.node_id].append(node.node_id)

        self._check_acyclic()
        logger.debug(f"   Dependency graph validated: {len(self._nodes)} nodes, {self.edge_count} edges")

    def _register(self, node: TaskNode) -> None:
        existing = self._nodes.get(node.node_id)
        if existing is None:
            self._nodes[node.node_id] = node
            self._successors[node.node_id] = []
            self._predecessors[node.node_id] = []
        elif existing is not node:
            raise GraphValidationError(
                f"Two different nodes share the id '{node.node_id}'"
            )

    def _check_acyclic(self) -> None:
        in_degree = self.in_degrees()
        queue = [node_id for node_id, degree in in_degree.items() if degree == 0]
        visited = 0

        while queue:
            node_id = queue.pop()
            visited += 1
            for successor in self._successors[node_id]:
                in_degree[successor] -= 1
                if in_degree[successor] == 0:
                    queue.append(successor)

        if visited != len(self._nodes):
            stuck = sorted(node_id for node_id, degree in in_degree.items() if degree > 0)
            raise GraphValidationError(f"Dependency graph contains a cycle through: {', '.join(stuck)}")

    @property
    def edge_count(self) -> int:
        return sum(len(edges) for edges in self._successors.values())

    @property
    def nodes(self) -> list[TaskNode]:
        return list(self._nodes.values())

    def node(self, node_id: str) -> TaskNode:
        return self._nodes[node_id]

    def node_ids(self) -> list[str]:
        return list(self._nodes)

    def successors(self, node_id: str) -> list[str]:
        return list(self._successors[node_id])

    def predecessors(self, node_id: str) -> list[str]:
        return list(self._predecessors[node_id])

    def in_degrees(self) -> dict[str, int]:
        return {node_id: len(preds) for node_id, preds in self._predecessors.items()}

    def roots(self) -> list[str]:
        return [node_id for node_id, preds in self._predecessors.items() if not preds]

    def waves(self) -> list[set[str]]:
        """
        Level plan followed by the orchestrator when every node succeeds.

        Wave N holds the nodes whose last predecessor completes in wave N-1.
        """
        in_degree = self.in_degrees()
        current = self.roots()
        plan: list[set[str]] = []

        while current:
            plan.append(set(current))
            upcoming: list[str] = []
            for node_id in current:
                for successor in self._successors[node_id]:
                    in_degree[successor] -= 1
                    if in_degree[successor] == 0:
                        upcoming.append(successor)
            current = upcoming

        return plan

    def __contains__(self, node: object) -> bool:
        if isinstance(node, TaskNode):
            return node.node_id in self._nodes
        return node in self._nodes

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[TaskNode]:
        return iter(self._nodes.values())
