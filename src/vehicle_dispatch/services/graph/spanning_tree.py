"""Kruskal minimum spanning forest over the zone network.

The forest is advisory topology for display. Routing decisions always use the
full-graph shortest paths in :mod:`.shortest_path`.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ...models.domain import Edge

logger = logging.getLogger(__name__)


class DisjointSet:
    """Union-find over dense integer indices with path compression and union by rank."""

    def __init__(self, size: int) -> None:
        self.parent = list(range(size))
        self.rank = [0] * size

    def find(self, index: int) -> int:
        root = index
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[index] != root:
            self.parent[index], index = root, self.parent[index]
        return root

    def union(self, left: int, right: int) -> bool:
        root_left = self.find(left)
        root_right = self.find(right)
        if root_left == root_right:
            return False

        if self.rank[root_left] < self.rank[root_right]:
            self.parent[root_left] = root_right
        elif self.rank[root_left] > self.rank[root_right]:
            self.parent[root_right] = root_left
        else:
            self.parent[root_right] = root_left
            self.rank[root_left] += 1
        return True


@dataclass(slots=True)
class SpanningForest:
    """Accepted forest edges plus the component root of every node."""

    edges: list[Edge]
    components: dict[str, str] = field(default_factory=dict)

    def component_count(self) -> int:
        return len(set(self.components.values()))

    def component_of(self, node_id: str) -> str | None:
        return self.components.get(node_id)

    def edges_in_component(self, node_id: str) -> list[Edge]:
        root = self.components.get(node_id)
        if root is None:
            return []
        return [edge for edge in self.edges if self.components.get(edge.source_id) == root]

    def tree_route(self, source_id: str, target_id: str) -> tuple[list[str], float] | None:
        """Return the unique forest path between two nodes and its summed weight.

        Display helper only; the forest may skip a shorter cross-branch edge.
        """
        if source_id not in self.components or target_id not in self.components:
            return None
        if self.components[source_id] != self.components[target_id]:
            return None
        if source_id == target_id:
            return [source_id], 0.0

        adjacency: dict[str, list[tuple[str, float]]] = {}
        for edge in self.edges:
            adjacency.setdefault(edge.source_id, []).append((edge.dest_id, edge.weight))
            adjacency.setdefault(edge.dest_id, []).append((edge.source_id, edge.weight))

        previous: dict[str, tuple[str, float] | None] = {source_id: None}
        queue = deque([source_id])
        while queue:
            node = queue.popleft()
            if node == target_id:
                break
            for neighbor, weight in adjacency.get(node, []):
                if neighbor not in previous:
                    previous[neighbor] = (node, weight)
                    queue.append(neighbor)

        path = [target_id]
        total = 0.0
        step = previous.get(target_id)
        while step is not None:
            node, weight = step
            total += weight
            path.append(node)
            step = previous[node]
        path.reverse()
        return path, total


def build_spanning_forest(node_ids: Sequence[str], edges: Iterable[Edge]) -> SpanningForest:
    """Compute a minimum spanning forest with Kruskal's algorithm.

    Edges are ordered by weight; ``sorted`` is stable so equal weights keep their
    input order, which makes the result deterministic.
    """
    index_of: dict[str, int] = {}
    for node_id in node_ids:
        index_of.setdefault(node_id, len(index_of))

    usable: list[Edge] = []
    for edge in edges:
        if edge.source_id not in index_of or edge.dest_id not in index_of:
            logger.warning(f"Ignoring edge {edge.id}: endpoint not in zone set")
            continue
        usable.append(edge)

    dsu = DisjointSet(len(index_of))
    accepted: list[Edge] = []
    target_size = len(index_of) - 1
    for edge in sorted(usable, key=lambda item: item.weight):
        if len(accepted) >= target_size:
            break
        if dsu.union(index_of[edge.source_id], index_of[edge.dest_id]):
            accepted.append(edge)

    node_by_index = {index: node_id for node_id, index in index_of.items()}
    components = {node_id: node_by_index[dsu.find(index)] for node_id, index in index_of.items()}

    logger.debug(f"Spanning forest: {len(accepted)} edges over {len(index_of)} zones")
    return SpanningForest(edges=accepted, components=components)
