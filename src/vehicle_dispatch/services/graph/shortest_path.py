"""Dijkstra shortest paths over the full zone network."""

from __future__ import annotations

import heapq
import itertools
import math
from dataclasses import dataclass
from typing import Iterable

from ...models.domain import Edge


@dataclass(slots=True)
class PathResult:
    nodes: list[str]
    distance: float


@dataclass(slots=True)
class ShortestPathTree:
    """Distances and predecessors from one source, as settled by Dijkstra."""

    source: str
    distances: dict[str, float]
    previous: dict[str, str]

    def distance_to(self, node_id: str) -> float:
        return self.distances.get(node_id, math.inf)

    def path_to(self, node_id: str) -> PathResult | None:
        if node_id == self.source:
            return PathResult(nodes=[node_id], distance=0.0)
        if node_id not in self.previous:
            return None
        nodes = [node_id]
        while nodes[-1] != self.source:
            nodes.append(self.previous[nodes[-1]])
        nodes.reverse()
        return PathResult(nodes=nodes, distance=self.distances[node_id])


def build_adjacency(edges: Iterable[Edge]) -> dict[str, list[tuple[str, float]]]:
    """Adjacency list with both directions for every edge; parallel edges are kept."""
    adjacency: dict[str, list[tuple[str, float]]] = {}
    for edge in edges:
        adjacency.setdefault(edge.source_id, []).append((edge.dest_id, edge.weight))
        adjacency.setdefault(edge.dest_id, []).append((edge.source_id, edge.weight))
    return adjacency


def shortest_path_tree(
    adjacency: dict[str, list[tuple[str, float]]],
    source: str,
    target: str | None = None,
) -> ShortestPathTree:
    """Run Dijkstra from ``source``; stop early once ``target`` is settled."""
    distances: dict[str, float] = {source: 0.0}
    previous: dict[str, str] = {}
    visited: set[str] = set()
    # counter keeps heap order stable for equal distances
    counter = itertools.count()
    queue: list[tuple[float, int, str]] = [(0.0, next(counter), source)]

    while queue:
        distance, _, node = heapq.heappop(queue)
        if node in visited:
            continue
        visited.add(node)
        if node == target:
            break
        for neighbor, weight in adjacency.get(node, []):
            if neighbor in visited:
                continue
            candidate = distance + weight
            if candidate < distances.get(neighbor, math.inf):
                distances[neighbor] = candidate
                previous[neighbor] = node
                heapq.heappush(queue, (candidate, next(counter), neighbor))

    return ShortestPathTree(source=source, distances=distances, previous=previous)


def find_shortest_path(edges: Iterable[Edge], source: str, target: str) -> PathResult | None:
    """Return the minimum-weight path from ``source`` to ``target`` or None if unreachable."""
    if source == target:
        return PathResult(nodes=[source], distance=0.0)
    tree = shortest_path_tree(build_adjacency(edges), source, target)
    return tree.path_to(target)
