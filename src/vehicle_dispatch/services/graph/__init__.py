"""Graph algorithms for the zone network."""

from .shortest_path import (
    PathResult,
    ShortestPathTree,
    build_adjacency,
    find_shortest_path,
    shortest_path_tree,
)
from .spanning_tree import DisjointSet, SpanningForest, build_spanning_forest

__all__ = [
    "DisjointSet",
    "PathResult",
    "ShortestPathTree",
    "SpanningForest",
    "build_adjacency",
    "build_spanning_forest",
    "find_shortest_path",
    "shortest_path_tree",
]
