from vehicle_dispatch.models.domain import Edge
from vehicle_dispatch.services.graph import DisjointSet, build_spanning_forest


def _edge(eid: str, source: str, dest: str, weight: float) -> Edge:
    return Edge(id=eid, source_id=source, dest_id=dest, weight=weight)


def _connected_edges() -> list[Edge]:
    return [
        _edge("e1", "A", "B", 4.0),
        _edge("e2", "A", "C", 1.0),
        _edge("e3", "B", "C", 2.0),
        _edge("e4", "C", "D", 7.0),
        _edge("e5", "B", "D", 5.0),
        _edge("e6", "D", "E", 3.0),
        _edge("e7", "C", "E", 9.0),
    ]


def test_disjoint_set_union_and_find():
    dsu = DisjointSet(4)

    assert dsu.union(0, 1)
    assert dsu.union(2, 3)
    assert not dsu.union(1, 0)
    assert dsu.find(0) == dsu.find(1)
    assert dsu.find(0) != dsu.find(2)

    assert dsu.union(1, 3)
    assert len({dsu.find(index) for index in range(4)}) == 1


def test_connected_graph_has_v_minus_one_edges():
    forest = build_spanning_forest(["A", "B", "C", "D", "E"], _connected_edges())

    assert len(forest.edges) == 4
    assert [edge.id for edge in forest.edges] == ["e2", "e3", "e6", "e5"]
    assert sum(edge.weight for edge in forest.edges) == 11.0
    assert forest.component_count() == 1


def test_disconnected_graph_spans_every_component():
    edges = [
        _edge("e1", "A", "B", 1.0),
        _edge("e2", "B", "C", 2.0),
        _edge("e3", "A", "C", 3.0),
        _edge("e4", "D", "E", 1.5),
    ]

    forest = build_spanning_forest(["A", "B", "C", "D", "E", "F"], edges)

    # |V| - C = 6 - 3
    assert len(forest.edges) == 3
    assert forest.component_count() == 3
    assert forest.component_of("A") == forest.component_of("C")
    assert forest.component_of("D") != forest.component_of("A")
    assert [edge.id for edge in forest.edges_in_component("E")] == ["e4"]
    assert forest.edges_in_component("F") == []
    assert forest.edges_in_component("missing") == []


def test_equal_weights_keep_input_order():
    edges = [
        _edge("e1", "A", "B", 1.0),
        _edge("e2", "B", "C", 1.0),
        _edge("e3", "A", "C", 1.0),
    ]

    first = build_spanning_forest(["A", "B", "C"], edges)
    second = build_spanning_forest(["A", "B", "C"], edges)

    assert [edge.id for edge in first.edges] == ["e1", "e2"]
    assert first.edges == second.edges


def test_edges_with_unknown_endpoints_are_ignored():
    edges = [_edge("e1", "A", "B", 1.0), _edge("ghost", "A", "Z", 0.5)]

    forest = build_spanning_forest(["A", "B"], edges)

    assert [edge.id for edge in forest.edges] == ["e1"]


def test_tree_route_follows_forest_edges_only():
    edges = [
        _edge("ab", "A", "B", 1.0),
        _edge("bc", "B", "C", 1.0),
        _edge("cd", "C", "D", 1.0),
        _edge("ad", "A", "D", 2.5),
    ]
    forest = build_spanning_forest(["A", "B", "C", "D"], edges)

    assert forest.tree_route("A", "D") == (["A", "B", "C", "D"], 3.0)
    assert forest.tree_route("B", "B") == (["B"], 0.0)


def test_tree_route_between_components_is_none():
    forest = build_spanning_forest(["A", "B", "C"], [_edge("ab", "A", "B", 1.0)])

    assert forest.tree_route("A", "C") is None
    assert forest.tree_route("A", "missing") is None
