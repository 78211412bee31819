"""Tests for union-find connectivity analysis."""

import random

import networkx as nx
import pytest

from knowledge_nexus.data_models.entities import GraphData, GraphLink
from knowledge_nexus.graph.connectivity import (
    DisjointSet,
    count_components,
    find_disconnected_components,
)
from knowledge_nexus.graph.graphml import build_knowledge_graph

from .factories import make_node


def as_partition(components):
    return {frozenset(component) for component in components}


def test_no_links_gives_one_component_per_node(three_singletons):
    components = find_disconnected_components(three_singletons)
    assert as_partition(components) == {frozenset("A"), frozenset("B"), frozenset("C")}


def test_single_link_joins_two_nodes(pair_and_singleton):
    components = find_disconnected_components(pair_and_singleton)
    assert components == [["A", "B"], ["C"]]


def test_single_node_graph():
    graph = GraphData(nodes=[make_node("A")])
    assert find_disconnected_components(graph) == [["A"]]


def test_empty_graph_has_no_components():
    assert find_disconnected_components(GraphData()) == []


def test_links_are_undirected_for_connectivity():
    graph = GraphData(
        nodes=[make_node("A"), make_node("B"), make_node("C")],
        links=[
            GraphLink(source="A", target="B", relationship="r"),
            GraphLink(source="C", target="B", relationship="r"),
        ],
    )
    assert count_components(graph) == 1


def test_nodes_keep_input_order_within_component():
    graph = GraphData(
        nodes=[make_node("D"), make_node("A"), make_node("C"), make_node("B")],
        links=[
            GraphLink(source="B", target="D", relationship="r"),
            GraphLink(source="C", target="B", relationship="r"),
        ],
    )
    assert find_disconnected_components(graph) == [["D", "C", "B"], ["A"]]


def test_hydrated_endpoints_are_resolved(pair_and_singleton):
    graph = GraphData(
        nodes=pair_and_singleton.nodes,
        links=[GraphLink(source=make_node("A"), target=make_node("C"), relationship="r")],
    )
    assert as_partition(find_disconnected_components(graph)) == {
        frozenset({"A", "C"}),
        frozenset({"B"}),
    }


def test_dangling_endpoints_do_not_appear_in_components():
    graph = GraphData(
        nodes=[make_node("A"), make_node("B")],
        links=[
            GraphLink(source="A", target="Z", relationship="r"),
            GraphLink(source="Z", target="B", relationship="r"),
        ],
    )

    components = find_disconnected_components(graph)

    # Z is unknown but still bridges A and B through the union-find
    assert components == [["A", "B"]]


def test_input_is_not_mutated(pair_and_singleton):
    before = pair_and_singleton.model_dump()
    find_disconnected_components(pair_and_singleton)
    assert pair_and_singleton.model_dump() == before


def test_disjoint_set_compresses_paths():
    sets = DisjointSet()
    for a, b in [("a", "b"), ("b", "c"), ("c", "d"), ("d", "e")]:
        sets.union(a, b)

    root = sets.find("a")

    assert root == "e"
    assert sets._parent["a"] == "e"
    assert sets._parent["b"] == "e"


def test_disjoint_set_registers_lazily():
    sets = DisjointSet()
    assert "x" not in sets
    assert sets.find("x") == "x"
    assert "x" in sets


@pytest.mark.parametrize("seed", range(10))
def test_partition_matches_networkx(seed):
    rng = random.Random(seed)
    node_ids = [f"n{i}" for i in range(30)]
    links = [
        GraphLink(
            source=rng.choice(node_ids), target=rng.choice(node_ids), relationship="r"
        )
        for _ in range(rng.randint(0, 35))
    ]
    graph = GraphData(nodes=[make_node(node_id) for node_id in node_ids], links=links)

    components = find_disconnected_components(graph)

    expected = {
        frozenset(component)
        for component in nx.weakly_connected_components(build_knowledge_graph(graph))
    }
    assert as_partition(components) == expected

    # Pairwise disjoint and covering every node exactly once
    flattened = [node_id for component in components for node_id in component]
    assert sorted(flattened) == sorted(node_ids)

    component_of = {
        node_id: index
        for index, component in enumerate(components)
        for node_id in component
    }
    for link in links:
        assert component_of[link.source] == component_of[link.target]
