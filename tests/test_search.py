"""Tests for node and relationship search."""

from knowledge_nexus.data_models.entities import (
    GraphData,
    GraphLink,
    NodeQueryResult,
    RelationshipQueryResult,
)
from knowledge_nexus.graph.search import highlight_for, search_graph

from .factories import make_node


def apollo_graph() -> GraphData:
    return GraphData(
        nodes=[
            make_node("nasa", name="NASA", type="Organization", description="US space agency"),
            make_node("apollo_11", name="Apollo 11", type="Event", description="First crewed Moon landing"),
            make_node("armstrong", name="Neil Armstrong", type="Person", description="Commander"),
        ],
        links=[
            GraphLink(source="nasa", target="apollo_11", relationship="launched"),
            GraphLink(source="armstrong", target="apollo_11", relationship="commanded"),
            GraphLink(source="armstrong", target="ghost", relationship="launched"),
        ],
    )


def test_short_queries_return_nothing():
    assert search_graph(apollo_graph(), "a") == []
    assert search_graph(apollo_graph(), "   ") == []


def test_search_on_empty_graph():
    assert search_graph(GraphData(), "apollo") == []


def test_node_hits_come_before_relationship_hits():
    results = search_graph(apollo_graph(), "apollo")

    kinds = [result.kind for result in results]
    assert kinds == ["node", "relationship", "relationship"]
    assert results[0].node.id == "apollo_11"


def test_search_is_case_insensitive_and_matches_type():
    results = search_graph(apollo_graph(), "PERSON")
    assert [r.node.id for r in results if isinstance(r, NodeQueryResult)] == ["armstrong"]


def test_relationship_label_match_skips_links_to_missing_nodes():
    results = search_graph(apollo_graph(), "launched")

    relationships = [r for r in results if isinstance(r, RelationshipQueryResult)]
    assert len(relationships) == 1
    assert relationships[0].link.source == "nasa"
    assert relationships[0].link.target == "apollo_11"


def test_results_are_capped():
    nodes = [make_node(f"topic_{i}", description="shared topic") for i in range(10)]
    links = [
        GraphLink(source=f"topic_{i}", target=f"topic_{i + 1}", relationship="next")
        for i in range(9)
    ]
    results = search_graph(GraphData(nodes=nodes, links=links), "shared")

    assert sum(isinstance(r, NodeQueryResult) for r in results) == 6
    assert sum(isinstance(r, RelationshipQueryResult) for r in results) == 6


def test_node_highlight_has_no_link_keys():
    result = search_graph(apollo_graph(), "nasa")[0]

    highlights = highlight_for(result)

    assert highlights.node_ids == {"nasa"}
    assert highlights.link_keys == set()


def test_relationship_highlight_uses_link_key():
    result = next(
        r for r in search_graph(apollo_graph(), "commanded")
        if isinstance(r, RelationshipQueryResult)
    )

    highlights = highlight_for(result)

    assert highlights.node_ids == {"armstrong", "apollo_11"}
    assert highlights.link_keys == {"armstrong__commanded__apollo_11"}
