"""Free-text search over nodes and relationships."""

from knowledge_nexus.data_models.entities import (
    GraphData,
    GraphLink,
    HighlightSet,
    NodeQueryResult,
    QueryResult,
    RelationshipQueryResult,
)
from knowledge_nexus.graph.identity import build_link_key, get_node_id

MIN_QUERY_LENGTH = 2
MAX_NODE_RESULTS = 6
MAX_RELATIONSHIP_RESULTS = 6


def search_graph(
    graph: GraphData,
    query: str,
    min_query_length: int = MIN_QUERY_LENGTH,
    max_node_results: int = MAX_NODE_RESULTS,
    max_relationship_results: int = MAX_RELATIONSHIP_RESULTS,
) -> list[QueryResult]:
    """
    Find nodes and relationships mentioning ``query`` (case-insensitive).

    Node hits come first, then relationship hits. A relationship matches on its
    label or on either endpoint's name and description. Links with an endpoint
    missing from the graph are skipped.
    """
    term = query.strip().lower()
    if not term or len(term) < min_query_length or not graph.nodes:
        return []

    node_map = {node.id: node for node in graph.nodes}

    node_matches = [
        NodeQueryResult(node=node)
        for node in graph.nodes
        if any(
            term in value.lower()
            for value in (node.name, node.description, node.type, node.id)
        )
    ]

    relationship_matches = []
    for link in graph.links:
        source_id = get_node_id(link.source)
        target_id = get_node_id(link.target)
        source = node_map.get(source_id)
        target = node_map.get(target_id)
        if source is None or target is None:
            continue

        relationship_text = (link.relationship or "").lower()
        source_text = f"{source.name} {source.description}".lower()
        target_text = f"{target.name} {target.description}".lower()
        if term in relationship_text or term in source_text or term in target_text:
            relationship_matches.append(
                RelationshipQueryResult(
                    link=GraphLink(
                        source=source_id,
                        target=target_id,
                        relationship=link.relationship,
                    ),
                    source=source,
                    target=target,
                )
            )

    return [
        *node_matches[:max_node_results],
        *relationship_matches[:max_relationship_results],
    ]


def highlight_for(result: QueryResult) -> HighlightSet:
    """Nodes and link keys to emphasise when a search result is selected."""
    if isinstance(result, NodeQueryResult):
        return HighlightSet(node_ids={result.node.id})
    return HighlightSet(
        node_ids={result.source.id, result.target.id},
        link_keys={build_link_key(result.link)},
    )
