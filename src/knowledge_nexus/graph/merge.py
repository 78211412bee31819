"""Merging externally proposed links into a graph."""

import logging

from knowledge_nexus.data_models.entities import GraphData, GraphLink
from knowledge_nexus.graph.identity import build_link_key, get_node_id

logger = logging.getLogger(__name__)


def merge_candidate_links(
    graph: GraphData, candidates: list[GraphLink]
) -> tuple[GraphData, int]:
    """
    Append candidate links that are valid and new.

    A candidate is rejected when either endpoint is not a node of ``graph``,
    or when its link key matches an existing link or a candidate accepted
    earlier in the same batch. Existing links are kept in order with their
    endpoints resolved to bare identifiers.

    Returns:
        Tuple of (merged graph, number of links appended)
    """
    node_ids = {node.id for node in graph.nodes}

    links = [
        GraphLink(
            source=get_node_id(link.source),
            target=get_node_id(link.target),
            relationship=link.relationship,
        )
        for link in graph.links
    ]
    seen_keys = {build_link_key(link) for link in links}

    added = 0
    for candidate in candidates:
        source_id = get_node_id(candidate.source)
        target_id = get_node_id(candidate.target)

        if source_id not in node_ids or target_id not in node_ids:
            logger.warning(
                f"Bridging proposed an invalid link: {source_id} -> {target_id}. Skipping."
            )
            continue

        link = GraphLink(
            source=source_id, target=target_id, relationship=candidate.relationship
        )
        key = build_link_key(link)
        if key in seen_keys:
            continue

        seen_keys.add(key)
        links.append(link)
        added += 1

    return GraphData(nodes=list(graph.nodes), links=links), added
