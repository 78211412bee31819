"""Normalization, import shape checks and export snapshots for graph payloads."""

import json
import logging
from collections.abc import Mapping
from typing import Any

from pydantic import ValidationError

from knowledge_nexus.data_models.entities import GraphData, GraphLink, GraphNode
from knowledge_nexus.graph.identity import LINK_KEY_DELIMITER, get_node_id

logger = logging.getLogger(__name__)

DEFAULT_NODE_VAL = 1


def _coerce_graph(
    raw: GraphData | Mapping[str, Any],
) -> tuple[list[GraphNode], list[GraphLink], int]:
    if isinstance(raw, GraphData):
        return raw.nodes, raw.links, 0

    nodes = GraphData.model_validate({"nodes": raw.get("nodes") or []}).nodes

    # Links are validated one at a time so a bad link only costs itself
    links: list[GraphLink] = []
    malformed_links = 0
    for item in raw.get("links") or []:
        try:
            links.append(GraphLink.model_validate(item))
        except ValidationError:
            malformed_links += 1
    return nodes, links, malformed_links


def normalize_graph_payload(raw: GraphData | Mapping[str, Any]) -> GraphData:
    """
    Produce a canonical graph from extracted or imported data.

    Every node gets its required fields with ``val`` defaulted to 1 when the
    raw size hint is missing or falsy. Link endpoints are collapsed to bare
    identifiers. Links that fail validation or point at unknown nodes are
    dropped; dropped links are counted in the log, never fatal. Normalizing a
    normalized graph returns an equal graph.

    Args:
        raw: Graph model or a mapping with ``nodes`` and ``links`` lists

    Returns:
        A new GraphData; the input is not mutated
    """
    raw_nodes, raw_links, malformed_links = _coerce_graph(raw)

    nodes: list[GraphNode] = []
    node_ids: set[str] = set()
    duplicate_nodes = 0
    for node in raw_nodes:
        if node.id in node_ids:
            duplicate_nodes += 1
            continue
        node_ids.add(node.id)
        nodes.append(
            GraphNode(
                id=node.id,
                name=node.name,
                type=node.type,
                description=node.description,
                val=node.val or DEFAULT_NODE_VAL,
                color=node.color,
            )
        )

    links: list[GraphLink] = []
    dropped_links = 0
    for link in raw_links:
        source = get_node_id(link.source)
        target = get_node_id(link.target)
        if source not in node_ids or target not in node_ids:
            dropped_links += 1
            continue
        links.append(
            GraphLink(source=source, target=target, relationship=link.relationship)
        )

    if duplicate_nodes:
        logger.warning(
            "[graph] Dropped %d node%s with a duplicate id.",
            duplicate_nodes,
            "" if duplicate_nodes == 1 else "s",
        )
    if malformed_links:
        logger.warning(
            "[graph] Dropped %d malformed link%s.",
            malformed_links,
            "" if malformed_links == 1 else "s",
        )
    if dropped_links:
        logger.warning(
            "[graph] Dropped %d link%s referencing missing nodes.",
            dropped_links,
            "" if dropped_links == 1 else "s",
        )

    return GraphData(nodes=nodes, links=links)


def _is_key_safe(value: Any) -> bool:
    return isinstance(value, str) and LINK_KEY_DELIMITER not in value


def _is_endpoint_shape(value: Any) -> bool:
    if isinstance(value, Mapping):
        value = value.get("id")
    return _is_key_safe(value)


def is_graph_data_shape(payload: Any) -> bool:
    """
    Check that a parsed JSON payload looks like a graph before importing it.

    Nodes need string ``id``, ``name``, ``type`` and ``description``; links need
    a string ``relationship`` and endpoints that are strings or objects with a
    string ``id``. Node ids, endpoints and relationships must not contain the
    link key delimiter.
    """
    if not isinstance(payload, Mapping):
        return False
    nodes = payload.get("nodes")
    links = payload.get("links")
    if not isinstance(nodes, list) or not isinstance(links, list):
        return False

    nodes_valid = all(
        isinstance(node, Mapping)
        and _is_key_safe(node.get("id"))
        and all(
            isinstance(node.get(field), str)
            for field in ("id", "name", "type", "description")
        )
        for node in nodes
    )
    links_valid = all(
        isinstance(link, Mapping)
        and _is_key_safe(link.get("relationship"))
        and _is_endpoint_shape(link.get("source"))
        and _is_endpoint_shape(link.get("target"))
        for link in links
    )
    return nodes_valid and links_valid


def create_graph_export_snapshot(graph: GraphData) -> GraphData:
    """Strip display-only fields and resolve link endpoints to bare ids."""
    return GraphData(
        nodes=[
            GraphNode(
                id=node.id,
                name=node.name,
                type=node.type,
                description=node.description,
                val=node.val,
                color=node.color,
            )
            for node in graph.nodes
        ],
        links=[
            GraphLink(
                relationship=link.relationship,
                source=get_node_id(link.source),
                target=get_node_id(link.target),
            )
            for link in graph.links
        ],
    )


def dump_graph_json(graph: GraphData, indent: int | None = 2) -> str:
    """Serialize an export snapshot of ``graph`` to re-importable JSON."""
    snapshot = create_graph_export_snapshot(graph)
    return json.dumps(snapshot.model_dump(mode="json", exclude_none=True), indent=indent)
