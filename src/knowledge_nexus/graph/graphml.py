"""NetworkX conversion for offline analysis and GraphML export."""

from pathlib import Path

import networkx as nx

from knowledge_nexus.data_models.entities import GraphData
from knowledge_nexus.graph.identity import get_node_id


def build_knowledge_graph(graph: GraphData) -> nx.MultiDiGraph:
    """Build a directed multigraph; parallel relationships are kept."""
    G = nx.MultiDiGraph()

    for node in graph.nodes:
        G.add_node(
            node.id,
            name=node.name,
            entity_type=node.type,
            description=node.description,
            val=node.val if node.val is not None else 1,
        )

    for link in graph.links:
        source_id = get_node_id(link.source)
        target_id = get_node_id(link.target)
        if source_id in G and target_id in G:
            G.add_edge(source_id, target_id, relationship=link.relationship)

    return G


def write_graphml(graph: GraphData, path: Path) -> None:
    """Write ``graph`` as GraphML."""
    path.parent.mkdir(parents=True, exist_ok=True)
    nx.write_graphml(build_knowledge_graph(graph), path)
