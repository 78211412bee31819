"""Builders for test graphs."""

from knowledge_nexus.data_models.entities import GraphNode


def make_node(node_id: str, **overrides) -> GraphNode:
    fields = {
        "id": node_id,
        "name": node_id.upper(),
        "type": "Concept",
        "description": f"Description of {node_id}",
        "val": 1,
    }
    fields.update(overrides)
    return GraphNode(**fields)
