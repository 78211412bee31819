"""Structural validation of loaded graphs."""

from knowledge_nexus.data_models.entities import GraphData, ValidationReport
from knowledge_nexus.graph.identity import get_node_id


def validate_graph(graph: GraphData) -> ValidationReport:
    """
    Report links whose endpoints have no matching node.

    Diagnostic only: the graph is not modified and nothing is dropped. Works on
    graphs that never went through normalization.
    """
    issues: list[str] = []
    node_ids = {node.id for node in graph.nodes}

    for index, link in enumerate(graph.links):
        source_id = get_node_id(link.source)
        target_id = get_node_id(link.target)
        if source_id not in node_ids:
            issues.append(f"Link {index} references non-existent source: {source_id}")
        if target_id not in node_ids:
            issues.append(f"Link {index} references non-existent target: {target_id}")

    return ValidationReport(is_valid=not issues, issues=issues)
