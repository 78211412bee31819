"""Graph consistency and unification engine."""

from .connectivity import DisjointSet, count_components, find_disconnected_components
from .exceptions import (
    EmptyGraphError,
    ExtractionError,
    GraphError,
    GraphImportError,
    RefinementInProgressError,
    StaleGraphError,
    UnificationError,
)
from .identity import build_link_key, get_node_id
from .normalizer import (
    create_graph_export_snapshot,
    dump_graph_json,
    is_graph_data_shape,
    normalize_graph_payload,
)
from .search import highlight_for, search_graph
from .validator import validate_graph

__all__ = [
    "DisjointSet",
    "count_components",
    "find_disconnected_components",
    "GraphError",
    "GraphImportError",
    "EmptyGraphError",
    "ExtractionError",
    "UnificationError",
    "StaleGraphError",
    "RefinementInProgressError",
    "build_link_key",
    "get_node_id",
    "create_graph_export_snapshot",
    "dump_graph_json",
    "is_graph_data_shape",
    "normalize_graph_payload",
    "highlight_for",
    "search_graph",
    "validate_graph",
]
