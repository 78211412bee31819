"""Connected-component analysis over a node/link graph."""

from knowledge_nexus.data_models.entities import GraphData
from knowledge_nexus.graph.identity import get_node_id


class DisjointSet:
    """Union-find over string identifiers with path compression.

    Identifiers are registered lazily on first reference.
    """

    def __init__(self):
        self._parent: dict[str, str] = {}

    def __contains__(self, item: str) -> bool:
        return item in self._parent

    def find(self, item: str) -> str:
        parent = self._parent
        if item not in parent:
            parent[item] = item
            return item

        root = item
        while parent[root] != root:
            root = parent[root]

        # Re-point every visited identifier straight at the root
        while parent[item] != root:
            parent[item], item = root, parent[item]

        return root

    def union(self, a: str, b: str) -> None:
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a != root_b:
            self._parent[root_a] = root_b


def find_disconnected_components(graph: GraphData) -> list[list[str]]:
    """
    Partition node identifiers into maximal connected groups.

    Links are treated as undirected. Identifiers keep their input order within
    a component and components are ordered by their first node. Link endpoints
    without a node still join the union-find but never appear in the output.

    Returns:
        List of components, each a list of node identifiers
    """
    sets = DisjointSet()

    for node in graph.nodes:
        sets.find(node.id)

    for link in graph.links:
        sets.union(get_node_id(link.source), get_node_id(link.target))

    components: dict[str, list[str]] = {}
    for node in graph.nodes:
        components.setdefault(sets.find(node.id), []).append(node.id)

    return list(components.values())


def count_components(graph: GraphData) -> int:
    """Number of connected components in ``graph``."""
    return len(find_disconnected_components(graph))
