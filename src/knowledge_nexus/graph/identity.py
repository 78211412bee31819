"""Endpoint identity resolution and canonical link keys."""

from knowledge_nexus.data_models.entities import Endpoint, GraphLink

# Keys are only unambiguous while ids and relationship labels do not contain
# the delimiter. JSON imports containing it are rejected by the shape check.
LINK_KEY_DELIMITER = "__"


def get_node_id(ref: Endpoint) -> str:
    """Return the identifier behind a bare id or a hydrated node record."""
    if isinstance(ref, str):
        return ref
    return ref.id


def build_link_key(link: GraphLink) -> str:
    """
    Build the canonical key of a (source, relationship, target) triple.

    Two links are duplicates iff their keys are equal. The same key is used
    when merging bridging candidates and when highlighting search hits.
    """
    return LINK_KEY_DELIMITER.join(
        (get_node_id(link.source), link.relationship or "", get_node_id(link.target))
    )
