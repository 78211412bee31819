"""Tests for endpoint resolution and link keys."""

from knowledge_nexus.data_models.entities import GraphLink, NodeReference
from knowledge_nexus.graph.identity import build_link_key, get_node_id

from .factories import make_node


def test_get_node_id_returns_bare_identifier_unchanged():
    assert get_node_id("apollo_11") == "apollo_11"


def test_get_node_id_reads_id_from_hydrated_node():
    assert get_node_id(make_node("nasa")) == "nasa"


def test_get_node_id_reads_id_from_layout_reference():
    ref = NodeReference(id="nasa", x=1.5, vx=0.2)
    assert get_node_id(ref) == "nasa"


def test_link_key_joins_source_relationship_target():
    link = GraphLink(source="A", target="B", relationship="founded")
    assert build_link_key(link) == "A__founded__B"


def test_link_key_is_the_same_for_bare_and_hydrated_endpoints():
    bare = GraphLink(source="A", target="B", relationship="founded")
    hydrated = GraphLink(source=make_node("A"), target=make_node("B"), relationship="founded")
    assert build_link_key(bare) == build_link_key(hydrated)


def test_link_key_uses_empty_relationship_when_missing():
    link = GraphLink(source="A", target="B")
    assert build_link_key(link) == "A____B"


def test_link_key_is_direction_sensitive():
    forward = GraphLink(source="A", target="B", relationship="x")
    backward = GraphLink(source="B", target="A", relationship="x")
    assert build_link_key(forward) != build_link_key(backward)


def test_link_key_keeps_relationship_casing_distinct():
    lower = GraphLink(source="A", target="B", relationship="related_to")
    upper = GraphLink(source="A", target="B", relationship="Related_To")
    assert build_link_key(lower) != build_link_key(upper)
