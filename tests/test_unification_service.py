"""Tests for the unification orchestrator."""

import pytest

from knowledge_nexus.data_models.entities import GraphData, GraphLink, RefinementState
from knowledge_nexus.graph.exceptions import UnificationError
from knowledge_nexus.llm.exceptions import LLMConnectionError
from knowledge_nexus.services.unification_service import GraphUnifier

from .factories import make_node


@pytest.fixture
def unifier(mock_ai_service):
    return GraphUnifier(mock_ai_service)


async def test_already_unified_graph_is_a_no_op(unifier, mock_ai_service, connected_graph):
    states = []

    result = await unifier.unify(connected_graph, on_progress=states.append)

    assert result.added_links_count == 0
    assert result.clusters_count == 1
    assert result.initial_clusters_count == 1
    assert result.unified_graph == connected_graph
    assert result.validation.is_valid
    mock_ai_service.find_bridges.assert_not_called()
    assert states == [RefinementState.PREPARING, RefinementState.COMPLETED]


async def test_empty_graph_is_a_no_op(unifier, mock_ai_service):
    result = await unifier.unify(GraphData())

    assert result.clusters_count == 0
    assert result.added_links_count == 0
    mock_ai_service.find_bridges.assert_not_called()


async def test_bridge_connects_components(unifier, mock_ai_service, pair_and_singleton):
    mock_ai_service.find_bridges.return_value = [
        GraphLink(source="C", target="A", relationship="related_to")
    ]
    states = []

    result = await unifier.unify(pair_and_singleton, on_progress=states.append)

    assert result.added_links_count == 1
    assert result.clusters_count == 1
    assert result.initial_clusters_count == 2
    assert len(result.unified_graph.links) == 2
    assert states == [
        RefinementState.PREPARING,
        RefinementState.REFINING,
        RefinementState.COMPLETED,
    ]


async def test_capability_receives_graph_and_components(
    unifier, mock_ai_service, pair_and_singleton
):
    await unifier.unify(pair_and_singleton)

    graph, components = mock_ai_service.find_bridges.await_args.args
    assert graph == pair_and_singleton
    assert components == [["A", "B"], ["C"]]


async def test_duplicate_candidate_adds_nothing(unifier, mock_ai_service, pair_and_singleton):
    mock_ai_service.find_bridges.return_value = [
        GraphLink(source="A", target="B", relationship="knows")
    ]

    result = await unifier.unify(pair_and_singleton)

    assert result.added_links_count == 0
    assert result.unified_graph.links == pair_and_singleton.links
    assert result.clusters_count == 2


async def test_invalid_candidate_is_discarded_and_valid_ones_kept(
    unifier, mock_ai_service, three_singletons
):
    mock_ai_service.find_bridges.return_value = [
        GraphLink(source="A", target="Q", relationship="x"),
        GraphLink(source="A", target="B", relationship="y"),
    ]

    result = await unifier.unify(three_singletons)

    assert result.added_links_count == 1
    endpoints = {
        endpoint
        for link in result.unified_graph.links
        for endpoint in (link.source, link.target)
    }
    assert "Q" not in endpoints
    # Partial unification is reported as such
    assert result.initial_clusters_count == 3
    assert result.clusters_count == 2


async def test_no_candidates_reports_unchanged_clusters(
    unifier, mock_ai_service, three_singletons
):
    mock_ai_service.find_bridges.return_value = []

    result = await unifier.unify(three_singletons)

    assert result.added_links_count == 0
    assert result.clusters_count == 3


async def test_cluster_count_never_increases(unifier, mock_ai_service, three_singletons):
    mock_ai_service.find_bridges.return_value = [
        GraphLink(source="A", target="A", relationship="self"),
        GraphLink(source="B", target="Z", relationship="x"),
    ]

    result = await unifier.unify(three_singletons)

    assert result.clusters_count <= result.initial_clusters_count


async def test_dangling_links_are_reported_but_do_not_block(unifier, mock_ai_service):
    graph = GraphData(
        nodes=[make_node("A"), make_node("B")],
        links=[GraphLink(source="A", target="Z", relationship="x")],
    )
    mock_ai_service.find_bridges.return_value = [
        GraphLink(source="A", target="B", relationship="y")
    ]

    result = await unifier.unify(graph)

    assert not result.validation.is_valid
    assert result.validation.issues == ["Link 0 references non-existent target: Z"]
    assert result.added_links_count == 1
    assert result.clusters_count == 1


async def test_capability_failure_raises_and_leaves_graph_untouched(
    unifier, mock_ai_service, pair_and_singleton
):
    mock_ai_service.find_bridges.side_effect = LLMConnectionError("service down")
    before = pair_and_singleton.model_dump()
    states = []

    with pytest.raises(UnificationError) as exc_info:
        await unifier.unify(pair_and_singleton, on_progress=states.append)

    assert isinstance(exc_info.value.original_error, LLMConnectionError)
    assert pair_and_singleton.model_dump() == before
    assert states[-1] == RefinementState.FAILED
    assert RefinementState.COMPLETED not in states
