"""Shared fixtures for the knowledge nexus test suite."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from knowledge_nexus.config.graph_config import UnificationConfig
from knowledge_nexus.data_models.entities import GraphData, GraphLink
from knowledge_nexus.services.graph_ai_service import GraphAIService

from .factories import make_node


@pytest.fixture
def three_singletons() -> GraphData:
    """Nodes A, B, C and no links."""
    return GraphData(nodes=[make_node("A"), make_node("B"), make_node("C")])


@pytest.fixture
def pair_and_singleton() -> GraphData:
    """Nodes A, B, C with a single A-B link."""
    return GraphData(
        nodes=[make_node("A"), make_node("B"), make_node("C")],
        links=[GraphLink(source="A", target="B", relationship="knows")],
    )


@pytest.fixture
def connected_graph() -> GraphData:
    """A chain A -> B -> C."""
    return GraphData(
        nodes=[make_node("A"), make_node("B"), make_node("C")],
        links=[
            GraphLink(source="A", target="B", relationship="knows"),
            GraphLink(source="B", target="C", relationship="founded"),
        ],
    )


@pytest.fixture
def config() -> UnificationConfig:
    return UnificationConfig()


@pytest.fixture
def mock_ai_service() -> MagicMock:
    """GraphAIService double with async capabilities returning nothing useful."""
    service = MagicMock(spec=GraphAIService)
    service.extract_graph = AsyncMock(return_value=GraphData())
    service.find_bridges = AsyncMock(return_value=[])
    service.chat_with_graph = AsyncMock(return_value="An answer.")
    return service
