"""Service layer for complex business operations."""

from .graph_ai_service import GraphAIService
from .graph_session_service import GraphExport, GraphSession
from .unification_service import GraphUnifier

__all__ = ["GraphAIService", "GraphExport", "GraphSession", "GraphUnifier"]
