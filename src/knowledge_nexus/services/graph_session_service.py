"""Session owning the current graph: ingestion, refinement, search, chat and export."""

import asyncio
import json
import logging
import re
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import PurePath
from typing import Any

from knowledge_nexus.config.graph_config import UnificationConfig
from knowledge_nexus.data_models.entities import (
    ChatMessage,
    ExtractionStats,
    GraphData,
    GraphStats,
    HighlightSet,
    MessageRole,
    QueryResult,
    RefinementStats,
    ValidationReport,
)
from knowledge_nexus.graph.connectivity import find_disconnected_components
from knowledge_nexus.graph.exceptions import (
    EmptyGraphError,
    ExtractionError,
    GraphImportError,
    RefinementInProgressError,
    StaleGraphError,
)
from knowledge_nexus.graph.normalizer import (
    create_graph_export_snapshot,
    is_graph_data_shape,
    normalize_graph_payload,
)
from knowledge_nexus.graph.search import highlight_for, search_graph
from knowledge_nexus.graph.validator import validate_graph
from knowledge_nexus.llm.exceptions import LLMError
from knowledge_nexus.services.graph_ai_service import GraphAIService
from knowledge_nexus.services.unification_service import (
    GraphUnifier,
    ProgressCallback,
)

logger = logging.getLogger(__name__)

GREETING_MESSAGE = (
    "Hello! I analyzed your knowledge graph. Ask me about the connections, "
    "themes, or hidden patterns I found."
)
CHAT_FALLBACK_MESSAGE = "I'm sorry, I encountered an error. Please try again."
DEFAULT_EXPORT_NAME = "knowledge-nexus-graph"


@dataclass
class GraphExport:
    """A downloadable snapshot of the current graph."""

    filename: str
    graph: GraphData


def build_export_filename(source_label: str | None, now: datetime | None = None) -> str:
    """``{safe-name}-{timestamp}.json`` with a filesystem-safe ISO timestamp."""
    now = (now or datetime.now(UTC)).astimezone(UTC)
    # ISO 8601 in UTC with ":" and "." replaced, e.g. 2024-05-01T12-30-15-123Z
    timestamp = now.strftime("%Y-%m-%dT%H-%M-%S-") + f"{now.microsecond // 1000:03d}Z"
    safe_name = re.sub(r"\s+", "-", (source_label or "").strip()) or DEFAULT_EXPORT_NAME
    return f"{safe_name}-{timestamp}.json"


class GraphSession:
    """
    Single owner of the current graph.

    Only ``_install`` writes the graph slot. Every install and every reset
    bumps ``generation``; results of asynchronous calls started under an older
    generation are discarded instead of installed.
    """

    def __init__(
        self,
        ai_service: GraphAIService | None = None,
        config: UnificationConfig | None = None,
    ):
        """
        Initialize an empty session.

        Args:
            ai_service: Language-model capabilities. If None, built from environment.
            config: Engine configuration. If None, loads from environment.
        """
        self.config = config or UnificationConfig()
        self.ai_service = ai_service or GraphAIService(config=self.config)
        self.unifier = GraphUnifier(self.ai_service)

        self.generation = 0
        self.graph = GraphData()
        self.source_label = ""
        self.stats: ExtractionStats | None = None
        self.refinement_state = None
        self.highlights = HighlightSet()
        self.chat_history: list[ChatMessage] = [self._greeting()]
        self._refine_lock = asyncio.Lock()

    @staticmethod
    def _greeting() -> ChatMessage:
        return ChatMessage(content=GREETING_MESSAGE, role=MessageRole.ASSISTANT)

    @property
    def has_graph(self) -> bool:
        return bool(self.graph.nodes)

    def _require_graph(self, operation: str) -> GraphData:
        if not self.has_graph:
            raise EmptyGraphError(operation)
        return self.graph

    def _check_generation(self, expected: int) -> None:
        if expected != self.generation:
            logger.warning(
                f"Discarding result for generation {expected} "
                f"(current generation {self.generation})"
            )
            raise StaleGraphError(expected, self.generation)

    def _install(
        self, graph: GraphData, source_label: str, processing_time_ms: int = 0
    ) -> GraphData:
        self.generation += 1
        self.graph = graph
        self.source_label = source_label
        self.stats = ExtractionStats(
            node_count=len(graph.nodes),
            link_count=len(graph.links),
            processing_time_ms=processing_time_ms,
        )
        self.highlights = HighlightSet()
        logger.info(
            f"Installed graph '{source_label}' (generation {self.generation}): "
            f"{len(graph.nodes)} nodes, {len(graph.links)} links"
        )
        return graph

    def check_upload_filename(self, filename: str) -> None:
        """Reject document uploads whose extension is not markdown or text."""
        suffix = PurePath(filename).suffix.lower()
        if suffix not in self.config.allowed_upload_extensions:
            raise GraphImportError(
                "Please upload a Markdown (.md) or Text (.txt) file."
            )

    async def load_text(self, document_text: str, source_label: str) -> GraphData:
        """
        Extract a graph from a document and install it.

        Raises:
            GraphImportError: If the document is blank
            ExtractionError: If extraction fails; the current graph is kept
            StaleGraphError: If the session was reset while extracting
        """
        if not document_text.strip():
            raise GraphImportError("The provided file is empty.")

        generation = self.generation
        start = time.perf_counter()
        try:
            raw = await self.ai_service.extract_graph(document_text)
        except LLMError as e:
            raise ExtractionError(
                "Unable to extract graph from the provided file.", e
            ) from e
        elapsed_ms = round((time.perf_counter() - start) * 1000)

        self._check_generation(generation)
        return self._install(normalize_graph_payload(raw), source_label, elapsed_ms)

    def import_json(self, payload: str | bytes | dict[str, Any], source_label: str) -> GraphData:
        """
        Import a graph from JSON after a shape check.

        Raises:
            GraphImportError: If the payload is not JSON or not graph-shaped;
                nothing is changed
        """
        if isinstance(payload, (str, bytes)):
            try:
                payload = json.loads(payload)
            except json.JSONDecodeError as e:
                raise GraphImportError("Unable to parse graph JSON.", e) from e

        if not is_graph_data_shape(payload):
            raise GraphImportError("Invalid graph schema.")

        label = PurePath(source_label).stem if source_label else ""
        return self._install(normalize_graph_payload(payload), label)

    def export(self) -> GraphExport:
        """Snapshot the current graph for download."""
        graph = self._require_graph("export")
        return GraphExport(
            filename=build_export_filename(self.source_label),
            graph=create_graph_export_snapshot(graph),
        )

    def validate(self) -> ValidationReport:
        return validate_graph(self.graph)

    def components(self) -> list[list[str]]:
        return find_disconnected_components(self.graph)

    def graph_stats(self) -> GraphStats:
        return GraphStats(
            nodes=len(self.graph.nodes),
            links=len(self.graph.links),
            clusters=len(self.components()),
        )

    async def refine(self, on_progress: ProgressCallback | None = None) -> RefinementStats:
        """
        Unify the current graph and install the merged result.

        Raises:
            EmptyGraphError: If no graph is loaded
            RefinementInProgressError: If another refinement is outstanding
            UnificationError: If bridging fails; the current graph is kept
            StaleGraphError: If the session was reset or replaced meanwhile
        """
        graph = self._require_graph("refine")
        if self._refine_lock.locked():
            raise RefinementInProgressError("A refinement is already in progress")

        def track(state):
            self.refinement_state = state
            if on_progress is not None:
                on_progress(state)

        async with self._refine_lock:
            generation = self.generation
            before = self.graph_stats()
            result = await self.unifier.unify(graph, on_progress=track)

            self._check_generation(generation)
            if result.added_links_count:
                self._install(
                    result.unified_graph,
                    self.source_label,
                    self.stats.processing_time_ms if self.stats else 0,
                )

            return RefinementStats(
                before=before,
                after=GraphStats(
                    nodes=len(result.unified_graph.nodes),
                    links=len(result.unified_graph.links),
                    clusters=result.clusters_count,
                ),
                added_links=result.added_links_count,
                validation=result.validation,
            )

    def reset(self) -> None:
        """Discard the current graph, search state and chat history."""
        self.generation += 1
        self.graph = GraphData()
        self.source_label = ""
        self.stats = None
        self.refinement_state = None
        self.highlights = HighlightSet()
        self.chat_history = [self._greeting()]
        logger.info(f"Session reset (generation {self.generation})")

    def search(self, query: str) -> list[QueryResult]:
        self.highlights = HighlightSet()
        return search_graph(
            self.graph,
            query,
            min_query_length=self.config.search_min_query_length,
            max_node_results=self.config.search_max_node_results,
            max_relationship_results=self.config.search_max_relationship_results,
        )

    def select(self, result: QueryResult) -> HighlightSet:
        self.highlights = highlight_for(result)
        return self.highlights

    async def chat(self, message: str) -> ChatMessage:
        """
        Ask the chat capability about the current graph.

        Failures produce a fallback reply instead of an exception so the
        conversation can continue.
        """
        graph = self._require_graph("chat")
        generation = self.generation
        history = list(self.chat_history)
        self.chat_history.append(ChatMessage(content=message, role=MessageRole.USER))

        try:
            answer = await self.ai_service.chat_with_graph(message, graph, history)
        except LLMError as e:
            logger.error(f"Chat failed: {e}")
            answer = CHAT_FALLBACK_MESSAGE

        reply = ChatMessage(content=answer, role=MessageRole.ASSISTANT)
        if generation == self.generation:
            self.chat_history.append(reply)
        return reply
