"""Unification of disconnected graph components using proposed bridge links."""

import logging
from collections.abc import Callable
from typing import TypedDict

from langchain_core.runnables import RunnableConfig
from langgraph.graph import END, START, StateGraph

from knowledge_nexus.data_models.entities import (
    GraphData,
    GraphLink,
    RefinementState,
    UnificationResult,
    ValidationReport,
)
from knowledge_nexus.graph.connectivity import find_disconnected_components
from knowledge_nexus.graph.exceptions import UnificationError
from knowledge_nexus.graph.merge import merge_candidate_links
from knowledge_nexus.graph.validator import validate_graph
from knowledge_nexus.services.graph_ai_service import GraphAIService

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[RefinementState], None]


class UnificationState(TypedDict, total=False):
    """
    State passed between the nodes of the unification graph.

    Attributes:
        graph: Input graph; never modified.
        validation: Structural validation of the input graph.
        components: Connected components of the input graph.
        candidates: Bridge links proposed by the model, unfiltered.
        unified_graph: Input graph plus accepted candidates.
        added_links_count: Number of candidates actually appended.
        clusters_count: Component count of ``unified_graph``.
    """

    graph: GraphData
    validation: ValidationReport
    components: list[list[str]]
    candidates: list[GraphLink]
    unified_graph: GraphData
    added_links_count: int
    clusters_count: int


def _notify(config: RunnableConfig | None, state: RefinementState) -> None:
    callback = (config or {}).get("configurable", {}).get("on_progress")
    if callback is not None:
        callback(state)


class GraphUnifier:
    """
    Orchestrates graph unification.

    Graph structure:
    START → prepare → [END if already unified]
                  ↓
                refine → merge → END

    ``prepare`` validates and finds components, ``refine`` asks the bridging
    capability for candidate links, ``merge`` filters, deduplicates and
    recomputes the component count.
    """

    def __init__(self, ai_service: GraphAIService):
        """
        Initialize the unifier.

        Args:
            ai_service: Capability used to propose bridging links
        """
        self.ai_service = ai_service
        self.graph = self._create_graph()

    def _create_graph(self):
        workflow = StateGraph(UnificationState)

        workflow.add_node("prepare", self._prepare_node)
        workflow.add_node("refine", self._refine_node)
        workflow.add_node("merge", self._merge_node)

        workflow.add_edge(START, "prepare")
        workflow.add_conditional_edges(
            "prepare", self._route_after_prepare, {"refine": "refine", "end": END}
        )
        workflow.add_edge("refine", "merge")
        workflow.add_edge("merge", END)

        return workflow.compile()

    def _route_after_prepare(self, state: UnificationState) -> str:
        if len(state["components"]) <= 1:
            logger.info("Graph already unified; skipping bridge proposals")
            return "end"
        return "refine"

    async def _prepare_node(
        self, state: UnificationState, config: RunnableConfig
    ) -> dict:
        _notify(config, RefinementState.PREPARING)
        graph = state["graph"]

        validation = validate_graph(graph)
        if not validation.is_valid:
            logger.warning(
                f"Unifying a graph with {len(validation.issues)} structural issue(s)"
            )

        components = find_disconnected_components(graph)
        logger.info(
            f"Found {len(components)} component(s) across {len(graph.nodes)} nodes"
        )
        return {"validation": validation, "components": components}

    async def _refine_node(
        self, state: UnificationState, config: RunnableConfig
    ) -> dict:
        _notify(config, RefinementState.REFINING)
        candidates = await self.ai_service.find_bridges(
            state["graph"], state["components"]
        )
        if not candidates:
            logger.warning("Bridging returned no candidate links")
        return {"candidates": candidates}

    async def _merge_node(self, state: UnificationState) -> dict:
        unified_graph, added = merge_candidate_links(
            state["graph"], state.get("candidates", [])
        )
        clusters_count = len(find_disconnected_components(unified_graph))
        return {
            "unified_graph": unified_graph,
            "added_links_count": added,
            "clusters_count": clusters_count,
        }

    async def unify(
        self, graph: GraphData, on_progress: ProgressCallback | None = None
    ) -> UnificationResult:
        """
        Connect the components of ``graph`` with proposed bridge links.

        An already unified graph is returned as-is without calling the
        bridging capability. The reported cluster count is recomputed on the
        merged graph, so partial unification is reported as such.

        Args:
            graph: Graph to unify; not modified
            on_progress: Called with each RefinementState as the run advances

        Returns:
            UnificationResult with the pre-merge validation report

        Raises:
            UnificationError: If the bridging capability fails
        """
        config: RunnableConfig = {"configurable": {"on_progress": on_progress}}

        try:
            final_state = await self.graph.ainvoke({"graph": graph}, config=config)
        except Exception as e:
            logger.error(f"Graph unification failed: {e}")
            _notify(config, RefinementState.FAILED)
            raise UnificationError(f"Graph unification failed: {e}", e) from e

        initial_clusters = len(final_state["components"])
        result = UnificationResult(
            unified_graph=final_state.get("unified_graph", graph),
            added_links_count=final_state.get("added_links_count", 0),
            clusters_count=final_state.get("clusters_count", initial_clusters),
            initial_clusters_count=initial_clusters,
            validation=final_state["validation"],
        )

        logger.info(
            f"Unification complete: {result.initial_clusters_count} -> "
            f"{result.clusters_count} cluster(s), {result.added_links_count} link(s) added"
        )
        _notify(config, RefinementState.COMPLETED)
        return result
