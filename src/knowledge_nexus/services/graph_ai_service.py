"""Language-model capabilities: graph extraction, cluster bridging and graph chat."""

import logging
from typing import Any

from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langsmith import traceable

from knowledge_nexus.chains import (
    create_bridge_chain,
    create_chat_chain,
    create_extraction_chain,
    format_clusters_for_prompt,
)
from knowledge_nexus.config.graph_config import UnificationConfig
from knowledge_nexus.data_models.entities import (
    ChatMessage,
    ClusterMember,
    ClusterSummary,
    GraphData,
    GraphLink,
    GraphNode,
    MessageRole,
)
from knowledge_nexus.graph.identity import get_node_id
from knowledge_nexus.llm.config import LLMConfig
from knowledge_nexus.llm.exceptions import (
    LLMResponseError,
    LLMValidationError,
    classify_llm_error,
)
from knowledge_nexus.llm.factory import create_chat_model

logger = logging.getLogger(__name__)


def summarize_clusters(
    graph: GraphData, components: list[list[str]], max_members: int
) -> list[ClusterSummary]:
    """
    Describe each component by its members' ids, names and types.

    At most ``max_members`` members are listed per component; the rest are
    counted in ``truncated``.
    """
    node_map = {node.id: node for node in graph.nodes}
    summaries = []
    for index, component in enumerate(components):
        members = [
            ClusterMember(id=node_id, name=node_map[node_id].name, type=node_map[node_id].type)
            for node_id in component[:max_members]
            if node_id in node_map
        ]
        summaries.append(
            ClusterSummary(
                index=index,
                members=members,
                truncated=max(len(component) - max_members, 0),
            )
        )
    return summaries


def summarize_graph_for_chat(
    graph: GraphData, max_nodes: int, max_links: int
) -> tuple[str, str]:
    """Render nodes and links as the plain-text context of the chat prompt."""
    names = {node.id: node.name for node in graph.nodes}

    node_lines = [
        f"- {node.name} ({node.type}): {node.description}"
        for node in graph.nodes[:max_nodes]
    ]
    if len(graph.nodes) > max_nodes:
        node_lines.append(f"- ... and {len(graph.nodes) - max_nodes} more nodes")

    link_lines = []
    for link in graph.links[:max_links]:
        source_id = get_node_id(link.source)
        target_id = get_node_id(link.target)
        link_lines.append(
            f"- {names.get(source_id, source_id)} -[{link.relationship}]-> "
            f"{names.get(target_id, target_id)}"
        )
    if len(graph.links) > max_links:
        link_lines.append(f"- ... and {len(graph.links) - max_links} more links")

    return "\n".join(node_lines) or "(none)", "\n".join(link_lines) or "(none)"


class GraphAIService:
    """
    Black-box language-model capabilities used by the graph engine.

    Nothing returned from here is trusted: extraction output is normalized and
    bridge proposals are filtered by the callers.
    """

    def __init__(
        self,
        llm_config: LLMConfig | None = None,
        config: UnificationConfig | None = None,
        extraction_chain: Any = None,
        bridge_chain: Any = None,
        chat_chain: Any = None,
    ):
        """
        Initialize the service.

        Args:
            llm_config: LLM configuration. If None, loads from environment.
            config: Engine configuration. If None, loads from environment.
            extraction_chain: Prebuilt extraction runnable (built lazily if None)
            bridge_chain: Prebuilt bridging runnable (built lazily if None)
            chat_chain: Prebuilt chat runnable (built lazily if None)
        """
        self.llm_config = llm_config or LLMConfig.from_environment()
        self.config = config or UnificationConfig()
        self._chat_model = None
        self._extraction_chain = extraction_chain
        self._bridge_chain = bridge_chain
        self._chat_chain = chat_chain

    @property
    def chat_model(self):
        """Lazy-load the chat model instance."""
        if self._chat_model is None:
            self.llm_config.validate()
            logger.info(
                f"Using LLM provider: {self.llm_config.provider}/{self.llm_config.model_name}"
            )
            self._chat_model = create_chat_model(self.llm_config)
        return self._chat_model

    @property
    def extraction_chain(self):
        if self._extraction_chain is None:
            self._extraction_chain = create_extraction_chain(self.chat_model)
        return self._extraction_chain

    @property
    def bridge_chain(self):
        if self._bridge_chain is None:
            self._bridge_chain = create_bridge_chain(self.chat_model)
        return self._bridge_chain

    @property
    def chat_chain(self):
        if self._chat_chain is None:
            self._chat_chain = create_chat_chain(self.chat_model)
        return self._chat_chain

    @traceable(name="Graph AI Service: Extract Graph")
    async def extract_graph(self, document_text: str) -> GraphData:
        """
        Extract a raw entity-relationship graph from a document.

        Args:
            document_text: Markdown or plain text

        Returns:
            Raw graph; ``importance`` is mapped onto ``val``

        Raises:
            LLMError: If the model call fails or returns nothing
        """
        if not document_text or not document_text.strip():
            raise LLMValidationError("Document is empty")

        try:
            payload = await self.extraction_chain.ainvoke(
                {
                    "document": document_text,
                    "max_nodes": self.config.extraction_max_nodes_hint,
                }
            )
        except Exception as e:
            logger.error(f"Graph extraction failed: {e}")
            raise classify_llm_error(e, "Extraction") from e

        if payload is None:
            raise LLMResponseError("Empty response from LLM")

        nodes = [
            GraphNode(
                id=node.id,
                name=node.name,
                type=node.type,
                description=node.description,
                val=node.importance or 1,
            )
            for node in payload.nodes
        ]
        links = [
            GraphLink(source=link.source, target=link.target, relationship=link.relationship)
            for link in payload.links
        ]
        logger.info(f"Extracted {len(nodes)} nodes and {len(links)} links")
        return GraphData(nodes=nodes, links=links)

    @traceable(name="Graph AI Service: Find Bridges")
    async def find_bridges(
        self, graph: GraphData, components: list[list[str]]
    ) -> list[GraphLink]:
        """
        Ask the model for links connecting the given components.

        Args:
            graph: The graph being unified
            components: Connected components as lists of node ids

        Returns:
            Candidate links, possibly invalid or duplicated

        Raises:
            LLMError: If the model call fails or returns nothing
        """
        clusters = summarize_clusters(
            graph, components, self.config.max_nodes_per_cluster_prompt
        )

        try:
            proposal = await self.bridge_chain.ainvoke(
                {
                    "clusters": format_clusters_for_prompt(clusters),
                    "max_links": self.config.max_bridge_candidates,
                }
            )
        except Exception as e:
            logger.error(f"Bridge proposal failed: {e}")
            raise classify_llm_error(e, "Bridge proposal") from e

        if proposal is None:
            raise LLMResponseError("Empty response from LLM")

        candidates = [
            GraphLink(source=link.source, target=link.target, relationship=link.relationship)
            for link in proposal.links
        ]
        if len(candidates) > self.config.max_bridge_candidates:
            logger.warning(
                f"Model proposed {len(candidates)} bridges; keeping the first "
                f"{self.config.max_bridge_candidates}"
            )
            candidates = candidates[: self.config.max_bridge_candidates]
        return candidates

    @traceable(name="Graph AI Service: Chat")
    async def chat_with_graph(
        self,
        message: str,
        graph: GraphData,
        history: list[ChatMessage] | None = None,
    ) -> str:
        """
        Answer a question about the graph.

        Args:
            message: The user's question
            graph: Graph to summarise into the prompt
            history: Earlier messages of the conversation, oldest first

        Returns:
            Free-text answer

        Raises:
            LLMError: If the model call fails or returns nothing
        """
        nodes_text, links_text = summarize_graph_for_chat(
            graph, self.config.chat_max_context_nodes, self.config.chat_max_context_links
        )
        recent = (history or [])[-self.llm_config.max_conversation_length :]
        history_messages: list[BaseMessage] = [
            HumanMessage(content=msg.content)
            if msg.role == MessageRole.USER
            else AIMessage(content=msg.content)
            for msg in recent
        ]

        try:
            answer = await self.chat_chain.ainvoke(
                {
                    "system_message": self.llm_config.system_message,
                    "nodes": nodes_text,
                    "links": links_text,
                    "history": history_messages,
                    "question": message,
                }
            )
        except Exception as e:
            logger.error(f"Graph chat failed: {e}")
            raise classify_llm_error(e, "Chat") from e

        if not answer:
            raise LLMResponseError("Empty response from LLM")
        return answer
