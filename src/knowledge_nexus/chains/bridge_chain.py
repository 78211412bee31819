"""
Bridging chain: proposes links that connect disconnected clusters.

The model sees each cluster's members and answers with a BridgeProposal.
Nothing it returns is trusted; callers filter and deduplicate.
"""

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, Field

from knowledge_nexus.chains.extraction_chain import ExtractedLink
from knowledge_nexus.data_models.entities import ClusterSummary

BRIDGE_SYSTEM_PROMPT = """You are an expert Knowledge Graph Architect repairing a fragmented knowledge graph.

The graph below has been split into disconnected clusters of entities. Propose new relationships that connect the clusters into a single graph.

Rules:
1. Only use node IDs that appear in the cluster listings. Never invent IDs.
2. Each proposed link must connect nodes from two DIFFERENT clusters.
3. Prefer semantically meaningful relationships supported by the entity descriptions (e.g., 'part_of', 'influenced', 'related_to').
4. Propose at least one link per cluster beyond the first, and no more than {max_links} links in total.
5. Use short snake_case relationship labels."""

BRIDGE_USER_PROMPT = """Clusters:

{clusters}

Propose the bridging links."""


class BridgeProposal(BaseModel):
    links: list[ExtractedLink] = Field(
        description="New links connecting nodes from different clusters."
    )


def format_clusters_for_prompt(clusters: list[ClusterSummary]) -> str:
    """Render cluster summaries as the text block the bridging prompt expects."""
    blocks = []
    for cluster in clusters:
        lines = [f"Cluster {cluster.index + 1}:"]
        lines.extend(
            f"- {member.id} | {member.name} ({member.type})"
            for member in cluster.members
        )
        if cluster.truncated:
            lines.append(f"- ... and {cluster.truncated} more")
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def create_bridge_chain(chat_model: BaseChatModel):
    """
    Create LCEL chain for bridge proposals.

    Args:
        chat_model: LangChain chat model to use

    Returns:
        Runnable chain that takes {"clusters": str, "max_links": int} and
        returns a BridgeProposal
    """
    prompt = ChatPromptTemplate.from_messages(
        [
            ("system", BRIDGE_SYSTEM_PROMPT),
            ("human", BRIDGE_USER_PROMPT),
        ]
    )

    return prompt | chat_model.with_structured_output(BridgeProposal)
