"""LangChain Expression Language (LCEL) chains for the knowledge nexus application."""

from .bridge_chain import BridgeProposal, create_bridge_chain, format_clusters_for_prompt
from .chat_chain import create_chat_chain
from .extraction_chain import (
    ExtractedLink,
    ExtractedNode,
    ExtractionPayload,
    create_extraction_chain,
)

__all__ = [
    "BridgeProposal",
    "ExtractedLink",
    "ExtractedNode",
    "ExtractionPayload",
    "create_bridge_chain",
    "create_chat_chain",
    "create_extraction_chain",
    "format_clusters_for_prompt",
]
