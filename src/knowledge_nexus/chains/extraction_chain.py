"""
Extraction chain: markdown or plain text in, entity-relationship graph out.

Uses structured outputs so the model answers with an ExtractionPayload.
"""

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.prompts import ChatPromptTemplate
from pydantic import BaseModel, Field

EXTRACTION_SYSTEM_PROMPT = """You are an expert Knowledge Graph Architect.
Your task is to analyze the provided text (Markdown format) and extract a knowledge graph consisting of distinct entities (nodes) and their relationships (edges).

Rules:
1. Identify key entities: People, Organizations, Locations, Concepts, Technologies, Events, etc.
2. Consolidate synonyms (e.g., "Google", "Google Inc.", "The search giant" should be the same node ID).
3. Create meaningful relationships between entities.
4. Provide a brief, concise description for each entity based on the text.
5. Categorize each entity into a broad 'type' (e.g., Person, Organization, Concept).
6. Node IDs are unique snake_case slugs without double underscores; links reference node IDs only. Relationship labels never contain double underscores either.
7. Limit the extraction to the most important {max_nodes} nodes to keep the visualization clean, unless the text is very dense with critical info."""

EXTRACTION_USER_PROMPT = """Here is the markdown content to analyze:

{document}"""


class ExtractedNode(BaseModel):
    id: str = Field(description="Unique identifier for the node (snake_case).")
    name: str = Field(description="Display name of the entity.")
    type: str = Field(
        description="Category of the entity (Person, Location, Concept, etc.)."
    )
    description: str = Field(description="Short description of the entity context.")
    importance: float = Field(
        description="A number 1-10 indicating importance, used for visualization sizing."
    )


class ExtractedLink(BaseModel):
    source: str = Field(description="ID of the source node.")
    target: str = Field(description="ID of the target node.")
    relationship: str = Field(
        description="Label of the relationship (e.g., 'founded', 'located_in')."
    )


class ExtractionPayload(BaseModel):
    nodes: list[ExtractedNode] = Field(
        description="List of unique entities identified in the text."
    )
    links: list[ExtractedLink] = Field(
        description="List of relationships between entities."
    )


def create_extraction_chain(chat_model: BaseChatModel):
    """
    Create LCEL chain for graph extraction.

    Args:
        chat_model: LangChain chat model to use

    Returns:
        Runnable chain that takes {"document": str, "max_nodes": int} and
        returns an ExtractionPayload
    """
    prompt = ChatPromptTemplate.from_messages(
        [
            ("system", EXTRACTION_SYSTEM_PROMPT),
            ("human", EXTRACTION_USER_PROMPT),
        ]
    )

    return prompt | chat_model.with_structured_output(ExtractionPayload)
