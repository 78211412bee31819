"""Pydantic models for API requests and responses."""

from pydantic import BaseModel, Field

from knowledge_nexus.data_models.entities import (
    ChatMessage,
    ExtractionStats,
    GraphData,
    GraphStats,
    QueryResult,
)


class ExtractRequest(BaseModel):
    """Request to extract a graph from a markdown or text document."""

    content: str = Field(..., min_length=1)
    filename: str


class ImportRequest(BaseModel):
    """Request to load a previously exported graph."""

    payload: dict
    filename: str | None = None


class GraphStateResponse(BaseModel):
    """The current graph and its statistics."""

    graph: GraphData
    source_label: str
    generation: int
    stats: ExtractionStats | None = None
    graph_stats: GraphStats


class ComponentsResponse(BaseModel):
    """Connected components of the current graph."""

    components: list[list[str]]
    count: int


class SearchResponse(BaseModel):
    """Search hits, node hits first."""

    results: list[QueryResult]


class SelectRequest(BaseModel):
    """A search result chosen by the user."""

    result: QueryResult


class HighlightResponse(BaseModel):
    """Highlight set for a selected search result."""

    node_ids: list[str]
    link_keys: list[str]


class ChatRequest(BaseModel):
    """Question about the current graph."""

    content: str = Field(..., min_length=1, max_length=10000)


class ChatResponse(BaseModel):
    """The assistant's reply."""

    message: ChatMessage


class MessageListResponse(BaseModel):
    """The conversation so far, oldest first."""

    messages: list[ChatMessage]
