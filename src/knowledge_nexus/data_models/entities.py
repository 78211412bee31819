"""Data models for the knowledge nexus application."""

import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class NodeReference(BaseModel):
    """A hydrated node record standing in for a bare identifier.

    Layout engines replace link endpoints with the node objects they point at,
    so anything carrying a string ``id`` is accepted here.
    """

    model_config = ConfigDict(extra="allow")

    id: str


class GraphNode(NodeReference):
    """Represents an extracted entity."""

    model_config = ConfigDict(extra="ignore")

    name: str
    type: str
    description: str
    val: int | float | None = None  # Visualization size hint
    color: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _importance_to_val(cls, data: Any) -> Any:
        # Extraction output calls the size hint "importance"
        if isinstance(data, dict) and data.get("val") is None and "importance" in data:
            data = {**data, "val": data["importance"]}
        return data


Endpoint = str | NodeReference


class GraphLink(BaseModel):
    """Represents a directed relationship between two nodes."""

    source: Endpoint
    target: Endpoint
    relationship: str = ""

    @field_validator("relationship", mode="before")
    @classmethod
    def _missing_relationship(cls, value: Any) -> Any:
        return "" if value is None else value



class GraphData(BaseModel):
    """An ordered pair of nodes and links."""

    nodes: list[GraphNode] = Field(default_factory=list)
    links: list[GraphLink] = Field(default_factory=list)


class ValidationReport(BaseModel):
    """Outcome of a structural validation pass."""

    is_valid: bool
    issues: list[str] = Field(default_factory=list)


class UnificationResult(BaseModel):
    """Outcome of a single unification call."""

    unified_graph: GraphData
    added_links_count: int
    clusters_count: int  # Post-merge
    initial_clusters_count: int
    validation: ValidationReport  # Pre-merge


class RefinementState(str, Enum):
    """Progress states surfaced while a graph is being unified."""

    PREPARING = "PREPARING"
    REFINING = "REFINING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


class GraphStats(BaseModel):
    """Size of a graph at one point in time."""

    nodes: int
    links: int
    clusters: int


class RefinementStats(BaseModel):
    """Before/after statistics for a refinement run."""

    before: GraphStats
    after: GraphStats
    added_links: int
    validation: ValidationReport


class ExtractionStats(BaseModel):
    """Statistics recorded when a graph is installed."""

    node_count: int
    link_count: int
    processing_time_ms: int = 0


class ClusterMember(BaseModel):
    """Compact node description handed to the bridging capability."""

    id: str
    name: str
    type: str


class ClusterSummary(BaseModel):
    """One connected component described for the bridging capability."""

    index: int
    members: list[ClusterMember]
    truncated: int = 0  # Members omitted from the description


class NodeQueryResult(BaseModel):
    """A search hit on a single node."""

    kind: Literal["node"] = "node"
    node: GraphNode


class RelationshipQueryResult(BaseModel):
    """A search hit on a relationship, with both endpoint records."""

    kind: Literal["relationship"] = "relationship"
    link: GraphLink
    source: GraphNode
    target: GraphNode


QueryResult = Annotated[
    NodeQueryResult | RelationshipQueryResult, Field(discriminator="kind")
]


class HighlightSet(BaseModel):
    """Node identifiers and link keys the rendering layer should emphasise."""

    node_ids: set[str] = Field(default_factory=set)
    link_keys: set[str] = Field(default_factory=set)


class MessageRole(str, Enum):
    """Enumeration for message roles in chat."""

    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    """Represents a single message in a graph analysis conversation."""

    id: str | None = Field(default_factory=lambda: str(uuid.uuid4()))
    content: str
    role: MessageRole
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
