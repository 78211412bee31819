"""Configuration for graph unification, search and chat."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class UnificationConfig(BaseSettings):
    """
    Configuration for the graph engine and the capabilities around it.

    Values can be overridden with ``NEXUS_``-prefixed environment variables,
    e.g. ``NEXUS_MAX_BRIDGE_CANDIDATES=20``.
    """

    model_config = SettingsConfigDict(env_prefix="NEXUS_")

    # Bridging prompt
    max_nodes_per_cluster_prompt: int = 25  # Members listed per cluster
    max_bridge_candidates: int = 50  # Candidates considered per unification call

    # Search
    search_min_query_length: int = 2
    search_max_node_results: int = 6
    search_max_relationship_results: int = 6

    # Chat
    chat_max_context_nodes: int = 200
    chat_max_context_links: int = 400

    # Extraction
    extraction_max_nodes_hint: int = 50
    allowed_upload_extensions: list[str] = [".md", ".markdown", ".txt"]
