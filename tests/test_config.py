"""Tests for environment-driven configuration."""

import pytest

from knowledge_nexus.config.graph_config import UnificationConfig
from knowledge_nexus.llm.config import DEFAULT_MODEL_NAME, LLMConfig


def test_unification_config_defaults():
    config = UnificationConfig()

    assert config.max_bridge_candidates == 50
    assert config.search_min_query_length == 2
    assert ".md" in config.allowed_upload_extensions


def test_unification_config_from_environment(monkeypatch):
    monkeypatch.setenv("NEXUS_MAX_BRIDGE_CANDIDATES", "5")
    monkeypatch.setenv("NEXUS_SEARCH_MAX_NODE_RESULTS", "10")

    config = UnificationConfig()

    assert config.max_bridge_candidates == 5
    assert config.search_max_node_results == 10


def test_llm_config_from_environment(monkeypatch):
    monkeypatch.setenv("LLM_PROVIDER", "anthropic")
    monkeypatch.setenv("LLM_API_KEY", "secret")
    monkeypatch.setenv("LLM_TEMPERATURE", "0.5")
    monkeypatch.delenv("LLM_MODEL_NAME", raising=False)

    config = LLMConfig.from_environment()

    assert config.provider == "anthropic"
    assert config.api_key == "secret"
    assert config.temperature == 0.5
    assert config.model_name == DEFAULT_MODEL_NAME


@pytest.mark.parametrize(
    "overrides",
    [
        {"api_key": None},
        {"api_key": "k", "temperature": 3.0},
        {"api_key": "k", "top_p": 1.5},
        {"api_key": "k", "max_tokens": 0},
    ],
)
def test_llm_config_validation(overrides):
    with pytest.raises(ValueError):
        LLMConfig(provider="openai", **overrides).validate()
