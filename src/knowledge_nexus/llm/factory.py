"""Factory for creating LangChain chat models from LLMConfig.

Every chain in the application gets its model from here, so provider
selection lives in one place.
"""

import logging

from knowledge_nexus.llm.config import LLMConfig
from knowledge_nexus.llm.exceptions import LLMConnectionError, LLMValidationError

logger = logging.getLogger(__name__)


def create_chat_model(config: LLMConfig | None = None):
    """
    Create a LangChain chat model from configuration.

    Args:
        config: LLM configuration. If None, loads from environment.

    Returns:
        LangChain chat model instance (ChatOpenAI or ChatAnthropic)

    Raises:
        LLMValidationError: If provider is not supported
        LLMConnectionError: If required dependencies are missing

    Example:
        >>> from knowledge_nexus.llm.factory import create_chat_model
        >>> from knowledge_nexus.llm.config import LLMConfig
        >>>
        >>> config = LLMConfig(provider="anthropic", model_name="claude-3-5-sonnet-20241022")
        >>> llm = create_chat_model(config)
    """
    if config is None:
        config = LLMConfig.from_environment()

    logger.debug(f"Creating chat model {config.provider}/{config.model_name}")

    if config.provider not in ("openai", "anthropic"):
        raise LLMValidationError(f"Unsupported provider: {config.provider}")

    try:
        if config.provider == "openai":
            from langchain_openai import ChatOpenAI  # noqa: PLC0415

            return ChatOpenAI(
                model=config.model_name,
                api_key=config.api_key,
                base_url=config.api_base,
                temperature=config.temperature,
                max_tokens=config.max_tokens,
                top_p=config.top_p,
                timeout=config.request_timeout,
                **config.provider_kwargs,
            )

        from langchain_anthropic import ChatAnthropic  # noqa: PLC0415

        return ChatAnthropic(
            model=config.model_name,
            api_key=config.api_key,
            temperature=config.temperature,
            max_tokens=config.max_tokens or 4096,
            top_p=config.top_p,
            timeout=config.request_timeout,
            **config.provider_kwargs,
        )

    except ImportError as e:
        raise LLMConnectionError(
            f"Missing dependency for {config.provider}: {e}"
        ) from e
    except Exception as e:
        raise LLMConnectionError(f"Failed to create chat model: {e}") from e
