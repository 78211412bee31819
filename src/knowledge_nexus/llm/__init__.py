"""LLM utilities and configuration for the knowledge nexus application."""

from .config import LLMConfig
from .exceptions import (
    LLMConnectionError,
    LLMError,
    LLMRateLimitError,
    LLMResponseError,
    LLMTokenLimitError,
    LLMValidationError,
    classify_llm_error,
)
from .factory import create_chat_model

__all__ = [
    "LLMConfig",
    "LLMError",
    "LLMConnectionError",
    "LLMRateLimitError",
    "LLMTokenLimitError",
    "LLMValidationError",
    "LLMResponseError",
    "classify_llm_error",
    "create_chat_model",
]
