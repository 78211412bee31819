"""LLM-specific exceptions."""


class LLMError(Exception):
    """Base exception for LLM-related errors."""
    pass


class LLMConnectionError(LLMError):
    """Raised when LLM provider connection fails."""
    pass


class LLMRateLimitError(LLMError):
    """Raised when LLM provider rate limits are exceeded."""
    pass


class LLMTokenLimitError(LLMError):
    """Raised when token limits are exceeded."""
    pass


class LLMValidationError(LLMError):
    """Raised when input validation fails."""
    pass


class LLMResponseError(LLMError):
    """Raised when LLM response is invalid or malformed."""
    pass


def classify_llm_error(error: Exception, action: str) -> LLMError:
    """Map a provider exception onto the LLM exception hierarchy."""
    if isinstance(error, LLMError):
        return error
    message = str(error).lower()
    if "rate limit" in message:
        return LLMRateLimitError(f"Rate limit exceeded: {error}")
    if "token" in message and "limit" in message:
        return LLMTokenLimitError(f"Token limit exceeded: {error}")
    return LLMError(f"{action} failed: {error}")
