"""LLM Provider abstraction layer using LangChain.

This module provides a unified chat completion interface for:
- OpenAI (GPT-4o, GPT-4.1, GPT-5, o-series)
- OpenRouter (OpenAI-compatible routing to other vendors)
"""

from coursetune.llm.providers.base import (
    BaseProvider,
    CompletionResult,
    ProviderCapabilities,
)
from coursetune.llm.providers.factory import (
    ProviderType,
    get_provider,
)

__all__ = [
    "BaseProvider",
    "CompletionResult",
    "ProviderCapabilities",
    "get_provider",
    "ProviderType",
]
