"""Base provider abstraction for LLM integrations.

Defines the common interface that all chat completion providers must
implement.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenUsageMapping:
    """Maps provider-specific token usage keys in LangChain response_metadata."""
    usage_key: str = "token_usage"
    input_key: str = "prompt_tokens"
    output_key: str = "completion_tokens"
    total_key: str = "total_tokens"


# OpenAI and OpenRouter share the same layout
OPENAI_TOKEN_MAPPING = TokenUsageMapping()


@dataclass(frozen=True)
class ProviderCapabilities:
    """Feature flags for one provider/model combination."""
    provider_name: str
    model_name: str
    is_reasoning_model: bool = False
    supports_temperature: bool = True
    max_output_tokens: int = 16384


@dataclass
class CompletionResult:
    """Result of a single chat completion."""

    content: str
    raw_response: Dict[str, Any] = field(default_factory=dict)

    # Token usage
    input_tokens: int = 0
    output_tokens: int = 0
    total_tokens: int = 0


class BaseProvider(ABC):
    """Abstract base class for all LLM providers.

    A provider makes exactly one request per ``complete`` call; retrying is
    left to the caller.
    """

    def __init__(
        self,
        api_key: str,
        *,
        temperature: Optional[float] = None,
        max_tokens: int = 4096,
        timeout: Optional[float] = None,
        **kwargs: Any,
    ):
        """Initialize the provider.

        Args:
            api_key: API key for the provider
            temperature: Sampling temperature (None leaves the provider default)
            max_tokens: Maximum output tokens
            timeout: Request timeout in seconds
            **kwargs: Provider-specific configuration
        """
        self.api_key = api_key
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.timeout = timeout
        self.extra_config = kwargs

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'openai', 'openrouter')."""
        pass

    @abstractmethod
    def get_capabilities(self, model: str) -> ProviderCapabilities:
        """Return the capabilities of this provider for ``model``."""
        pass

    @abstractmethod
    async def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        user_content: str,
    ) -> CompletionResult:
        """Run one chat completion with a system and a user message.

        Args:
            model: Model name/identifier
            system_prompt: System instruction
            user_content: User message text

        Returns:
            CompletionResult with the response text and token usage
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Clean up resources (e.g., HTTP sessions)."""
        pass

    def _process_llm_response(
        self,
        response: Any,
        token_mapping: TokenUsageMapping = OPENAI_TOKEN_MAPPING,
    ) -> CompletionResult:
        """Turn a LangChain AIMessage (or similar) into a CompletionResult."""
        input_tokens = 0
        output_tokens = 0
        total_tokens = 0
        raw_response: Dict[str, Any] = {}

        content = getattr(response, "content", response)
        if isinstance(content, list):
            # Content blocks: keep the text parts only
            content = "".join(
                part.get("text", "") if isinstance(part, dict) else str(part)
                for part in content
            )
        elif isinstance(content, dict):
            content = json.dumps(content)
        elif content is None:
            content = ""
        elif not isinstance(content, str):
            content = str(content)

        metadata = getattr(response, "response_metadata", None)
        if isinstance(metadata, dict):
            raw_response = metadata
            usage = metadata.get(token_mapping.usage_key, {})
            if isinstance(usage, dict):
                input_tokens = int(usage.get(token_mapping.input_key, 0) or 0)
                output_tokens = int(usage.get(token_mapping.output_key, 0) or 0)
                if token_mapping.total_key:
                    total_tokens = int(usage.get(token_mapping.total_key, 0) or 0)

        # LangChain 1.x keeps usage in AIMessage.usage_metadata (a TypedDict)
        if total_tokens == 0:
            usage_meta = getattr(response, "usage_metadata", None)
            if isinstance(usage_meta, dict):
                input_tokens = int(usage_meta.get("input_tokens", 0) or 0)
                output_tokens = int(usage_meta.get("output_tokens", 0) or 0)
                total_tokens = int(usage_meta.get("total_tokens", 0) or 0)
        if total_tokens == 0:
            total_tokens = input_tokens + output_tokens

        if total_tokens > 0:
            logger.debug(f"[TOKEN] Completion consumed {total_tokens:,} tokens")

        return CompletionResult(
            content=content,
            raw_response=raw_response,
            input_tokens=input_tokens,
            output_tokens=output_tokens,
            total_tokens=total_tokens,
        )

    async def __aenter__(self) -> "BaseProvider":
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[Any],
    ) -> bool:
        """Async context manager exit."""
        await self.close()
        return False
