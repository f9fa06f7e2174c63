"""OpenAI provider implementation using LangChain.

Supports chat models (GPT-4o, GPT-4.1 families) and reasoning models
(GPT-5 family, o-series). One ChatOpenAI client is built per model name on
first use and reused afterwards.

LangChain handles:
- Token usage tracking (response_metadata / usage_metadata)
- Parameter filtering for unsupported models (disabled_params)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from langchain_core.messages import HumanMessage, SystemMessage
from langchain_openai import ChatOpenAI

from coursetune.llm.providers.base import (
    OPENAI_TOKEN_MAPPING,
    BaseProvider,
    CompletionResult,
    ProviderCapabilities,
)

logger = logging.getLogger(__name__)

_REASONING_PREFIXES = ("gpt-5", "o1", "o3", "o4")


def _get_model_capabilities(model_name: str, provider_name: str = "openai") -> ProviderCapabilities:
    """Determine capabilities based on the OpenAI model name.

    - GPT-5 family and o-series: reasoning models, no sampler controls
    - GPT-4.1 family: 32k output tokens
    - GPT-4o family and anything else: conservative chat defaults
    """
    m = model_name.lower().strip()
    # Fine-tuned ids look like "ft:gpt-4o-mini-2024-07-18:org::id"
    if m.startswith("ft:"):
        m = m[3:]
    # OpenRouter ids carry a vendor prefix
    if "/" in m:
        m = m.split("/", 1)[1]

    if m.startswith(_REASONING_PREFIXES):
        return ProviderCapabilities(
            provider_name=provider_name,
            model_name=model_name,
            is_reasoning_model=True,
            supports_temperature=False,
            max_output_tokens=100000,
        )

    if m.startswith("gpt-4.1"):
        return ProviderCapabilities(
            provider_name=provider_name,
            model_name=model_name,
            max_output_tokens=32768,
        )

    return ProviderCapabilities(
        provider_name=provider_name,
        model_name=model_name,
        max_output_tokens=16384,
    )


class OpenAIProvider(BaseProvider):
    """OpenAI chat completion provider using LangChain.

    Every call is a single attempt: ``max_retries`` is pinned to 0 so the
    caller's retry policy is the only one in effect.
    """

    def __init__(
        self,
        api_key: str,
        *,
        temperature: Optional[float] = None,
        max_tokens: int = 4096,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
        default_headers: Optional[Dict[str, str]] = None,
        **kwargs: Any,
    ):
        super().__init__(
            api_key=api_key,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            **kwargs,
        )
        self.base_url = base_url
        self.default_headers = default_headers
        self._llms: Dict[str, ChatOpenAI] = {}

    @property
    def provider_name(self) -> str:
        return "openai"

    def get_capabilities(self, model: str) -> ProviderCapabilities:
        return _get_model_capabilities(model, self.provider_name)

    def _build_llm(self, model: str) -> ChatOpenAI:
        caps = self.get_capabilities(model)
        max_tokens = min(self.max_tokens, caps.max_output_tokens)

        llm_kwargs: Dict[str, Any] = {
            "api_key": self.api_key,
            "model": model,
            "max_retries": 0,
        }
        # Without a configured timeout the client default applies
        if self.timeout:
            llm_kwargs["timeout"] = self.timeout
        if self.base_url:
            llm_kwargs["base_url"] = self.base_url
        if self.default_headers:
            llm_kwargs["default_headers"] = self.default_headers

        # Reasoning models take max_completion_tokens and no sampler parameters
        if caps.is_reasoning_model:
            llm_kwargs["max_completion_tokens"] = max_tokens
            llm_kwargs["disabled_params"] = {"temperature": None}
            logger.info(f"Using max_completion_tokens={max_tokens} for reasoning model {model}")
        else:
            llm_kwargs["max_tokens"] = max_tokens
            if self.temperature is not None and caps.supports_temperature:
                llm_kwargs["temperature"] = self.temperature

        return ChatOpenAI(**llm_kwargs)

    def _get_llm(self, model: str) -> ChatOpenAI:
        llm = self._llms.get(model)
        if llm is None:
            llm = self._build_llm(model)
            self._llms[model] = llm
        return llm

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str,
        user_content: str,
    ) -> CompletionResult:
        """Run one chat completion through LangChain's ChatOpenAI."""
        llm = self._get_llm(model)
        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_content),
        ]
        response = await llm.ainvoke(messages)
        return self._process_llm_response(response, OPENAI_TOKEN_MAPPING)

    async def close(self) -> None:
        """LangChain manages its own HTTP clients; just drop the cached models."""
        self._llms.clear()
