"""OpenRouter provider implementation.

OpenRouter exposes an OpenAI-compatible API, so this reuses the OpenAI
provider with OpenRouter's base URL and attribution headers. Model ids use
OpenRouter's ``vendor/model`` form (e.g. ``openai/gpt-4o-mini``).
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from coursetune.llm.providers.openai_provider import OpenAIProvider

logger = logging.getLogger(__name__)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"


class OpenRouterProvider(OpenAIProvider):
    """Chat completions routed through OpenRouter."""

    def __init__(
        self,
        api_key: str,
        *,
        temperature: Optional[float] = None,
        max_tokens: int = 4096,
        timeout: Optional[float] = None,
        site_url: Optional[str] = None,
        app_name: str = "coursetune",
        **kwargs: Any,
    ):
        self.app_name = app_name
        default_headers = {
            "HTTP-Referer": site_url or "https://github.com/coursetune",
            "X-Title": app_name,
        }
        super().__init__(
            api_key=api_key,
            temperature=temperature,
            max_tokens=max_tokens,
            timeout=timeout,
            base_url=OPENROUTER_BASE_URL,
            default_headers=default_headers,
            **kwargs,
        )

    @property
    def provider_name(self) -> str:
        return "openrouter"
