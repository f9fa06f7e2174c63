"""Provider factory for dynamic LLM provider selection.

Creates provider instances based on configuration or explicit parameters.
"""

from __future__ import annotations

import importlib
import logging
import os
from enum import Enum
from typing import Any, Dict, Optional, Type

from coursetune.llm.providers.base import BaseProvider

logger = logging.getLogger(__name__)


class ProviderType(str, Enum):
    """Supported LLM provider types."""
    OPENAI = "openai"
    OPENROUTER = "openrouter"


# Lazy import mapping to avoid circular imports and unnecessary dependencies
_PROVIDER_CLASSES: Dict[ProviderType, str] = {
    ProviderType.OPENAI: "coursetune.llm.providers.openai_provider.OpenAIProvider",
    ProviderType.OPENROUTER: "coursetune.llm.providers.openrouter_provider.OpenRouterProvider",
}

# Environment variable names for API keys
_API_KEY_ENV_VARS: Dict[ProviderType, str] = {
    ProviderType.OPENAI: "OPENAI_API_KEY",
    ProviderType.OPENROUTER: "OPENROUTER_API_KEY",
}


def _import_provider_class(provider_type: ProviderType) -> Type[BaseProvider]:
    """Dynamically import a provider class."""
    module_path = _PROVIDER_CLASSES[provider_type]
    module_name, class_name = module_path.rsplit(".", 1)
    module = importlib.import_module(module_name)
    return getattr(module, class_name)


def get_api_key_for_provider(
    provider_type: ProviderType,
    api_key: Optional[str] = None,
) -> str:
    """Get the API key for a provider.

    Raises:
        ValueError: If no API key is available
    """
    if api_key:
        return api_key

    env_var = _API_KEY_ENV_VARS[provider_type]
    key = os.environ.get(env_var)
    if key:
        return key

    raise ValueError(
        f"No API key found for provider {provider_type.value}. "
        f"Set {env_var} environment variable or pass api_key parameter."
    )


def get_provider(
    provider: Optional[str] = None,
    api_key: Optional[str] = None,
    *,
    temperature: Optional[float] = None,
    max_tokens: int = 4096,
    timeout: Optional[float] = None,
    **kwargs: Any,
) -> BaseProvider:
    """Create a provider instance.

    Args:
        provider: Provider name ("openai", "openrouter"); defaults to openai
        api_key: Optional explicit API key
        temperature: Sampling temperature
        max_tokens: Maximum output tokens
        timeout: Request timeout in seconds
        **kwargs: Provider-specific configuration

    Returns:
        Configured provider instance

    Raises:
        ValueError: If the provider is unknown or the API key is missing
    """
    name = (provider or ProviderType.OPENAI.value).lower().strip()
    try:
        provider_type = ProviderType(name)
    except ValueError:
        raise ValueError(
            f"Unknown provider '{provider}'. "
            f"Supported: {', '.join(p.value for p in ProviderType)}"
        )

    resolved_api_key = get_api_key_for_provider(provider_type, api_key)
    provider_class = _import_provider_class(provider_type)
    logger.info(f"Using {provider_type.value} provider for synthesis")

    return provider_class(
        api_key=resolved_api_key,
        temperature=temperature,
        max_tokens=max_tokens,
        timeout=timeout,
        **kwargs,
    )
