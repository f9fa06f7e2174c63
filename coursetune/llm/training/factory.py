"""Factory function for training (fine-tuning) backends."""

from __future__ import annotations

import logging
from typing import Any, Optional

from coursetune.llm.training.base import TrainingBackend

logger = logging.getLogger(__name__)


def get_training_backend(provider: Optional[str] = None, **kwargs: Any) -> TrainingBackend:
    """Get the training backend for a given provider.

    Args:
        provider: Provider name; defaults to 'openai'.
        **kwargs: Passed to the backend constructor (api_key, timeout, purpose).

    Raises:
        ValueError: If the provider has no fine-tuning support here.
    """
    name = (provider or "openai").lower().strip()

    if name == "openai":
        from coursetune.llm.training.openai_backend import OpenAITrainingBackend
        return OpenAITrainingBackend(**kwargs)

    if name == "openrouter":
        # OpenRouter only routes inference; there is no training API
        raise ValueError(
            "OpenRouter does not offer fine-tuning. "
            "Use the openai training backend."
        )

    raise ValueError(
        f"Unknown provider '{provider}'. "
        f"Supported training providers: openai"
    )
