"""Single-shot synthesis of fine-tuning examples from one text block."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from coursetune.core.errors import GenerationError
from coursetune.llm.prompt_utils import TRAINING_SYSTEM_PROMPT, build_user_content
from coursetune.llm.providers.base import BaseProvider

logger = logging.getLogger(__name__)


class DatasetSynthesizer:
    """Asks a chat model to turn one block plus the guide into a JSON-Lines batch.

    Makes exactly one request per call. The returned text is the model's
    trimmed response and has not been validated.
    """

    def __init__(
        self,
        provider: BaseProvider,
        *,
        system_prompt: str = TRAINING_SYSTEM_PROMPT,
        timeout: Optional[float] = None,
    ) -> None:
        self.provider = provider
        self.system_prompt = system_prompt
        self.timeout = timeout

    async def generate_batch(self, block_text: str, guide: str, model: str) -> str:
        """Generate a raw DatasetBatch for ``block_text``.

        Raises:
            GenerationError: On provider/network errors, a timeout, or an empty response.
        """
        user_content = build_user_content(guide, block_text)
        try:
            result = await asyncio.wait_for(
                self.provider.complete(
                    model=model,
                    system_prompt=self.system_prompt,
                    user_content=user_content,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            raise GenerationError(
                f"Completion request timed out after {self.timeout}s"
            ) from e
        except Exception as e:
            raise GenerationError(f"Completion request failed: {e}") from e

        content = (result.content or "").strip()
        if not content:
            raise GenerationError("Completion returned an empty response")
        logger.debug(
            f"Generated batch of {len(content)} chars ({result.total_tokens} tokens)"
        )
        return content
