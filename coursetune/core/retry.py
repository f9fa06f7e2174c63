"""Bounded retry-then-drop around synthesis and validation of one block."""

from __future__ import annotations

import logging
from typing import Optional

from tenacity import (
    AsyncRetrying,
    RetryError,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from coursetune.config.constants import DEFAULT_MAX_ATTEMPTS, DEFAULT_MIN_BATCH_LINES
from coursetune.core.errors import DatasetValidationError, GenerationError
from coursetune.core.models import BlockOutcome, BlockStatus, TextBlock
from coursetune.llm.synthesizer import DatasetSynthesizer
from fine_tuning.validation import validate_dataset_batch

logger = logging.getLogger(__name__)

_RETRYABLE = (GenerationError, DatasetValidationError)


class RetryController:
    """Runs synthesizer -> validator on a block, at most ``max_attempts`` times.

    Attempts are sequential. The first batch that validates is accepted; when
    every attempt fails the block is dropped and the last error is recorded.
    Anything other than a generation or validation failure propagates.
    """

    def __init__(
        self,
        synthesizer: DatasetSynthesizer,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        min_batch_lines: int = DEFAULT_MIN_BATCH_LINES,
        wait_seconds: float = 0.0,
    ) -> None:
        if max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1 (got {max_attempts})")
        self.synthesizer = synthesizer
        self.max_attempts = max_attempts
        self.min_batch_lines = min_batch_lines
        self.wait_seconds = wait_seconds

    async def _attempt(self, block: TextBlock, guide: str, model: str) -> str:
        batch = await self.synthesizer.generate_batch(block.text, guide, model)
        validate_dataset_batch(batch, self.min_batch_lines)
        return batch

    async def synthesize_block(self, block: TextBlock, guide: str, model: str) -> BlockOutcome:
        """Return an ACCEPTED or DROPPED outcome for ``block``."""
        attempts = 0
        last_error: Optional[BaseException] = None
        try:
            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(self.max_attempts),
                wait=wait_fixed(self.wait_seconds),
                retry=retry_if_exception_type(_RETRYABLE),
                before_sleep=before_sleep_log(logger, logging.WARNING),
                reraise=True,
            ):
                with attempt:
                    attempts = attempt.retry_state.attempt_number
                    batch = await self._attempt(block, guide, model)
        except _RETRYABLE as e:
            last_error = e
        except RetryError as e:
            last_error = e.last_attempt.exception()
        else:
            logger.debug(f"Block {block.block_id} accepted after {attempts} attempt(s)")
            return BlockOutcome(
                block=block,
                status=BlockStatus.ACCEPTED,
                attempts=attempts,
                batch=batch,
            )

        logger.warning(
            f"Dropping block {block.block_id} after {attempts} attempt(s): {last_error}"
        )
        return BlockOutcome(
            block=block,
            status=BlockStatus.DROPPED,
            attempts=attempts,
            error=str(last_error),
        )
