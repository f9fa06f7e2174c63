"""Unit tests for coursetune/core/retry.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from coursetune.core.errors import GenerationError
from coursetune.core.models import BlockStatus, TextBlock, UploadedFile
from coursetune.core.retry import RetryController
from coursetune.llm.synthesizer import DatasetSynthesizer


@pytest.fixture
def block() -> TextBlock:
    return TextBlock(
        source=UploadedFile.from_path(Path("notes.txt")),
        file_index=0,
        index=0,
        text="Some lecture text",
    )


@pytest.mark.asyncio
class TestSynthesizeBlock:
    """Tests for RetryController.synthesize_block."""

    async def test_accepts_first_valid_batch(self, provider_factory, batch_factory, block):
        provider = provider_factory([batch_factory(10)])
        controller = RetryController(DatasetSynthesizer(provider))

        outcome = await controller.synthesize_block(block, "guide", "gpt-4o-mini")

        assert outcome.status is BlockStatus.ACCEPTED
        assert outcome.accepted is True
        assert outcome.attempts == 1
        assert outcome.batch == batch_factory(10)
        assert len(provider.calls) == 1

    async def test_always_invalid_makes_exactly_three_attempts(self, provider_factory, block):
        provider = provider_factory(["not json at all"])
        controller = RetryController(DatasetSynthesizer(provider), max_attempts=3)

        outcome = await controller.synthesize_block(block, "guide", "m")

        assert outcome.status is BlockStatus.DROPPED
        assert outcome.attempts == 3
        assert outcome.batch is None
        assert "at least 10" in outcome.error
        assert len(provider.calls) == 3

    async def test_succeeds_on_second_attempt(self, provider_factory, batch_factory, block):
        provider = provider_factory([batch_factory(3), batch_factory(10)])
        controller = RetryController(DatasetSynthesizer(provider))

        outcome = await controller.synthesize_block(block, "guide", "m")

        assert outcome.accepted
        assert outcome.attempts == 2
        assert len(provider.calls) == 2

    async def test_generation_errors_count_as_attempts(self, provider_factory, block):
        provider = provider_factory([RuntimeError("connection reset")])
        controller = RetryController(DatasetSynthesizer(provider), max_attempts=3)

        outcome = await controller.synthesize_block(block, "guide", "m")

        assert outcome.status is BlockStatus.DROPPED
        assert outcome.attempts == 3
        assert "connection reset" in outcome.error

    async def test_mixed_failures_then_success(self, provider_factory, batch_factory, block):
        provider = provider_factory([GenerationError("boom"), "garbage", batch_factory(10)])
        controller = RetryController(DatasetSynthesizer(provider), max_attempts=3)

        outcome = await controller.synthesize_block(block, "guide", "m")

        assert outcome.accepted
        assert outcome.attempts == 3

    async def test_custom_attempt_bound(self, provider_factory, block):
        provider = provider_factory(["bad"])
        controller = RetryController(DatasetSynthesizer(provider), max_attempts=1)

        outcome = await controller.synthesize_block(block, "guide", "m")

        assert outcome.attempts == 1
        assert len(provider.calls) == 1

    async def test_min_batch_lines_is_applied(self, provider_factory, batch_factory, block):
        provider = provider_factory([batch_factory(2)])
        controller = RetryController(DatasetSynthesizer(provider), min_batch_lines=2)

        outcome = await controller.synthesize_block(block, "guide", "m")

        assert outcome.accepted


class TestRetryControllerInit:
    """Tests for RetryController construction."""

    @pytest.mark.unit
    def test_rejects_zero_attempts(self, stub_provider):
        with pytest.raises(ValueError):
            RetryController(DatasetSynthesizer(stub_provider), max_attempts=0)
