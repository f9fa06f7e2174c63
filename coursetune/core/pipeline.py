"""End-to-end training run: extract, chunk, synthesize, assemble, upload, launch.

The run moves through the RunState machine

    PENDING -> EXTRACTING -> CHUNKING -> SYNTHESIZING -> ASSEMBLING
            -> UPLOADING -> LAUNCHING -> SUCCEEDED

and lands in FAILED on the first fatal error. File-level and block-level
failures are skipped and reported in the returned TrainingOutcome.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

from coursetune.config.config_loader import PipelineSettings
from coursetune.core.errors import ExtractionError, UnsupportedFileTypeError, UploadError
from coursetune.core.models import (
    BlockOutcome,
    BlockStatus,
    ExtractedText,
    RunState,
    SkippedFile,
    TextBlock,
    TrainingOutcome,
    TrainingRequest,
    UploadedFile,
)
from coursetune.core.retry import RetryController
from coursetune.infra.concurrency import run_concurrent_tasks
from coursetune.llm.prompt_utils import TRAINING_SYSTEM_PROMPT
from coursetune.llm.providers.base import BaseProvider
from coursetune.llm.synthesizer import DatasetSynthesizer
from coursetune.llm.training.base import TrainingBackend
from coursetune.processing.chunking import split_extracted_text
from coursetune.processing.extractors import extract_uploaded_file
from fine_tuning.assembly import assemble_dataset, count_dataset_lines, fold_outcomes
from fine_tuning.jsonl_io import write_dataset
from fine_tuning.launcher import staged_dataset

logger = logging.getLogger(__name__)

StateCallback = Callable[[RunState], None]


class TrainingPipeline:
    """Runs one TrainingRequest through every stage.

    The LLM provider and the training backend are passed in; the pipeline
    never creates clients itself. One instance drives one run at a time.
    """

    def __init__(
        self,
        provider: BaseProvider,
        backend: TrainingBackend,
        settings: Optional[PipelineSettings] = None,
        *,
        system_prompt: str = TRAINING_SYSTEM_PROMPT,
        on_state_change: Optional[StateCallback] = None,
    ) -> None:
        self.settings = settings or PipelineSettings()
        self.backend = backend
        self.synthesizer = DatasetSynthesizer(
            provider,
            system_prompt=system_prompt,
            timeout=self.settings.completion_timeout or None,
        )
        self.retry = RetryController(
            self.synthesizer,
            max_attempts=self.settings.max_attempts,
            min_batch_lines=self.settings.min_batch_lines,
            wait_seconds=self.settings.retry_wait_seconds,
        )
        self.on_state_change = on_state_change
        self.state = RunState.PENDING

    def _transition(self, state: RunState) -> None:
        logger.info(f"Run state: {self.state.value} -> {state.value}")
        self.state = state
        if self.on_state_change is not None:
            self.on_state_change(state)

    # -------- Stages --------

    async def extract_files(
        self, files: Sequence[UploadedFile]
    ) -> Tuple[List[ExtractedText], List[SkippedFile]]:
        """Extract every file in order, skipping unsupported or unreadable ones."""
        extracted: List[ExtractedText] = []
        skipped: List[SkippedFile] = []
        for index, uploaded in enumerate(files):
            try:
                result = await asyncio.to_thread(extract_uploaded_file, uploaded, index)
            except (UnsupportedFileTypeError, ExtractionError) as e:
                logger.warning(f"Skipping {uploaded.original_name}: {e}")
                skipped.append(SkippedFile(name=uploaded.original_name, reason=str(e)))
                continue
            if not result.text:
                logger.info(f"{uploaded.original_name} contained no text")
            extracted.append(result)
        return extracted, skipped

    def chunk(self, extracted: Iterable[ExtractedText]) -> List[TextBlock]:
        """Split each file's text into blocks, keeping file-then-block order."""
        blocks: List[TextBlock] = []
        for item in extracted:
            blocks.extend(split_extracted_text(item, self.settings.block_size))
        return blocks

    async def synthesize_blocks(
        self, blocks: Sequence[TextBlock], guide: str, model: str
    ) -> List[BlockOutcome]:
        """Synthesize all blocks with bounded parallelism."""
        if not blocks:
            return []
        results = await run_concurrent_tasks(
            self.retry.synthesize_block,
            [(block, guide, model) for block in blocks],
            concurrency_limit=self.settings.concurrency_limit,
        )
        outcomes: List[BlockOutcome] = []
        for block, result in zip(blocks, results):
            if result is None:
                # the task raised something other than a generation/validation failure
                result = BlockOutcome(
                    block=block,
                    status=BlockStatus.DROPPED,
                    attempts=0,
                    error="unexpected synthesis failure",
                )
            outcomes.append(result)
        return outcomes

    # -------- Run --------

    async def run(
        self,
        request: TrainingRequest,
        *,
        dataset_path: Optional[Path] = None,
    ) -> TrainingOutcome:
        """Execute the whole pipeline for ``request``.

        Args:
            request: Files, guide and target model
            dataset_path: Optional path to keep a copy of the assembled dataset

        Returns:
            The created job and the skip/drop report

        Raises:
            NoValidDatasetError: Every block was dropped; nothing is uploaded.
            UploadError: The dataset could not be staged or uploaded.
            JobCreationError: The job could not be created.
        """
        self.state = RunState.PENDING
        try:
            self._transition(RunState.EXTRACTING)
            extracted, skipped = await self.extract_files(request.files)

            self._transition(RunState.CHUNKING)
            blocks = self.chunk(extracted)
            logger.info(
                f"{len(blocks)} block(s) from {len(extracted)} file(s) "
                f"({len(skipped)} skipped)"
            )

            self._transition(RunState.SYNTHESIZING)
            outcomes = await self.synthesize_blocks(blocks, request.guide, request.model)

            self._transition(RunState.ASSEMBLING)
            report = fold_outcomes(outcomes)
            dataset = assemble_dataset(report)
            dataset_lines = count_dataset_lines(dataset)
            logger.info(
                f"Assembled dataset: {dataset_lines} line(s) from "
                f"{len(report.accepted_batches)} block(s); "
                f"{len(report.dropped_blocks)} dropped"
            )
            if dataset_path is not None:
                try:
                    write_dataset(Path(dataset_path), dataset)
                except OSError as e:
                    raise UploadError(f"Failed to save dataset copy to {dataset_path}: {e}") from e
                logger.info(f"Saved dataset copy to {dataset_path}")

            with staged_dataset(dataset) as staged_path:
                self._transition(RunState.UPLOADING)
                file_id = await asyncio.to_thread(
                    self.backend.upload_training_file,
                    staged_path,
                    purpose=self.settings.training_purpose,
                )
                self._transition(RunState.LAUNCHING)
                job = await asyncio.to_thread(
                    self.backend.create_fine_tuning_job, file_id, request.model
                )
        except Exception as e:
            logger.error(f"Training run failed in state {self.state.value}: {e}")
            self._transition(RunState.FAILED)
            raise

        self._transition(RunState.SUCCEEDED)
        return TrainingOutcome(
            job=job,
            dataset_lines=dataset_lines,
            accepted_blocks=len(report.accepted_batches),
            dropped_blocks=report.dropped_blocks,
            skipped_files=tuple(skipped),
        )


async def train_content(
    files: Iterable[Path | str | UploadedFile],
    guide: str,
    model: str,
    *,
    settings: Optional[PipelineSettings] = None,
    provider: Optional[BaseProvider] = None,
    backend: Optional[TrainingBackend] = None,
    dataset_path: Optional[Path] = None,
    system_prompt: Optional[str] = None,
    on_state_change: Optional[StateCallback] = None,
) -> TrainingOutcome:
    """Build a pipeline from configuration and run it once.

    Collaborators that are not passed are created from ``settings`` (or the
    loaded configuration when ``settings`` is None) and the environment's
    API keys. A provider created here is closed when the run ends.
    """
    if settings is None:
        from coursetune.config.service import get_pipeline_settings
        settings = get_pipeline_settings()

    owns_provider = provider is None
    if provider is None:
        from coursetune.llm.providers.factory import get_provider
        provider = get_provider(
            settings.provider,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            timeout=settings.completion_timeout or None,
        )
    if backend is None:
        from coursetune.llm.training.factory import get_training_backend
        backend = get_training_backend(
            "openai",
            timeout=settings.training_timeout or None,
            purpose=settings.training_purpose,
        )

    uploaded = [
        f if isinstance(f, UploadedFile) else UploadedFile.from_path(f) for f in files
    ]
    request = TrainingRequest(files=tuple(uploaded), guide=guide, model=model)
    pipeline = TrainingPipeline(
        provider,
        backend,
        settings,
        system_prompt=system_prompt or TRAINING_SYSTEM_PROMPT,
        on_state_change=on_state_change,
    )
    try:
        return await pipeline.run(request, dataset_path=dataset_path)
    finally:
        if owns_provider:
            await provider.close()
