"""Stage an assembled dataset on disk, upload it and start a fine-tuning job."""

from __future__ import annotations

import logging
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from coursetune.config.constants import DATASET_FILE_SUFFIX
from coursetune.core.errors import UploadError
from coursetune.llm.training.base import FineTuningJob, TrainingBackend

logger = logging.getLogger(__name__)


@contextmanager
def staged_dataset(dataset: str) -> Iterator[Path]:
    """
    Write ``dataset`` to a private temporary ``.jsonl`` file.

    The temporary directory is removed on exit, whether the body succeeds or
    raises. Each call gets its own directory, so concurrent runs never share
    a staging file.

    Raises:
        UploadError: If the file cannot be written.
    """
    with tempfile.TemporaryDirectory(prefix="coursetune_") as tmp_dir:
        path = Path(tmp_dir) / f"dataset{DATASET_FILE_SUFFIX}"
        try:
            path.write_text(dataset, encoding="utf-8")
        except OSError as e:
            raise UploadError(f"Failed to stage dataset: {e}") from e
        logger.debug(f"Staged dataset at {path}")
        yield path


def launch_fine_tuning(
    dataset: str,
    model: str,
    backend: TrainingBackend,
    *,
    purpose: Optional[str] = None,
) -> FineTuningJob:
    """
    Upload ``dataset`` and create a fine-tuning job for ``model``.

    Raises:
        UploadError: If staging or upload fails.
        JobCreationError: If the job cannot be created.
    """
    with staged_dataset(dataset) as path:
        file_id = backend.upload_training_file(path, purpose=purpose)
        return backend.create_fine_tuning_job(file_id, model)
