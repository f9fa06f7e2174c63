"""
CourseTune Fine-Tuning Module.

Dataset-side tools of the training pipeline:
- validation: check synthesized JSON-Lines batches and chat records
- assembly: fold block outcomes and join accepted batches into a dataset
- launcher: stage a dataset, upload it and create a fine-tuning job
- jsonl_io: read and write assembled dataset files

Usage:
    python -m fine_tuning.cli train --guide "Answer as a tutor" --model gpt-4o-mini notes.pdf
    python -m fine_tuning.cli preview notes.pdf slides.pptx
    python -m fine_tuning.cli validate dataset.jsonl
    python -m fine_tuning.cli launch dataset.jsonl --model gpt-4o-mini
"""

from fine_tuning.assembly import assemble_dataset, count_dataset_lines, fold_outcomes
from fine_tuning.jsonl_io import read_dataset, write_dataset
from fine_tuning.launcher import launch_fine_tuning, staged_dataset
from fine_tuning.validation import (
    MIN_BATCH_LINES,
    is_valid_dataset_batch,
    validate_dataset_batch,
    validate_training_record,
)

__all__ = [
    "assemble_dataset",
    "count_dataset_lines",
    "fold_outcomes",
    "read_dataset",
    "write_dataset",
    "launch_fine_tuning",
    "staged_dataset",
    "MIN_BATCH_LINES",
    "is_valid_dataset_batch",
    "validate_dataset_batch",
    "validate_training_record",
]
