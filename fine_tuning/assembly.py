from __future__ import annotations

from functools import reduce
from typing import Iterable

from coursetune.core.errors import NoValidDatasetError
from coursetune.core.models import BlockOutcome, SynthesisReport


def _fold(report: SynthesisReport, outcome: BlockOutcome) -> SynthesisReport:
    if outcome.accepted and outcome.batch is not None:
        return SynthesisReport(
            accepted_batches=report.accepted_batches + (outcome.batch,),
            dropped_blocks=report.dropped_blocks,
        )
    return SynthesisReport(
        accepted_batches=report.accepted_batches,
        dropped_blocks=report.dropped_blocks + (outcome.block.block_id,),
    )


def fold_outcomes(outcomes: Iterable[BlockOutcome]) -> SynthesisReport:
    """
    Fold block outcomes into a report, in file-then-block order.

    Outcomes are sorted by ``(file_index, block_index)`` first, so the order
    in which concurrent synthesis calls completed does not matter.
    """
    ordered = sorted(outcomes, key=lambda o: o.block.sort_key)
    return reduce(_fold, ordered, SynthesisReport())


def assemble_dataset(report: SynthesisReport) -> str:
    """
    Join the accepted batches with newlines into one dataset string.

    Raises:
        NoValidDatasetError: If no batch was accepted.
    """
    if not report.accepted_batches:
        dropped = len(report.dropped_blocks)
        raise NoValidDatasetError(
            f"No valid dataset batches were produced ({dropped} block(s) dropped)"
        )
    return "\n".join(report.accepted_batches)


def count_dataset_lines(dataset: str) -> int:
    """Number of non-blank lines in an assembled dataset."""
    return sum(1 for line in dataset.split("\n") if line.strip())
