from __future__ import annotations

import json
from typing import Any, Dict

from coursetune.config.constants import DEFAULT_MIN_BATCH_LINES
from coursetune.core.errors import DatasetValidationError

MIN_BATCH_LINES = DEFAULT_MIN_BATCH_LINES


def validate_training_record(record: Any, line_no: int = 0) -> None:
    """
    Validate one chat fine-tuning record.

    Args:
        record: The decoded JSON value of one dataset line.
        line_no: 1-based line number, used in error messages.

    Raises:
        DatasetValidationError: If the record is not a ``{"messages": [...]}``
            object whose every message has string ``role`` and ``content``.
    """
    where = f"line {line_no}" if line_no else "record"
    if not isinstance(record, dict):
        raise DatasetValidationError(
            f"{where}: must be a JSON object (got {type(record).__name__})"
        )

    messages = record.get("messages")
    if not isinstance(messages, list):
        raise DatasetValidationError(f"{where}: 'messages' must be an array")
    if not messages:
        raise DatasetValidationError(f"{where}: 'messages' must not be empty")

    for idx, message in enumerate(messages):
        if not isinstance(message, dict):
            raise DatasetValidationError(f"{where}: message {idx} is not an object")
        if not isinstance(message.get("role"), str):
            raise DatasetValidationError(f"{where}: message {idx} has no string 'role'")
        if not isinstance(message.get("content"), str):
            raise DatasetValidationError(f"{where}: message {idx} has no string 'content'")


def validate_dataset_batch(batch: str, min_lines: int = MIN_BATCH_LINES) -> int:
    """
    Validate a JSON-Lines batch produced by the synthesizer.

    The line count includes blank lines; blank lines are otherwise ignored.

    Returns:
        The number of records in the batch.

    Raises:
        DatasetValidationError: On the first problem found.
    """
    if not isinstance(batch, str):
        raise DatasetValidationError(
            f"Batch must be a string (got {type(batch).__name__})"
        )

    lines = batch.split("\n")
    if len(lines) < min_lines:
        raise DatasetValidationError(
            f"Batch has {len(lines)} line(s); at least {min_lines} required"
        )

    records = 0
    for line_no, line in enumerate(lines, 1):
        line = line.strip()
        if not line:
            continue
        try:
            obj: Dict[str, Any] = json.loads(line)
        except json.JSONDecodeError as exc:
            raise DatasetValidationError(f"line {line_no}: invalid JSON ({exc.msg})") from exc
        validate_training_record(obj, line_no)
        records += 1
    return records


def is_valid_dataset_batch(batch: Any, min_lines: int = MIN_BATCH_LINES) -> bool:
    """Return True when ``batch`` passes ``validate_dataset_batch``. Never raises."""
    try:
        validate_dataset_batch(batch, min_lines)
    except DatasetValidationError:
        return False
    return True
