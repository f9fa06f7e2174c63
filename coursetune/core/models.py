"""Data model shared by the pipeline stages.

All records are immutable; stages hand new values forward instead of
mutating what they received.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Iterable, Optional, Tuple

from coursetune.llm.training.base import FineTuningJob


@dataclass(frozen=True, slots=True)
class UploadedFile:
    """A file handed over by the upload layer. Never modified or deleted here."""

    path: Path
    original_name: str
    declared_type: Optional[str] = None

    @classmethod
    def from_path(cls, path: Path | str, declared_type: Optional[str] = None) -> "UploadedFile":
        p = Path(path)
        return cls(path=p, original_name=p.name, declared_type=declared_type)

    @property
    def extension(self) -> str:
        return Path(self.original_name).suffix.lower()


@dataclass(frozen=True, slots=True)
class TrainingRequest:
    """One invocation of the pipeline: ordered files, the guide and the target model."""

    files: Tuple[UploadedFile, ...]
    guide: str
    model: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "files", tuple(self.files))
        if not isinstance(self.guide, str):
            raise TypeError(f"guide must be a string (got {type(self.guide).__name__})")
        if not isinstance(self.model, str) or not self.model.strip():
            raise ValueError("model must be a non-empty string")

    @classmethod
    def from_paths(cls, paths: Iterable[Path | str], guide: str, model: str) -> "TrainingRequest":
        return cls(files=tuple(UploadedFile.from_path(p) for p in paths), guide=guide, model=model)


@dataclass(frozen=True, slots=True)
class ExtractedText:
    """Normalized text of one successfully extracted file."""

    source: UploadedFile
    file_index: int
    text: str


@dataclass(frozen=True, slots=True)
class TextBlock:
    """A fixed-size slice of one file's normalized text."""

    source: UploadedFile
    file_index: int
    index: int
    text: str

    @property
    def block_id(self) -> str:
        return f"{self.source.original_name}#{self.index}"

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.file_index, self.index)


class BlockStatus(Enum):
    """Per-block synthesis state."""
    PENDING = "pending"
    ATTEMPTING = "attempting"
    ACCEPTED = "accepted"
    DROPPED = "dropped"


@dataclass(frozen=True, slots=True)
class BlockOutcome:
    """Final result of synthesizing one block.

    Attributes:
        block: The block that was synthesized
        status: ACCEPTED or DROPPED
        attempts: Number of synthesis attempts made
        batch: The accepted JSON-Lines batch (ACCEPTED only)
        error: Last failure message (DROPPED only)
    """
    block: TextBlock
    status: BlockStatus
    attempts: int
    batch: Optional[str] = None
    error: Optional[str] = None

    @property
    def accepted(self) -> bool:
        return self.status is BlockStatus.ACCEPTED


@dataclass(frozen=True, slots=True)
class SynthesisReport:
    """Accepted batches in file-then-block order plus the ids of dropped blocks."""

    accepted_batches: Tuple[str, ...] = ()
    dropped_blocks: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class SkippedFile:
    """A file that contributed no text, with the reason it was skipped."""

    name: str
    reason: str


class RunState(Enum):
    """Overall run state; SUCCEEDED and FAILED are terminal."""
    PENDING = "pending"
    EXTRACTING = "extracting"
    CHUNKING = "chunking"
    SYNTHESIZING = "synthesizing"
    ASSEMBLING = "assembling"
    UPLOADING = "uploading"
    LAUNCHING = "launching"
    SUCCEEDED = "succeeded"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (RunState.SUCCEEDED, RunState.FAILED)


@dataclass(frozen=True)
class TrainingOutcome:
    """What a successful run hands back: the job plus a drop report."""

    job: FineTuningJob
    dataset_lines: int
    accepted_blocks: int
    dropped_blocks: Tuple[str, ...] = field(default_factory=tuple)
    skipped_files: Tuple[SkippedFile, ...] = field(default_factory=tuple)
