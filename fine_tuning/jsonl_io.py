from __future__ import annotations

from pathlib import Path


def write_dataset(path: Path, dataset: str) -> Path:
    """Persist an assembled dataset string verbatim, with a trailing newline."""
    path.parent.mkdir(parents=True, exist_ok=True)
    text = dataset if dataset.endswith("\n") else dataset + "\n"
    path.write_text(text, encoding="utf-8")
    return path


def read_dataset(path: Path) -> str:
    """Read a dataset file as the raw newline-joined string."""
    return path.read_text(encoding="utf-8-sig").rstrip("\n")
