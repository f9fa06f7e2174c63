"""Prompt text and rendering utilities for dataset synthesis."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

TRAINING_SYSTEM_PROMPT = """Based on the content provided by the user, generate a JSON object (JSONL) with multiple lines (at least 10), each line with the following structure:

{"messages":[{"role":"system","content":string},{"role":"user","content":string},{"role":"assistant","content":string}]}.

For every line, create various scenarios, where the user inquires different aspects of the data. The generated dataset should focus on:
- Answering factual queries about concepts, historical dates, people, figures, and other knowledge-based questions.
- Providing opinions when explicitly requested.
- Generating content such as summaries and explanations based on input material.

Note: the generated output will be piped directly to a file, thus it should not have any other surrounding text or symbols, and each line should be minified."""


def build_user_content(guide: str, block_text: str) -> str:
    """Label the guide and the block text so the model can tell them apart."""
    return f"GUIDE:{guide}\n\n THE DATA:\n{block_text}"


def load_system_prompt(prompt_path: Optional[Path] = None) -> str:
    """Return the built-in training prompt, or the contents of ``prompt_path``.

    Raises:
        FileNotFoundError: If ``prompt_path`` is given but does not exist.
        ValueError: If the file is empty.
    """
    if prompt_path is None:
        return TRAINING_SYSTEM_PROMPT

    p = Path(prompt_path)
    if not p.exists():
        raise FileNotFoundError(f"System prompt not found: {p}")
    text = p.read_text(encoding="utf-8").strip()
    if not text:
        raise ValueError(f"System prompt file is empty: {p}")
    return text
