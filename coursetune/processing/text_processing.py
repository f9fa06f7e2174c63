# coursetune/processing/text_processing.py

from __future__ import annotations

import re

# Horizontal whitespace only; line breaks are handled line by line
_INLINE_WS_RE = re.compile(r"[^\S\n]+")


def normalize_text(value: str) -> str:
    """Collapse whitespace runs, drop blank lines, and trim.

    Carriage returns and form feeds count as line breaks, so Windows line
    endings and page breaks come out as plain ``\\n``. Runs of line breaks
    (including lines holding only whitespace) collapse to a single ``\\n``.
    The result never starts or ends with whitespace.
    """
    if not value:
        return ""

    text = value.replace("\r\n", "\n").replace("\r", "\n").replace("\f", "\n")
    lines = (_INLINE_WS_RE.sub(" ", line).strip() for line in text.split("\n"))
    return "\n".join(line for line in lines if line)
