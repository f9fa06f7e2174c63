from __future__ import annotations

from typing import List

from coursetune.core.models import ExtractedText, TextBlock


def split_text(text: str, block_size: int) -> List[str]:
    """Split ``text`` into consecutive slices of ``block_size`` characters.

    Only the final slice may be shorter. Slices neither overlap nor leave
    gaps, so ``"".join(split_text(t, n)) == t``. Empty text gives no slices.
    """
    if block_size <= 0:
        raise ValueError(f"block_size must be > 0 (got {block_size})")
    return [text[i:i + block_size] for i in range(0, len(text), block_size)]


def split_extracted_text(extracted: ExtractedText, block_size: int) -> List[TextBlock]:
    """Chunk one file's normalized text into ordered TextBlocks."""
    return [
        TextBlock(
            source=extracted.source,
            file_index=extracted.file_index,
            index=index,
            text=piece,
        )
        for index, piece in enumerate(split_text(extracted.text, block_size))
    ]
