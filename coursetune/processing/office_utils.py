from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List

import docx
from pptx import Presentation

logger = logging.getLogger(__name__)


def extract_docx_text(path: Path) -> str:
    """Return the paragraph text of a Word document, followed by its table cells.

    Table rows are rendered as tab-separated cell text, one row per line.
    """
    document = docx.Document(str(path))
    lines: List[str] = [paragraph.text for paragraph in document.paragraphs]

    for table in document.tables:
        for row in table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                lines.append("\t".join(cells))

    return "\n".join(lines)


@dataclass(slots=True)
class SlideText:
    """Text found on one slide, in shape order."""

    index: int
    chunks: List[str]

    def to_plain_text(self) -> str:
        return "\n".join(chunk for chunk in self.chunks if chunk.strip())


def _shape_texts(shape) -> List[str]:
    texts: List[str] = []
    # Group shapes nest their children
    if getattr(shape, "shapes", None) is not None:
        for child in shape.shapes:
            texts.extend(_shape_texts(child))
        return texts
    if getattr(shape, "has_text_frame", False) and shape.has_text_frame:
        texts.append(shape.text_frame.text)
    elif getattr(shape, "has_table", False) and shape.has_table:
        for row in shape.table.rows:
            cells = [cell.text.strip() for cell in row.cells]
            if any(cells):
                texts.append("\t".join(cells))
    return texts


def extract_slides(path: Path) -> List[SlideText]:
    """Collect the text of every slide, including speaker notes."""
    presentation = Presentation(str(path))
    slides: List[SlideText] = []
    for index, slide in enumerate(presentation.slides):
        chunks: List[str] = []
        for shape in slide.shapes:
            chunks.extend(_shape_texts(shape))
        if slide.has_notes_slide:
            notes = slide.notes_slide.notes_text_frame
            if notes is not None and notes.text.strip():
                chunks.append(notes.text)
        slides.append(SlideText(index=index, chunks=chunks))
    logger.info(f"Read {len(slides)} slide(s) from {path.name}")
    return slides


def extract_pptx_text(path: Path) -> str:
    """Concatenate slide texts in slide order, one newline between slides."""
    return "\n".join(slide.to_plain_text() for slide in extract_slides(path))
