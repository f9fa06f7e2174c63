# coursetune/processing/pdf_utils.py

from __future__ import annotations

import logging
from pathlib import Path
from typing import List

import fitz

logger = logging.getLogger(__name__)


class PDFProcessor:
    """
    A class for handling PDF text extraction.
    """

    def __init__(self, pdf_path: Path) -> None:
        self.pdf_path = pdf_path

    def extract_page_texts(self) -> List[str]:
        """
        Extract the text layer of every page, in page order.

        Text within a page is returned in PyMuPDF's reading order (sorted by
        position), so multi-column layouts come out top-to-bottom, left-to-right.
        """
        page_texts: List[str] = []
        with fitz.open(self.pdf_path) as doc:
            for page_num, page in enumerate(doc, start=1):
                text = page.get_text("text", sort=True)
                if not text.strip():
                    logger.info(f"No text layer on page {page_num} of {self.pdf_path.name}")
                page_texts.append(text)
        return page_texts

    def extract_text(self) -> str:
        """Concatenate all page texts, one newline between pages."""
        return "\n".join(self.extract_page_texts())
