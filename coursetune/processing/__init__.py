"""Document processing package.

Provides text extraction for plain text, markdown, Word, PDF and slide
documents, text normalization, and fixed-size chunking.
"""

from .chunking import split_extracted_text, split_text
from .extractors import (
    DocumentType,
    detect_document_type,
    extract_text,
    extract_uploaded_file,
    get_extractor,
    register_extractor,
)
from .text_processing import normalize_text

__all__ = [
    "DocumentType",
    "detect_document_type",
    "extract_text",
    "extract_uploaded_file",
    "get_extractor",
    "register_extractor",
    "normalize_text",
    "split_text",
    "split_extracted_text",
]
