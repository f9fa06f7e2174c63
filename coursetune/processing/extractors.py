"""Document text extraction.

Each supported document type maps to one extraction strategy in a registry;
supporting a new format means registering one more strategy. Every strategy
returns raw text, which is then normalized before it leaves this module.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Optional

from coursetune.config.constants import DOCUMENT_MIME_TYPES, SUPPORTED_DOCUMENT_FORMATS
from coursetune.core.errors import ExtractionError, UnsupportedFileTypeError
from coursetune.core.models import ExtractedText, UploadedFile
from coursetune.processing.office_utils import extract_docx_text, extract_pptx_text
from coursetune.processing.pdf_utils import PDFProcessor
from coursetune.processing.text_processing import normalize_text

logger = logging.getLogger(__name__)


class DocumentType(str, Enum):
    """Supported document types."""
    TEXT = "text"
    MARKDOWN = "markdown"
    WORD = "word"
    PDF = "pdf"
    PRESENTATION = "presentation"


ExtractorFunc = Callable[[Path], str]

_EXTRACTORS: Dict[DocumentType, ExtractorFunc] = {}


def register_extractor(doc_type: DocumentType) -> Callable[[ExtractorFunc], ExtractorFunc]:
    """Decorator registering the extraction strategy for a document type."""
    def decorator(func: ExtractorFunc) -> ExtractorFunc:
        _EXTRACTORS[DocumentType(doc_type)] = func
        return func
    return decorator


def get_extractor(doc_type: DocumentType) -> ExtractorFunc:
    """Return the strategy registered for ``doc_type``."""
    try:
        return _EXTRACTORS[DocumentType(doc_type)]
    except (KeyError, ValueError) as e:
        raise UnsupportedFileTypeError(f"Unsupported file type: {doc_type}") from e


def supported_document_types() -> list[DocumentType]:
    return sorted(_EXTRACTORS, key=lambda t: t.value)


def detect_document_type(filename: str, declared_type: Optional[str] = None) -> DocumentType:
    """Resolve the document type from a declared MIME type or the file extension.

    A known declared MIME type wins; otherwise the extension of ``filename``
    decides.

    Raises:
        UnsupportedFileTypeError: If neither resolves to a supported type.
    """
    if declared_type:
        mime = declared_type.split(";", 1)[0].strip().lower()
        if mime in DOCUMENT_MIME_TYPES:
            return DocumentType(DOCUMENT_MIME_TYPES[mime])

    ext = Path(filename).suffix.lower()
    type_name = SUPPORTED_DOCUMENT_FORMATS.get(ext)
    if type_name is None:
        raise UnsupportedFileTypeError(
            f"Unsupported file type: {ext or '<no extension>'} ({filename})"
        )
    return DocumentType(type_name)


@register_extractor(DocumentType.TEXT)
@register_extractor(DocumentType.MARKDOWN)
def _read_plain_text(path: Path) -> str:
    return path.read_text(encoding="utf-8-sig")


@register_extractor(DocumentType.WORD)
def _read_word_document(path: Path) -> str:
    return extract_docx_text(path)


@register_extractor(DocumentType.PDF)
def _read_pdf(path: Path) -> str:
    return PDFProcessor(path).extract_text()


@register_extractor(DocumentType.PRESENTATION)
def _read_presentation(path: Path) -> str:
    return extract_pptx_text(path)


def extract_text(path: Path, doc_type: DocumentType) -> str:
    """Extract and normalize the text of one document.

    Raises:
        UnsupportedFileTypeError: ``doc_type`` has no registered strategy.
        ExtractionError: The document exists but could not be read or parsed.
    """
    extractor = get_extractor(doc_type)
    try:
        raw = extractor(Path(path))
    except Exception as e:
        raise ExtractionError(f"Failed to extract text from {Path(path).name}: {e}") from e
    return normalize_text(raw)


def extract_uploaded_file(uploaded: UploadedFile, file_index: int = 0) -> ExtractedText:
    """Extract one uploaded file into an ExtractedText record."""
    doc_type = detect_document_type(uploaded.original_name, uploaded.declared_type)
    logger.info(f"Extracting {uploaded.original_name} as {doc_type.value}")
    text = extract_text(uploaded.path, doc_type)
    return ExtractedText(source=uploaded, file_index=file_index, text=text)
