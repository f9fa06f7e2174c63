"""Unit tests for coursetune/processing/extractors.py.

Documents are generated on the fly with the same libraries the extractors
read them with.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from coursetune.core.errors import ExtractionError, UnsupportedFileTypeError
from coursetune.core.models import UploadedFile
from coursetune.processing.extractors import (
    DocumentType,
    detect_document_type,
    extract_text,
    extract_uploaded_file,
    get_extractor,
    register_extractor,
    supported_document_types,
)


class TestDetectDocumentType:
    """Tests for detect_document_type."""

    @pytest.mark.unit
    @pytest.mark.parametrize(
        "filename,expected",
        [
            ("a.txt", DocumentType.TEXT),
            ("a.md", DocumentType.MARKDOWN),
            ("a.markdown", DocumentType.MARKDOWN),
            ("a.doc", DocumentType.WORD),
            ("a.DOCX", DocumentType.WORD),
            ("a.pdf", DocumentType.PDF),
            ("a.ppt", DocumentType.PRESENTATION),
            ("a.pptx", DocumentType.PRESENTATION),
        ],
    )
    def test_extension_mapping(self, filename, expected):
        assert detect_document_type(filename) is expected

    @pytest.mark.unit
    def test_unknown_extension(self):
        with pytest.raises(UnsupportedFileTypeError):
            detect_document_type("program.exe")

    @pytest.mark.unit
    def test_no_extension(self):
        with pytest.raises(UnsupportedFileTypeError):
            detect_document_type("README")

    @pytest.mark.unit
    def test_declared_mime_type_takes_precedence(self):
        assert detect_document_type("upload.bin", "application/pdf") is DocumentType.PDF
        assert detect_document_type("notes.txt", "text/markdown") is DocumentType.MARKDOWN

    @pytest.mark.unit
    def test_mime_parameters_ignored(self):
        assert detect_document_type("x", "text/plain; charset=utf-8") is DocumentType.TEXT

    @pytest.mark.unit
    def test_unknown_mime_falls_back_to_extension(self):
        assert detect_document_type("a.docx", "application/octet-stream") is DocumentType.WORD


class TestExtractorRegistry:
    """Tests for the extractor registry."""

    @pytest.mark.unit
    def test_every_type_has_a_strategy(self):
        assert set(supported_document_types()) == set(DocumentType)

    @pytest.mark.unit
    def test_get_extractor_unknown(self):
        with pytest.raises(UnsupportedFileTypeError):
            get_extractor("spreadsheet")

    @pytest.mark.unit
    def test_register_replaces_strategy(self, temp_dir):
        original = get_extractor(DocumentType.TEXT)
        try:
            @register_extractor(DocumentType.TEXT)
            def _shout(path: Path) -> str:
                return "LOUD   TEXT"

            p = temp_dir / "a.txt"
            p.write_text("quiet", encoding="utf-8")
            assert extract_text(p, DocumentType.TEXT) == "LOUD TEXT"
        finally:
            register_extractor(DocumentType.TEXT)(original)


class TestExtractText:
    """Tests for the per-format strategies."""

    @pytest.mark.unit
    def test_plain_text_is_normalized(self, sample_text_file):
        text = extract_text(sample_text_file, DocumentType.TEXT)
        assert text == "Lecture 1\nPhotosynthesis converts light.\nEnd."

    @pytest.mark.unit
    def test_markdown_blank_lines_dropped(self, sample_markdown_file):
        text = extract_text(sample_markdown_file, DocumentType.MARKDOWN)
        assert text == "# Title\nSome *markdown* text."

    @pytest.mark.unit
    def test_utf8_bom_stripped(self, temp_dir):
        p = temp_dir / "bom.txt"
        p.write_bytes(b"\xef\xbb\xbfhello")
        assert extract_text(p, DocumentType.TEXT) == "hello"

    @pytest.mark.unit
    def test_docx(self, sample_docx_file):
        text = extract_text(sample_docx_file, DocumentType.WORD)
        assert "First paragraph." in text
        assert "Second paragraph." in text
        assert "Term Definition" in text

    @pytest.mark.unit
    def test_pdf(self, sample_pdf_file):
        text = extract_text(sample_pdf_file, DocumentType.PDF)
        assert "Page one text" in text
        assert "Page two text" in text
        assert text.index("Page one text") < text.index("Page two text")

    @pytest.mark.unit
    def test_pptx_includes_notes(self, sample_pptx_file):
        text = extract_text(sample_pptx_file, DocumentType.PRESENTATION)
        assert "Cell Biology" in text
        assert "Mitochondria" in text
        assert "Speaker notes here" in text

    @pytest.mark.unit
    def test_blank_slide_yields_empty_text(self, blank_pptx_file):
        assert extract_text(blank_pptx_file, DocumentType.PRESENTATION) == ""

    @pytest.mark.unit
    def test_corrupt_pdf_raises_extraction_error(self, temp_dir):
        p = temp_dir / "broken.pdf"
        p.write_bytes(b"not a pdf at all")
        with pytest.raises(ExtractionError):
            extract_text(p, DocumentType.PDF)

    @pytest.mark.unit
    def test_legacy_doc_raises_extraction_error(self, temp_dir):
        p = temp_dir / "old.doc"
        p.write_bytes(b"\xd0\xcf\x11\xe0legacy binary")
        with pytest.raises(ExtractionError):
            extract_text(p, DocumentType.WORD)

    @pytest.mark.unit
    def test_missing_file_raises_extraction_error(self, temp_dir):
        with pytest.raises(ExtractionError):
            extract_text(temp_dir / "missing.txt", DocumentType.TEXT)


class TestExtractUploadedFile:
    """Tests for extract_uploaded_file."""

    @pytest.mark.unit
    def test_returns_extracted_text(self, sample_text_file):
        uploaded = UploadedFile.from_path(sample_text_file)
        result = extract_uploaded_file(uploaded, file_index=3)
        assert result.source is uploaded
        assert result.file_index == 3
        assert result.text.startswith("Lecture 1")

    @pytest.mark.unit
    def test_unsupported_type(self, temp_dir):
        p = temp_dir / "tool.exe"
        p.write_bytes(b"MZ")
        with pytest.raises(UnsupportedFileTypeError):
            extract_uploaded_file(UploadedFile.from_path(p))

    @pytest.mark.unit
    def test_uses_original_name_for_type(self, temp_dir):
        stored = temp_dir / "upload_7f3a"
        stored.write_text("stored without extension", encoding="utf-8")
        uploaded = UploadedFile(path=stored, original_name="notes.txt")
        assert extract_uploaded_file(uploaded).text == "stored without extension"

    @pytest.mark.unit
    def test_input_file_is_not_modified(self, sample_text_file):
        before = sample_text_file.read_bytes()
        extract_uploaded_file(UploadedFile.from_path(sample_text_file))
        assert sample_text_file.exists()
        assert sample_text_file.read_bytes() == before
