"""Tests for resume text extraction."""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from resumeconvertor.errors import ExtractionIoError, UnsupportedFormatError
from resumeconvertor.extractors import (
    DocumentFormat,
    PdfTextExtractor,
    PlainTextExtractor,
    RawDocument,
    extract_text,
)


class TestRawDocument:
    """Tests for format detection."""

    def test_txt_is_plaintext(self, tmp_path):
        doc = RawDocument.from_path(tmp_path / "cv.txt")
        assert doc.format == DocumentFormat.PLAINTEXT

    def test_pdf_is_pdf_case_insensitive(self, tmp_path):
        doc = RawDocument.from_path(tmp_path / "CV.PDF")
        assert doc.format == DocumentFormat.PDF

    @pytest.mark.parametrize("name", ["cv.docx", "cv.html", "cv", "cv.txt.bak"])
    def test_other_suffixes_rejected(self, tmp_path, name):
        with pytest.raises(UnsupportedFormatError):
            RawDocument.from_path(tmp_path / name)

    def test_unsupported_error_is_extract_stage(self, tmp_path):
        with pytest.raises(UnsupportedFormatError) as exc_info:
            extract_text(tmp_path / "resume.doc")
        assert exc_info.value.stage.value == "Extract"


class TestPlainTextExtraction:
    """Plain text is returned verbatim."""

    def test_reads_verbatim(self, tmp_path):
        src = tmp_path / "cv.txt"
        content = "  Jane Doe\n\nData Engineer  \n\tPython\n"
        src.write_text(content, encoding="utf-8")
        assert extract_text(src) == content

    def test_accepts_path_string(self, tmp_path):
        src = tmp_path / "cv.txt"
        src.write_text("hello", encoding="utf-8")
        assert extract_text(str(src)) == "hello"

    def test_missing_file_raises_extraction_io_error(self, tmp_path):
        with pytest.raises(ExtractionIoError):
            PlainTextExtractor().extract(RawDocument(tmp_path / "nope.txt", DocumentFormat.PLAINTEXT))

    def test_line_endings_preserved(self, tmp_path):
        src = tmp_path / "cv.txt"
        src.write_bytes(b"Jane\r\nDoe\rX")
        assert extract_text(src) == "Jane\r\nDoe\rX"

    def test_invalid_utf8_bytes_replaced(self, tmp_path):
        src = tmp_path / "cv.txt"
        src.write_bytes(b"Caf\xe9 owner")
        text = extract_text(src)
        assert text.startswith("Caf")
        assert text.endswith(" owner")


class TestPdfExtraction:
    """PDF pages are joined in order and trimmed."""

    def test_three_pages_in_order(self, pdf_factory):
        path = pdf_factory(["Page1", "Page2", "Page3"])
        assert extract_text(path) == "Page1\nPage2\nPage3"

    def test_pages_joined_with_newline_and_trimmed(self, tmp_path):
        pages = [
            SimpleNamespace(extract_text=lambda: "  first"),
            SimpleNamespace(extract_text=lambda: None),
            SimpleNamespace(extract_text=lambda: "third  \n"),
        ]
        fake_pdf = MagicMock()
        fake_pdf.__enter__.return_value = SimpleNamespace(pages=pages)
        src = tmp_path / "cv.pdf"
        src.write_bytes(b"%PDF-1.4")
        with patch("resumeconvertor.extractors.pdf_extractor.pdfplumber.open", return_value=fake_pdf):
            assert extract_text(src) == "first\n\nthird"

    def test_corrupt_pdf_raises_extraction_io_error(self, tmp_path):
        src = tmp_path / "broken.pdf"
        src.write_bytes(b"this is not a pdf at all")
        with pytest.raises(ExtractionIoError) as exc_info:
            extract_text(src)
        assert exc_info.value.__cause__ is not None

    def test_missing_pdf_raises_extraction_io_error(self, tmp_path):
        with pytest.raises(ExtractionIoError, match="not found"):
            PdfTextExtractor().extract(RawDocument(tmp_path / "gone.pdf", DocumentFormat.PDF))
