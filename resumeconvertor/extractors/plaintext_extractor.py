"""
Plain text extractor: the file content is the extracted text.
"""

from __future__ import annotations

from ..errors import ExtractionIoError
from .base import RawDocument, TextExtractor


class PlainTextExtractor(TextExtractor):
    """Reads .txt resumes verbatim."""

    def extract(self, document: RawDocument) -> str:
        try:
            # decode the bytes so line endings reach the model untouched
            return document.path.read_bytes().decode("utf-8", errors="replace")
        except OSError as e:
            raise ExtractionIoError(f"Cannot read {document.path}: {e}") from e
