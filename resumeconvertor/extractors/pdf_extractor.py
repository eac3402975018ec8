"""
PDF ➜ raw text

Pages are read in physical order and joined with a line break; no
reordering or de-duplication is applied.
"""

from __future__ import annotations

import logging
import warnings

import pdfplumber

from ..errors import ExtractionIoError
from .base import RawDocument, TextExtractor

# silence noisy PDF logging
logging.getLogger("pdfplumber").setLevel(logging.ERROR)
logging.getLogger("pdfminer").setLevel(logging.ERROR)
warnings.filterwarnings("ignore", category=UserWarning, module="pdfminer")


class PdfTextExtractor(TextExtractor):
    """Extracts page text from PDF resumes with pdfplumber."""

    def extract(self, document: RawDocument) -> str:
        if not document.path.is_file():
            raise ExtractionIoError(f"Document not found: {document.path}")
        try:
            with pdfplumber.open(document.path) as pdf:
                pages = [page.extract_text() or "" for page in pdf.pages]
        except Exception as e:
            # pdfminer raises its own syntax/type errors for damaged files
            raise ExtractionIoError(
                f"Cannot read PDF {document.path.name}: {type(e).__name__}: {e}"
            ) from e
        return "\n".join(pages).strip()
