"""
Resume text extraction interfaces and implementations.

Each supported document format has one registered extractor; any other
format is rejected before a file is read.
"""

from pathlib import Path
from typing import Union

from ..errors import UnsupportedFormatError
from .base import DocumentFormat, RawDocument, TextExtractor
from .extractor_registry import (
    get_extractor,
    list_extractors,
    register_extractor,
    unregister_extractor,
)
from .pdf_extractor import PdfTextExtractor
from .plaintext_extractor import PlainTextExtractor

register_extractor(DocumentFormat.PLAINTEXT, PlainTextExtractor)
register_extractor(DocumentFormat.PDF, PdfTextExtractor)


def extract_text(document: Union[RawDocument, Path, str]) -> str:
    """
    Extract the text of a resume document.

    Accepts a RawDocument or a path (whose suffix selects the format).

    Raises:
        UnsupportedFormatError: For anything other than .txt or .pdf
        ExtractionIoError: If the file cannot be read
    """
    if not isinstance(document, RawDocument):
        document = RawDocument.from_path(Path(document))
    extractor = get_extractor(document.format)
    if extractor is None:
        raise UnsupportedFormatError(f"No extractor registered for {document.format.value}")
    return extractor.extract(document)


__all__ = [
    "DocumentFormat",
    "RawDocument",
    "TextExtractor",
    "PlainTextExtractor",
    "PdfTextExtractor",
    "extract_text",
    "register_extractor",
    "get_extractor",
    "list_extractors",
    "unregister_extractor",
]
