"""
Base interface for resume text extractors.

Defines the source document model and the contract for pluggable
format-specific text extraction.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ..errors import UnsupportedFormatError


class DocumentFormat(str, Enum):
    PLAINTEXT = "plaintext"
    PDF = "pdf"


SUFFIX_FORMATS = {
    ".txt": DocumentFormat.PLAINTEXT,
    ".pdf": DocumentFormat.PDF,
}


@dataclass(frozen=True)
class RawDocument:
    """A source file plus the format tag that selects its extractor."""
    path: Path
    format: DocumentFormat

    @classmethod
    def from_path(cls, path: Path) -> "RawDocument":
        path = Path(path)
        fmt = SUFFIX_FORMATS.get(path.suffix.lower())
        if fmt is None:
            raise UnsupportedFormatError(
                f"Unsupported format '{path.suffix or '<none>'}': {path.name}"
            )
        return cls(path=path, format=fmt)


class TextExtractor(ABC):
    """
    Abstract base class for text extractors.

    Implementations turn one source document into a single text blob.
    They perform no interpretation of the content.
    """

    @abstractmethod
    def extract(self, document: RawDocument) -> str:
        """
        Extract the text of the given document.

        Args:
            document: Source document; its format matches this extractor

        Returns:
            The extracted text

        Raises:
            ExtractionIoError: If the file is missing, unreadable or corrupt
        """
        pass
