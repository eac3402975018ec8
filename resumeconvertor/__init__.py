# resumeconvertor/__init__.py

from .extractors import RawDocument, DocumentFormat, extract_text
from .extraction_client import ResumeExtractionClient, RetryConfig
from .sanitizer import sanitize_model_response
from .normalizer import normalize_resume, parse_model_json, ResumeNormalizer
from .renderers import HtmlRenderer
from .converters import HtmlDocxConverter
from .pipeline import ResumeConverter
from .shared import ResumeRecord, OutputArtifacts

__all__ = [
    "RawDocument",
    "DocumentFormat",
    "extract_text",
    "ResumeExtractionClient",
    "RetryConfig",
    "sanitize_model_response",
    "normalize_resume",
    "parse_model_json",
    "ResumeNormalizer",
    "HtmlRenderer",
    "HtmlDocxConverter",
    "ResumeConverter",
    "ResumeRecord",
    "OutputArtifacts",
]
