"""
Extractor registry mapping document formats to text extractors.
"""

from __future__ import annotations

from typing import Dict, List, Optional, Type

from .base import DocumentFormat, TextExtractor


# Global extractor registry
_EXTRACTOR_REGISTRY: Dict[DocumentFormat, Type[TextExtractor]] = {}


def register_extractor(fmt: DocumentFormat, extractor_class: Type[TextExtractor]) -> None:
    """
    Register an extractor class for a document format.

    Args:
        fmt: The format the extractor handles
        extractor_class: The extractor class to register
    """
    _EXTRACTOR_REGISTRY[fmt] = extractor_class


def get_extractor(fmt: DocumentFormat, **kwargs) -> Optional[TextExtractor]:
    """
    Get an extractor instance for a format.

    Args:
        fmt: The document format
        **kwargs: Arguments to pass to the extractor constructor

    Returns:
        Extractor instance, or None if no extractor is registered
    """
    extractor_class = _EXTRACTOR_REGISTRY.get(fmt)
    if extractor_class:
        return extractor_class(**kwargs)
    return None


def list_extractors() -> List[Dict[str, str]]:
    """
    List all registered extractors with their descriptions.

    Returns:
        List of dicts with 'format' and 'description' keys
    """
    extractors = []
    for fmt, extractor_class in _EXTRACTOR_REGISTRY.items():
        description = extractor_class.__doc__ or "No description available"
        description = description.strip().split('\n')[0]
        extractors.append({
            'format': fmt.value,
            'description': description
        })
    return sorted(extractors, key=lambda x: x['format'])


def unregister_extractor(fmt: DocumentFormat) -> None:
    """
    Unregister the extractor for a format.

    Args:
        fmt: The format to unregister
    """
    _EXTRACTOR_REGISTRY.pop(fmt, None)


__all__ = [
    "register_extractor",
    "get_extractor",
    "list_extractors",
    "unregister_extractor",
]
