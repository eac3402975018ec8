"""
Resume rendering interfaces and implementations.
"""

from .base import ResumeRenderer
from .html_renderer import DEFAULT_TEMPLATE, HtmlRenderer, raw

__all__ = [
    "ResumeRenderer",
    "HtmlRenderer",
    "DEFAULT_TEMPLATE",
    "raw",
]
