"""
Document converters for rendered resume HTML.
"""

from .docx_converter import HtmlDocxConverter, RunFormat, parse_inline_style

__all__ = [
    "HtmlDocxConverter",
    "RunFormat",
    "parse_inline_style",
]
