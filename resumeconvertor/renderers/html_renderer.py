"""
Jinja2-based HTML renderer.

Autoescaping is always on. Fields that carry markup of their own (summaries,
achievement lists) are passed through only where the template explicitly
asks for it with ``raw(value)`` or ``value|raw``; the result is a
``markupsafe.Markup`` fragment, which Jinja2 emits verbatim.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

from jinja2 import Environment, TemplateError
from markupsafe import Markup

from ..errors import RenderError
from ..shared import ResumeRecord
from .base import ResumeRenderer

DEFAULT_TEMPLATE = Path(__file__).parent / "templates" / "resume.html.j2"


def raw(value: Any) -> Markup:
    """Mark a value as an unescaped HTML fragment; None becomes empty."""
    if value is None:
        return Markup("")
    return Markup(str(value))


def _make_environment() -> Environment:
    env = Environment(autoescape=True)
    env.globals["raw"] = raw
    env.filters["raw"] = raw
    return env


class HtmlRenderer(ResumeRenderer):
    """
    Renders resumes through a compiled Jinja2 template.

    The record is available both as ``resume`` and as top-level names for
    each field (``full_name``, ``skill_matrix``, ...).
    """

    def __init__(self, template_text: str, name: Optional[str] = None):
        self.name = name or "<string>"
        self._env = _make_environment()
        try:
            self._template = self._env.from_string(template_text)
        except TemplateError as e:
            raise RenderError(f"Cannot compile template {self.name}: {e}") from e

    @classmethod
    def from_file(cls, template_path: Optional[Path] = None) -> "HtmlRenderer":
        path = Path(template_path) if template_path else DEFAULT_TEMPLATE
        if not path.is_file():
            raise FileNotFoundError(f"Template file not found: {path}")
        return cls(path.read_text(encoding="utf-8"), name=str(path))

    @classmethod
    def from_string(cls, template_text: str) -> "HtmlRenderer":
        return cls(template_text)

    def render(self, record: ResumeRecord) -> str:
        context = record.to_dict()
        context["resume"] = record
        try:
            return self._template.render(**context)
        except TemplateError as e:
            raise RenderError(f"Template {self.name} failed: {e}") from e
