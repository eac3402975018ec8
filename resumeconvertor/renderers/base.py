"""
Base interface for resume renderers.

Defines the contract for binding a ResumeRecord to a presentation template.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..shared import ResumeRecord


class ResumeRenderer(ABC):
    """
    Abstract base class for resume renderers.

    Implementations compile their template once and can render any number
    of records; rendering is synchronous and deterministic.
    """

    @abstractmethod
    def render(self, record: ResumeRecord) -> str:
        """
        Render a record to a complete HTML document.

        Args:
            record: Fully-defaulted resume record

        Returns:
            The rendered HTML

        Raises:
            RenderError: For template evaluation errors
        """
        pass
