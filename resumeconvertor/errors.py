"""
Error taxonomy for the conversion pipeline.

Every per-file failure is a ConversionError tagged with the pipeline step
that raised it; the batch driver catches these at the file boundary.
"""

from __future__ import annotations

from typing import Optional

from .shared import StepName


class ConversionError(Exception):
    """Base class for errors that abort a single file's conversion."""

    stage: StepName = StepName.Extract

    def __init__(self, message: str, *, stage: Optional[StepName] = None):
        super().__init__(message)
        if stage is not None:
            self.stage = stage


class UnsupportedFormatError(ConversionError):
    stage = StepName.Extract


class ExtractionIoError(ConversionError):
    stage = StepName.Extract


class ModelCallError(ConversionError):
    stage = StepName.ModelCall


class MissingContentError(ConversionError):
    stage = StepName.ModelCall


class MalformedJsonError(ConversionError):
    stage = StepName.Normalize


class RenderError(ConversionError):
    stage = StepName.Render


class ConvertError(ConversionError):
    stage = StepName.Convert


class OutputWriteError(ConversionError):
    stage = StepName.Write


class ConfigurationError(Exception):
    """Invalid or incomplete settings; fatal for the whole run, not per file."""
