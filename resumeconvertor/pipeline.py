"""
Single-file conversion pipeline.

Extract -> ModelCall -> Sanitize -> Normalize -> Render -> Convert -> Write

Every stage failure raises a ConversionError tagged with its step; the
batch driver decides what to do with it. Shared assets (template, prompt,
logo, API settings) are loaded once when the converter is built and are
never mutated, so one ResumeConverter can serve concurrent runs.
"""

from __future__ import annotations

import asyncio
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from .cli_config import ConvertorSettings
from .converters import HtmlDocxConverter
from .errors import ConfigurationError, ConversionError, ConvertError, OutputWriteError, RenderError
from .extraction_client import ResumeExtractionClient, RetryConfig
from .extractors import RawDocument, extract_text
from .logging_utils import LOG
from .normalizer import ResumeNormalizer
from .renderers import HtmlRenderer, ResumeRenderer
from .sanitizer import sanitize_model_response
from .shared import DEFAULT_PROMPT_NAME, OutputArtifacts, ResumeRecord, StepName, load_prompt


@contextmanager
def pipeline_step(step: StepName) -> Iterator[None]:
    """Tag any failure outside the error taxonomy with the step that raised it."""
    try:
        yield
    except ConversionError:
        raise
    except Exception as e:
        raise ConversionError(f"Unexpected {type(e).__name__}: {e}", stage=step) from e


def load_system_prompt(prompt_file: Optional[Path]) -> str:
    """Read the extraction instruction from a file, or the packaged default."""
    if prompt_file is not None:
        try:
            return Path(prompt_file).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(f"Cannot read prompt file {prompt_file}: {e}") from e
    prompt = load_prompt(DEFAULT_PROMPT_NAME)
    if not prompt:
        raise ConfigurationError("Packaged extraction prompt is missing")
    return prompt


class ResumeConverter:
    """
    Converts resume files to HTML and DOCX artifacts.
    """

    def __init__(
        self,
        settings: ConvertorSettings,
        *,
        client: Optional[ResumeExtractionClient] = None,
        renderer: Optional[ResumeRenderer] = None,
        normalizer: Optional[ResumeNormalizer] = None,
        converter: Optional[HtmlDocxConverter] = None,
    ):
        self.settings = settings
        self.output_dir = settings.output_directory
        self.debug = settings.debug

        if renderer is None:
            try:
                renderer = HtmlRenderer.from_file(settings.template_file)
            except FileNotFoundError as e:
                raise ConfigurationError(str(e)) from e
        self.renderer = renderer

        if client is None:
            client = ResumeExtractionClient(
                load_system_prompt(settings.prompt_file),
                model=settings.model,
                api_key=settings.api_key,
                base_url=settings.base_url,
                retry_config=RetryConfig(max_attempts=settings.max_attempts),
            )
        self.client = client
        self.normalizer = normalizer or ResumeNormalizer(settings.logo_file)
        self.converter = converter or HtmlDocxConverter()

    def artifacts_for(self, source: Path) -> OutputArtifacts:
        return OutputArtifacts.for_input(source, self.output_dir)

    async def parse(self, source: Path) -> ResumeRecord:
        """Extract, query the model, sanitize and normalize one file."""
        with pipeline_step(StepName.Extract):
            document = RawDocument.from_path(source)
            # pdf parsing is CPU bound
            text = await asyncio.to_thread(extract_text, document)
        LOG.debug("%s: extracted %d characters", source.name, len(text))

        with pipeline_step(StepName.ModelCall):
            answer = await self.client.complete(text)
        with pipeline_step(StepName.Sanitize):
            cleaned = sanitize_model_response(answer)
        with pipeline_step(StepName.Normalize):
            record = self.normalizer.normalize_text(cleaned)

        if self.debug:
            LOG.debug("==== MAPPED MODEL (%s) ====\n%s", source.name, record.dump())
        return record

    def render(self, record: ResumeRecord) -> str:
        try:
            return self.renderer.render(record)
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(f"{type(e).__name__}: {e}") from e

    async def write(self, html: str, artifacts: OutputArtifacts) -> OutputArtifacts:
        try:
            docx_bytes = await asyncio.to_thread(self.converter.convert, html)
        except ConvertError:
            raise
        except Exception as e:
            raise ConvertError(f"{type(e).__name__}: {e}") from e

        with pipeline_step(StepName.Write):
            self._write_files(html, docx_bytes, artifacts)
        return artifacts

    def _write_files(self, html: str, docx_bytes: bytes, artifacts: OutputArtifacts) -> None:
        try:
            artifacts.html_path.parent.mkdir(parents=True, exist_ok=True)
            artifacts.html_path.write_text(html, encoding="utf-8")
            artifacts.docx_path.write_bytes(docx_bytes)
        except OSError as e:
            raise OutputWriteError(f"Cannot write outputs to {artifacts.html_path.parent}: {e}") from e

    async def run(self, source: Path) -> OutputArtifacts:
        """Convert one resume file; returns the paths of both artifacts."""
        source = Path(source)
        record = await self.parse(source)
        html = self.render(record)
        artifacts = await self.write(html, self.artifacts_for(source))
        LOG.info("HTML and DOCX files generated:\n   • %s\n   • %s", artifacts.html_path, artifacts.docx_path)
        return artifacts
