"""
Shared models and text utilities.

Defines common data structures (pipeline steps, per-file status, the
canonical resume record, output artifacts) and prompt loading helpers
used across extraction, normalization and rendering.
"""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .logging_utils import LOG, fmt_issues

# ------------------------- Models -------------------------


class StepName(str, Enum):
    Extract = "Extract"
    ModelCall = "ModelCall"
    Sanitize = "Sanitize"
    Normalize = "Normalize"
    Render = "Render"
    Convert = "Convert"
    Write = "Write"


@dataclass
class StepStatus:
    step: StepName
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings and not self.errors


@dataclass(frozen=True)
class OutputArtifacts:
    html_path: Path
    docx_path: Path

    @classmethod
    def for_input(cls, source: Path, output_dir: Path) -> "OutputArtifacts":
        """Deterministic output paths named after the input's base name."""
        stem = source.stem
        return cls(
            html_path=output_dir / f"{stem}.html",
            docx_path=output_dir / f"{stem}.docx",
        )


@dataclass
class ResumeRecord:
    """
    Canonical, fully-defaulted resume.

    Scalar fields are always strings and collection fields are always lists,
    so templates can bind every field without checking for presence. List
    elements are kept exactly as the model produced them (strings or
    free-form objects).
    """
    full_name: str = ""
    title: str = ""
    email: str = ""
    phone_number: str = ""
    linkedin: str = ""
    location: str = ""
    strengths: str = ""
    skill_matrix: List[Any] = field(default_factory=list)
    key_achievements: List[Any] = field(default_factory=list)
    education: List[Any] = field(default_factory=list)
    projects: List[Any] = field(default_factory=list)
    certifications: List[Any] = field(default_factory=list)
    software_training: str = ""
    references: List[Any] = field(default_factory=list)
    logo_base64: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def dump(self, include_logo: bool = False) -> str:
        """Indented JSON dump for debug output; the logo is elided by default."""
        data = self.to_dict()
        if not include_logo and data["logo_base64"]:
            data["logo_base64"] = f"<{len(data['logo_base64'])} base64 chars>"
        return json.dumps(data, indent=2, ensure_ascii=False)


@dataclass
class UnitOfWork:
    """
    Status container for one input file's pipeline run.

    step_statuses collects errors and warnings per step so a single
    status line can be emitted once the file is done.
    """
    input: Path
    artifacts: Optional[OutputArtifacts] = None
    step_statuses: Dict[StepName, StepStatus] = field(default_factory=dict)
    elapsed_s: float = 0.0

    def _get_step_status(self, step: StepName) -> StepStatus:
        status = self.step_statuses.get(step)
        if status is None:
            status = StepStatus(step=step)
            self.step_statuses[step] = status
        return status

    def add_warning(self, step: StepName, message: str) -> None:
        self._get_step_status(step).warnings.append(message)

    def add_error(self, step: StepName, message: str) -> None:
        self._get_step_status(step).errors.append(message)

    def has_no_errors(self, step: Optional[StepName] = None) -> bool:
        if step is None:
            return all(not status.errors for status in self.step_statuses.values())
        status = self.step_statuses.get(step)
        return not status.errors if status else True

    @property
    def ok(self) -> bool:
        return self.has_no_errors() and self.artifacts is not None

    def all_errors(self) -> List[str]:
        return [e for status in self.step_statuses.values() for e in status.errors]

    def all_warnings(self) -> List[str]:
        return [w for status in self.step_statuses.values() for w in status.warnings]


def get_status_icon(work: UnitOfWork) -> str:
    """Single icon summarizing a file's run."""
    if not work.has_no_errors():
        return "❌"
    if work.all_warnings():
        return "⚠️ "
    if work.artifacts is None:
        return "➖"
    return "✅"


def emit_work_status(work: UnitOfWork) -> str:
    return (
        f"{get_status_icon(work)} "
        f"{work.input.name} | "
        f"{work.elapsed_s:.2f}s | "
        f"{fmt_issues(work.all_errors(), work.all_warnings())}"
    )


def emit_summary(results: List[UnitOfWork], output_dir: Path, elapsed_s: float) -> str:
    converted = sum(1 for work in results if work.ok)
    failed = len(results) - converted
    return (
        "📊 Batch completed in %.2f sec. Converted: %d | Failed: %d | Output: %s"
        % (elapsed_s, converted, failed, output_dir)
    )


# ---------------------- Prompt Loading ----------------------

_PROMPTS_DIR = Path(__file__).parent / "prompts"

DEFAULT_PROMPT_NAME = "resume_extraction_system"


def load_prompt(prompt_name: str) -> Optional[str]:
    """
    Load a packaged prompt from resumeconvertor/prompts/{prompt_name}.md.

    Returns:
        The prompt text, or None if the file doesn't exist or can't be read
    """
    prompt_path = _PROMPTS_DIR / f"{prompt_name}.md"
    try:
        return prompt_path.read_text(encoding="utf-8")
    except OSError as e:
        LOG.error("Failed to read prompt %s: %s", prompt_path, e)
        return None
