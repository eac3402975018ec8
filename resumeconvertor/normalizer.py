"""
Schema normalization: model JSON ➜ ResumeRecord.

The model is instructed to answer with a fixed set of natural-language
keys. Each canonical field is looked up by exactly one of those keys (no
synonyms, no case folding); anything absent or null gets the field's empty
value, so the resulting record is always complete.
"""

from __future__ import annotations

import base64
import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from .errors import MalformedJsonError
from .logging_utils import LOG
from .shared import ResumeRecord

SCALAR = "scalar"
LIST = "list"


@dataclass(frozen=True)
class FieldSpec:
    source_key: str
    attr: str
    kind: str

    @property
    def default(self) -> Union[str, List[Any]]:
        return "" if self.kind == SCALAR else []


RESUME_FIELDS: Tuple[FieldSpec, ...] = (
    FieldSpec("Full Name", "full_name", SCALAR),
    FieldSpec("Title", "title", SCALAR),
    FieldSpec("Email", "email", SCALAR),
    FieldSpec("Phone Number", "phone_number", SCALAR),
    FieldSpec("LinkedIn", "linkedin", SCALAR),
    FieldSpec("Location", "location", SCALAR),
    FieldSpec("Strengths", "strengths", SCALAR),
    FieldSpec("Skill Matrix", "skill_matrix", LIST),
    FieldSpec("Key_Achievements", "key_achievements", LIST),
    FieldSpec("Education", "education", LIST),
    FieldSpec("Projects", "projects", LIST),
    FieldSpec("Certifications", "certifications", LIST),
    FieldSpec("Software_Training", "software_training", SCALAR),
    FieldSpec("References", "references", LIST),
)

CANONICAL_KEYS: Tuple[str, ...] = tuple(spec.source_key for spec in RESUME_FIELDS)


def parse_model_json(text: str) -> Dict[str, Any]:
    """
    Parse the sanitized model answer as a JSON object.

    Raises:
        MalformedJsonError: If the text is not JSON or not a JSON object
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise MalformedJsonError(
            f"Model answer is not valid JSON: {e}; answer starts with: {text[:200]!r}"
        ) from e
    if not isinstance(data, dict):
        raise MalformedJsonError(
            f"Model answer must be a JSON object, got {type(data).__name__}"
        )
    return data


def get_text(tree: Mapping[str, Any], key: str) -> Optional[str]:
    """Value under key as text; None when absent or null."""
    value = tree.get(key)
    if value is None:
        return None
    if isinstance(value, str):
        return value
    # numbers, booleans and nested structures keep their JSON spelling
    return json.dumps(value, ensure_ascii=False)


def get_list(tree: Mapping[str, Any], key: str) -> Optional[List[Any]]:
    """Value under key as a list; None when absent or null."""
    value = tree.get(key)
    if value is None:
        return None
    if isinstance(value, list):
        return list(value)
    return [value]


def normalize_resume(tree: Mapping[str, Any], logo_base64: str = "") -> ResumeRecord:
    """Map a parsed model answer onto a fully-defaulted ResumeRecord."""
    values: Dict[str, Any] = {}
    for spec in RESUME_FIELDS:
        if spec.kind == SCALAR:
            value: Any = get_text(tree, spec.source_key)
        else:
            value = get_list(tree, spec.source_key)
        values[spec.attr] = spec.default if value is None else value

    unknown = [k for k in tree if k not in CANONICAL_KEYS]
    if unknown:
        LOG.debug("Ignoring non-canonical keys in model answer: %s", ", ".join(unknown))

    return ResumeRecord(logo_base64=logo_base64 or "", **values)


def load_logo_base64(path: Optional[Path]) -> str:
    """Base64 of the branding image, or "" when it is not configured or missing."""
    if path is None:
        return ""
    path = Path(path)
    if not path.is_file():
        LOG.warning("Logo not found, rendering without it: %s", path)
        return ""
    return base64.b64encode(path.read_bytes()).decode("ascii")


class ResumeNormalizer:
    """
    Normalizer bound to one branding image.

    The logo is read once at construction and shared, read-only, by every
    record produced afterwards.
    """

    def __init__(self, logo_path: Optional[Path] = None):
        self.logo_path = logo_path
        self.logo_base64 = load_logo_base64(logo_path)

    def normalize_text(self, sanitized: str) -> ResumeRecord:
        return self.normalize(parse_model_json(sanitized))

    def normalize(self, tree: Mapping[str, Any]) -> ResumeRecord:
        return normalize_resume(tree, logo_base64=self.logo_base64)
