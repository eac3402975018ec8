"""
CLI configuration data structures.

UserConfig holds what the user asked for on the command line;
ConvertorSettings is the resolved, read-only configuration shared by
every pipeline run (credentials, model, template, prompt, logo, output).
"""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigurationError
from .extraction_client import DEFAULT_MODEL

DEFAULT_OUTPUT_DIRECTORY = "Output"
# Logos live in an Images folder next to the settings file
IMAGES_DIRECTORY = "Images"


@dataclass
class UserConfig:
    """Configuration gathered from user input."""

    source: Path  # Input file or folder
    target_dir: Optional[Path] = None  # Output directory override
    settings_file: Optional[Path] = None  # JSON settings (appsettings.json layout)
    template: Optional[Path] = None
    prompt: Optional[Path] = None
    logo: Optional[Path] = None
    model: Optional[str] = None

    # Execution settings
    concurrency: int = 1
    retries: int = 0
    debug: bool = False
    log_file: Optional[str] = None


@dataclass(frozen=True)
class ConvertorSettings:
    """Resolved settings for a conversion run."""

    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    base_url: Optional[str] = None
    template_file: Optional[Path] = None  # None -> packaged default template
    prompt_file: Optional[Path] = None  # None -> packaged default prompt
    output_directory: Path = Path(DEFAULT_OUTPUT_DIRECTORY)
    logo_file: Optional[Path] = None
    max_attempts: int = 1
    debug: bool = False


def _read_settings_file(path: Path) -> Dict[str, Any]:
    if not path.is_file():
        raise ConfigurationError(f"Settings file not found: {path}")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigurationError(f"Cannot read settings file {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file must contain a JSON object: {path}")
    return data


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name) or {}
    if not isinstance(section, dict):
        raise ConfigurationError(f"Settings section '{name}' must be an object")
    return section


def _resolve(base: Path, value: Optional[str]) -> Optional[Path]:
    if not value:
        return None
    path = Path(value).expanduser()
    return path if path.is_absolute() else base / path


def load_settings(config: UserConfig) -> ConvertorSettings:
    """
    Resolve settings with precedence CLI > environment > settings file > defaults.

    Relative paths in the settings file are resolved against the file's
    directory; the logo name is looked up under its Images/ folder.
    """
    file_data: Dict[str, Any] = {}
    base = Path.cwd()
    if config.settings_file:
        settings_path = Path(config.settings_file).expanduser().resolve()
        file_data = _read_settings_file(settings_path)
        base = settings_path.parent
    openai_section = _section(file_data, "OpenAI")
    convertor_section = _section(file_data, "ResumeConvertor")

    api_key = os.environ.get("OPENAI_API_KEY") or openai_section.get("ApiKey") or None
    model = (
        config.model
        or os.environ.get("OPENAI_MODEL")
        or openai_section.get("Model")
        or DEFAULT_MODEL
    )
    base_url = os.environ.get("OPENAI_BASE_URL") or openai_section.get("BaseUrl") or None

    logo_file = config.logo
    if logo_file is None and convertor_section.get("LogoFile"):
        logo_name = Path(convertor_section["LogoFile"])
        logo_file = logo_name if logo_name.is_absolute() else base / IMAGES_DIRECTORY / logo_name

    output_directory = (
        config.target_dir
        or _resolve(base, convertor_section.get("OutputDirectory"))
        or Path.cwd() / DEFAULT_OUTPUT_DIRECTORY
    )

    if config.concurrency < 1:
        raise ConfigurationError("--concurrency must be at least 1")
    if config.retries < 0:
        raise ConfigurationError("--retries cannot be negative")

    return ConvertorSettings(
        api_key=api_key,
        model=model,
        base_url=base_url,
        template_file=config.template or _resolve(base, convertor_section.get("TemplateFile")),
        prompt_file=config.prompt or _resolve(base, convertor_section.get("PromptFile")),
        output_directory=Path(output_directory),
        logo_file=logo_file,
        max_attempts=config.retries + 1,
        debug=config.debug,
    )
