"""
CLI Phase 1: Gather user requirements.

Parses command-line arguments and returns UserConfig dataclass.
No side effects - just parsing and conversion.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import List, Optional

from .cli_config import DEFAULT_OUTPUT_DIRECTORY, UserConfig


def _optional_path(value: Optional[str]) -> Optional[Path]:
    return Path(value).expanduser() if value else None


def gather_user_requirements(argv: Optional[List[str]] = None) -> UserConfig:
    """
    Phase 1: Parse command-line arguments and return user configuration.
    """
    parser = argparse.ArgumentParser(
        description="Convert resumes (.pdf/.txt) into structured HTML and DOCX documents.",
        epilog="""
Examples:
  Convert every resume in a folder:
    resumeconvertor --source resumes/ --settings appsettings.json

  Convert one file with a custom template, four files in flight:
    resumeconvertor --source cv.pdf --template my_template.html.j2 \\
      --target out/ --concurrency 4
""",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--source", required=True,
                        help="Resume file or folder of .pdf/.txt resumes.")
    parser.add_argument("--target",
                        help=f"Output directory (default: settings file value or ./{DEFAULT_OUTPUT_DIRECTORY}).")
    parser.add_argument("--settings",
                        help="JSON settings file with OpenAI and ResumeConvertor sections.")
    parser.add_argument("--template", help="Jinja2 HTML template (default: packaged template).")
    parser.add_argument("--prompt", help="System prompt file for the extraction model.")
    parser.add_argument("--logo", help="Branding image embedded into the output.")
    parser.add_argument("--model", help="OpenAI model name (default: gpt-4o).")
    parser.add_argument("--concurrency", type=int, default=1,
                        help="Number of files converted concurrently (default: 1).")
    parser.add_argument("--retries", type=int, default=0,
                        help="Retries for transient model call failures (default: 0).")
    parser.add_argument("--debug", action="store_true",
                        help="Verbose logs, mapped record dumps and stack traces on failure.")
    parser.add_argument("--log-file",
                        help="Optional path to a log file. If set, all output is also written there.")

    args = parser.parse_args(argv)

    return UserConfig(
        source=Path(args.source).expanduser(),
        target_dir=_optional_path(args.target),
        settings_file=_optional_path(args.settings),
        template=_optional_path(args.template),
        prompt=_optional_path(args.prompt),
        logo=_optional_path(args.logo),
        model=args.model,
        concurrency=args.concurrency,
        retries=args.retries,
        debug=args.debug,
        log_file=args.log_file,
    )
