#!/usr/bin/env python3
# Copyright 2025 Ivo Mateev
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Command-line interface for resumeconvertor.

Three-phase architecture:
1. Gather user requirements (parse args) -> UserConfig
2. Prepare execution environment (resolve settings, load shared assets)
3. Execute the batch (one isolated pipeline run per file)
"""

from __future__ import annotations

import asyncio
import time
import traceback
from pathlib import Path
from typing import List, Optional

from .batch import collect_inputs, convert_batch
from .cli_config import load_settings
from .cli_gather import gather_user_requirements
from .errors import ConfigurationError
from .logging_utils import LOG, setup_logging
from .pipeline import ResumeConverter
from .shared import emit_summary


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Returns 0 when every file was converted, 1 otherwise.
    """
    # Phase 1: Gather requirements
    config = gather_user_requirements(argv)

    if config.log_file:
        Path(config.log_file).expanduser().resolve().parent.mkdir(parents=True, exist_ok=True)
    setup_logging(config.debug, log_file=config.log_file)

    try:
        # Phase 2: Prepare environment
        settings = load_settings(config)
        if not settings.api_key:
            raise ConfigurationError(
                "OpenAI API key not found: set OPENAI_API_KEY or OpenAI.ApiKey in the settings file"
            )
        files = collect_inputs(config.source)
        converter = ResumeConverter(settings)
    except (ConfigurationError, FileNotFoundError, ValueError) as e:
        LOG.error(str(e))
        if config.debug:
            LOG.error(traceback.format_exc())
        return 1

    # Phase 3: Execute
    LOG.info("==== Resume Batch Conversion Started ====")
    start = time.perf_counter()
    results = asyncio.run(
        convert_batch(converter, files, concurrency=config.concurrency, debug=config.debug)
    )
    LOG.info(emit_summary(results, settings.output_directory, time.perf_counter() - start))
    LOG.info("==== Resume Batch Conversion Finished ====")
    return 0 if all(work.ok for work in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
