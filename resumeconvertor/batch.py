"""
Batch processing of resume folders.

Each file runs the full pipeline in isolation: a failure is logged with
the file name and stage, recorded on that file's UnitOfWork, and the
batch moves on. Runs overlap up to a caller-chosen concurrency limit.
"""

from __future__ import annotations

import asyncio
import time
import traceback
from pathlib import Path
from typing import List

from .errors import ConversionError
from .extractors.base import SUFFIX_FORMATS
from .logging_utils import LOG
from .pipeline import ResumeConverter
from .shared import StepName, UnitOfWork, emit_work_status


def collect_inputs(source: Path) -> List[Path]:
    """
    A single file, or the top-level .pdf/.txt files of a folder (sorted).

    Raises:
        FileNotFoundError: If the source does not exist
        ValueError: If a folder holds no supported files
    """
    source = Path(source)
    if not source.exists():
        raise FileNotFoundError(f"Source not found: {source}")
    if source.is_file():
        return [source]

    files = sorted(
        p for p in source.iterdir()
        if p.is_file() and p.suffix.lower() in SUFFIX_FORMATS
    )
    if not files:
        raise ValueError(f"No .pdf or .txt files found in folder: {source}")
    return files


async def convert_one(converter: ResumeConverter, source: Path, debug: bool = False) -> UnitOfWork:
    work = UnitOfWork(input=source)
    LOG.info("Converting: %s", source.name)
    start = time.perf_counter()
    try:
        work.artifacts = await converter.run(source)
    except ConversionError as e:
        work.add_error(e.stage, str(e))
        LOG.error("Error converting %s: %s failed: %s", source.name, e.stage.value, e)
        if debug:
            LOG.error(traceback.format_exc())
    except Exception as e:
        # ResumeConverter tags its own failures with a step; anything else has
        # no known step and is filed under the last one
        work.add_error(StepName.Write, f"Unexpected {type(e).__name__}: {e}")
        LOG.error("Error converting %s: unexpected %s: %s", source.name, type(e).__name__, e)
        if debug:
            LOG.error(traceback.format_exc())
    work.elapsed_s = time.perf_counter() - start
    if work.ok:
        LOG.info("Done in %.2f sec", work.elapsed_s)
    return work


async def convert_batch(
    converter: ResumeConverter,
    files: List[Path],
    concurrency: int = 1,
    debug: bool = False,
) -> List[UnitOfWork]:
    """
    Convert files with at most `concurrency` runs in flight.

    Results come back in input order; each file's status line is logged as
    soon as it finishes.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def _guarded(path: Path) -> UnitOfWork:
        async with semaphore:
            work = await convert_one(converter, path, debug=debug)
        if work.ok:
            LOG.info(emit_work_status(work))
        else:
            LOG.warning(emit_work_status(work))
        return work

    return list(await asyncio.gather(*(_guarded(path) for path in files)))
