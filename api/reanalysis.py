"""
Re-analysis trigger for the burritos webapp.

Runs the external analysis script on one acquisition::

    $PYTHON_PATH $ANALYSIS_SCRIPT --json <acquisition JSON> --dir <day directory> --verbose

The request waits for the process to exit; a non-zero exit code is reported
as an upstream failure.
"""

import asyncio
from pathlib import Path
from typing import List

from fastapi import APIRouter, Depends

from .auth import require_user
from .settings import Settings, get_settings
from .shared.errors import UpstreamProcessFailure
from .shared.filenames import parse_date, validate_filename
from .shared.logger import get_logger
from .shared.paths import DetectorCategory, resolve_directory, resolve_file_path

logger = get_logger(__name__)

router = APIRouter()

STDERR_TAIL_CHARS = 2000


def build_command(settings: Settings, filename: str) -> List[str]:
    """Argument vector for re-analysing ``filename``."""
    validate_filename(filename)
    date_key = parse_date(filename)
    json_path = resolve_file_path(settings.main_dir, date_key, DetectorCategory.JSON, filename)
    day_dir = resolve_directory(settings.main_dir, date_key)
    return [
        settings.python_path,
        str(settings.analysis_script),
        "--json",
        str(json_path),
        "--dir",
        str(day_dir),
        "--verbose",
    ]


async def run_analysis(command: List[str], cwd: Path) -> str:
    """Run the analysis script and return its stdout.

    Raises:
        UpstreamProcessFailure: the process could not start or exited non-zero.
    """
    logger.info("Running analysis: %s", " ".join(command))
    try:
        process = await asyncio.create_subprocess_exec(
            *command,
            cwd=str(cwd) if cwd.is_dir() else None,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise UpstreamProcessFailure(f"Unable to start analysis: {e}") from e

    stdout, stderr = await process.communicate()
    out_text = stdout.decode("utf-8", errors="replace")
    err_text = stderr.decode("utf-8", errors="replace")
    if out_text:
        logger.debug("Analysis output:\n%s", out_text)

    if process.returncode != 0:
        logger.error("Analysis exited with code %s: %s", process.returncode, err_text[-STDERR_TAIL_CHARS:])
        raise UpstreamProcessFailure(
            f"Analysis failed with exit code {process.returncode}",
            returncode=process.returncode,
            stderr=err_text[-STDERR_TAIL_CHARS:],
        )
    return out_text


@router.get("/reanalyse/{filename}", dependencies=[Depends(require_user)])
async def reanalyse(filename: str, settings: Settings = Depends(get_settings)):
    command = build_command(settings, filename)
    await run_analysis(command, settings.analysis_dir)
    logger.info("Re-analysis of %s finished", filename)
    return {"success": True}
