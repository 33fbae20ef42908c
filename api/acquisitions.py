"""
Acquisition API routes for the burritos webapp.

This module serves the files the analysis pipeline writes for each dump:
the day's acquisition list, acquisition JSON documents, per-detector and
combined-view plots, and raw signals (as text or CSV downloads).
"""

import io
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd
from fastapi import APIRouter, Depends, Query
from fastapi.responses import FileResponse, Response

from .comment_store import COMMENTS_FILENAME
from .parameters import parameter_table, skim_rows, skim_text
from .settings import Settings, get_settings
from .shared.errors import InvalidFilename, NotFound, StorageError
from .shared.filenames import DateKey, sort_acquisitions
from .shared.json_io import read_json, run_blocking
from .shared.logger import get_logger
from .shared.paths import (
    DetectorCategory,
    FileKind,
    download_name,
    resolve_acquisition,
    resolve_directory,
)

logger = get_logger(__name__)

router = APIRouter()


# ============= Helpers =============


def list_acquisitions(root: Path, date_key: DateKey) -> List[str]:
    """JSON filenames in the day's ``JSON`` directory, creating it if absent."""
    directory = resolve_directory(root, date_key, DetectorCategory.JSON)
    try:
        directory.mkdir(parents=True, exist_ok=True)
        names = [p.name for p in directory.iterdir() if p.is_file()]
    except OSError as e:
        raise StorageError(f"Unable to read directory: {e}") from e
    return sorted(n for n in names if n.endswith(".json") and n != COMMENTS_FILENAME)


def load_acquisition(root: Path, filename: str) -> Dict[str, Any]:
    """Parsed acquisition document; ``NaN``/``Infinity`` are read as null."""
    path = resolve_acquisition(root, filename, DetectorCategory.JSON, FileKind.JSON)
    logger.debug("Reading file from: %s", path)
    return read_json(path, tolerant=True)


def _acquisition_name(image_name: str) -> str:
    """Accept ``data-...png`` as well as ``data-...json`` in image URLs."""
    if image_name.endswith(".png"):
        return image_name[: -len(".png")] + ".json"
    return image_name


def _existing(path: Path, what: str) -> Path:
    if not path.is_file():
        logger.warning("%s not found: %s", what, path)
        raise NotFound(f"{what} not found")
    return path


def signal_to_csv(path: Path) -> str:
    """Convert a whitespace-delimited signal text file to CSV."""
    try:
        frame = pd.read_csv(path, sep=r"\s+", comment="#", engine="python")
    except (OSError, ValueError, pd.errors.ParserError) as e:
        raise StorageError(f"Unable to convert {path.name} to CSV: {e}") from e
    buffer = io.StringIO()
    frame.to_csv(buffer, index=False)
    return buffer.getvalue()


def _date_key(year: str, month: str, day: str) -> DateKey:
    return DateKey.from_parts(year, month, day)


# ============= Listing and documents =============


@router.get("/{year}/{month}/{day}/json")
async def get_json_files(year: str, month: str, day: str, settings: Settings = Depends(get_settings)):
    """List the acquisitions of one day (``[]`` when the directory is new)."""
    return await run_blocking(list_acquisitions, settings.main_dir, _date_key(year, month, day))


@router.get("/json/{json_filename}")
async def get_json_content(json_filename: str, settings: Settings = Depends(get_settings)):
    """Return the content of one acquisition document."""
    logger.info("Getting content for file: %s", json_filename)
    return await run_blocking(load_acquisition, settings.main_dir, json_filename)


@router.get("/parameters/{json_filename}")
async def get_parameters(json_filename: str, settings: Settings = Depends(get_settings)):
    """Pulse parameters per detector for one acquisition."""
    document = await run_blocking(load_acquisition, settings.main_dir, json_filename)
    return parameter_table(document)


@router.get("/{year}/{month}/{day}/skim")
async def skim(
    year: str,
    month: str,
    day: str,
    detector: str = Query(DetectorCategory.PMT11.value),
    start: int = Query(0, ge=0),
    end: int = Query(1, ge=0),
    settings: Settings = Depends(get_settings),
):
    """Parameters of one detector over a range of the day's acquisitions (newest first)."""
    category = DetectorCategory.parse(detector)
    names = await run_blocking(list_acquisitions, settings.main_dir, _date_key(year, month, day))
    selected = sort_acquisitions(names)[start : end + 1]

    documents: List[Optional[Dict[str, Any]]] = []
    for name in selected:
        try:
            documents.append(await run_blocking(load_acquisition, settings.main_dir, name))
        except (NotFound, StorageError) as e:
            logger.warning("Skipping %s in skim: %s", name, e.message)
            documents.append(None)

    rows = skim_rows(selected, documents, category)
    return {"rows": rows, "text": skim_text(rows)}


# ============= Images =============


async def _image_response(root: Path, image_name: str, category: str) -> FileResponse:
    path = resolve_acquisition(root, _acquisition_name(image_name), category, FileKind.IMAGE)
    logger.debug("Looking for image at: %s", path)
    await run_blocking(_existing, path, "Image")
    return FileResponse(str(path), media_type="image/png")


@router.get("/img/{detector}/{image_name}")
async def get_detector_image(detector: str, image_name: str, settings: Settings = Depends(get_settings)):
    if DetectorCategory.parse(detector) == DetectorCategory.JSON:
        raise InvalidFilename("Unknown detector: JSON")
    return await _image_response(settings.main_dir, image_name, detector)


@router.get("/Together/{image_name}")
async def get_together_image(image_name: str, settings: Settings = Depends(get_settings)):
    """Combined plot with one subplot per detector."""
    return await _image_response(settings.main_dir, image_name, DetectorCategory.TOGETHER)


@router.get("/Same/{image_name}")
async def get_same_image(image_name: str, settings: Settings = Depends(get_settings)):
    """All signals overlaid on the same axes."""
    return await _image_response(settings.main_dir, image_name, DetectorCategory.SAME)


# ============= Signals =============


def _signal_detector(detector: str) -> DetectorCategory:
    category = DetectorCategory.parse(detector)
    if category.is_combined_view or category == DetectorCategory.JSON:
        raise InvalidFilename(f"No signal for {detector}")
    return category


@router.get("/signal/csv/{detector}/{json_filename}")
async def get_signal_csv(detector: str, json_filename: str, settings: Settings = Depends(get_settings)):
    """Signal as CSV, converted from the text dump when no CSV was written."""
    category = _signal_detector(detector)
    csv_path = resolve_acquisition(settings.main_dir, json_filename, category, FileKind.CSV)
    attachment = download_name(json_filename, category, FileKind.CSV)
    if await run_blocking(csv_path.is_file):
        return FileResponse(str(csv_path), media_type="text/csv", filename=attachment)

    txt_path = resolve_acquisition(settings.main_dir, json_filename, category, FileKind.SIGNAL)
    await run_blocking(_existing, txt_path, "Signal file")
    content = await run_blocking(signal_to_csv, txt_path)
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{attachment}"'},
    )


@router.get("/signal/{detector}/{json_filename}")
async def get_signal(detector: str, json_filename: str, settings: Settings = Depends(get_settings)):
    """Raw signal text file, served as an attachment."""
    category = _signal_detector(detector)
    logger.info("Getting signal file for JSON file: %s, detector: %s", json_filename, detector)
    path = resolve_acquisition(settings.main_dir, json_filename, category, FileKind.SIGNAL)
    await run_blocking(_existing, path, "Signal file")
    return FileResponse(
        str(path),
        media_type="text/plain",
        filename=download_name(json_filename, category, FileKind.SIGNAL),
    )
