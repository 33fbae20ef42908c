"""
JSON helpers shared by the stores and the acquisition routes.
"""

import asyncio
import json
import os
import re
import tempfile
from functools import partial
from pathlib import Path
from typing import Any, Callable, TypeVar

from .errors import NotFound, StorageError

T = TypeVar("T")

# Bare NaN/Infinity tokens in value position (after ':' '[' or ',').
# Quoted occurrences inside strings are left alone.
_NON_FINITE_TOKEN = re.compile(r"(?<=[:\[,])(\s*)-?(?:NaN|Infinity)(?=\s*[,\]\}])")


def normalize_non_finite(text: str) -> str:
    """Replace non-standard ``NaN``/``Infinity`` tokens with ``null``."""
    return _NON_FINITE_TOKEN.sub(r"\1null", text)


def read_json(path: Path, *, tolerant: bool = False) -> Any:
    """Read and parse a JSON file.

    Args:
        path: File to read.
        tolerant: Normalize ``NaN``/``Infinity`` tokens before parsing.

    Raises:
        NotFound: the file does not exist.
        StorageError: the file cannot be read or is not valid JSON.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise NotFound(f"File not found: {path.name}") from None
    except OSError as e:
        raise StorageError(f"Unable to read {path.name}: {e}") from e

    if tolerant:
        text = normalize_non_finite(text)
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise StorageError(f"Invalid JSON in {path.name}: {e}") from e


def _write_temp(path: Path, text: str) -> Path:
    """Write ``text`` to a fresh temp file beside ``path``, unique per call."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(text)
        os.chmod(tmp, 0o644)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise
    return tmp


def write_json_atomic(path: Path, data: Any) -> None:
    """Write ``data`` as 2-space indented JSON, replacing ``path`` atomically.

    The document is serialized completely before any I/O, written to a sibling
    temp file and renamed over the target, so a failure never leaves a
    truncated file behind. Each call gets its own temp file; concurrent
    writers to the same path end with the last rename in place.
    """
    text = json.dumps(data, indent=2, ensure_ascii=False)
    tmp = None
    try:
        tmp = _write_temp(path, text)
        os.replace(tmp, path)
    except OSError as e:
        if tmp is not None:
            tmp.unlink(missing_ok=True)
        raise StorageError(f"Unable to write {path.name}: {e}") from e


def create_json_if_absent(path: Path, data: Any) -> bool:
    """Create ``path`` holding ``data`` unless it already exists.

    The complete document is hard-linked into place, which fails when the
    target exists, so an existing file is never replaced and readers never
    see a partial one. Returns True when this call created the file.
    """
    text = json.dumps(data, indent=2, ensure_ascii=False)
    tmp = None
    try:
        tmp = _write_temp(path, text)
        os.link(tmp, path)
    except FileExistsError:
        return False
    except OSError as e:
        raise StorageError(f"Unable to create {path.name}: {e}") from e
    finally:
        if tmp is not None:
            tmp.unlink(missing_ok=True)
    return True


async def run_blocking(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
    """Run a blocking filesystem call in the default executor."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(func, *args, **kwargs))
