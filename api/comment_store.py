"""
Per-day comment storage.

Comments live next to the acquisitions they describe, one JSON object per
day directory (``YYYY/MM/DD/JSON/comments.json``) mapping acquisition
filename to comment text. The object is read and rewritten whole on every
update: concurrent writers on the same day race and the last one wins.
"""

from pathlib import Path
from typing import Dict, Optional, Union

from .shared.errors import NotFound, StorageError
from .shared.filenames import DateKey, parse_date, validate_filename
from .shared.json_io import create_json_if_absent, read_json, write_json_atomic
from .shared.logger import get_logger
from .shared.paths import DetectorCategory, resolve_file_path

logger = get_logger(__name__)

COMMENTS_FILENAME = "comments.json"


class CommentStore:
    """Filename -> comment map persisted in each day's ``JSON`` directory."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def comments_path(self, date_key: DateKey) -> Path:
        return resolve_file_path(self.root, date_key, DetectorCategory.JSON, COMMENTS_FILENAME)

    def _read(self, path: Path) -> Dict[str, str]:
        data = read_json(path)
        if not isinstance(data, dict):
            raise StorageError(f"{COMMENTS_FILENAME} does not hold a JSON object: {path}")
        return data

    def list_comments(self, date_key: DateKey) -> Dict[str, str]:
        """All comments recorded for one day, ``{}`` if none."""
        try:
            return self._read(self.comments_path(date_key))
        except NotFound:
            return {}

    def get_comment(self, filename: str) -> Optional[str]:
        """Comment attached to ``filename``, or None.

        A missing comments file is not an error: an empty one is created so
        later writes have a target. A file written meanwhile by another
        request is left as it is.
        """
        validate_filename(filename)
        path = self.comments_path(parse_date(filename))
        try:
            data = self._read(path)
        except NotFound:
            if create_json_if_absent(path, {}):
                logger.info("Created new comments file at: %s", path)
            return None
        return data.get(filename)

    def set_comment(self, filename: str, comment: str) -> None:
        """Attach ``comment`` to ``filename``, replacing any previous one."""
        validate_filename(filename)
        path = self.comments_path(parse_date(filename))
        try:
            data = self._read(path)
        except NotFound:
            data = {}
        data[filename] = comment
        write_json_atomic(path, data)
        logger.info("Updated comment for %s", filename)
