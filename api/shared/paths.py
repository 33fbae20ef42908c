"""
Path resolution for the dated data tree.

Layout written by the analysis pipeline::

    MAIN_DIR/YYYY/MM/DD/JSON/data-YYYY-MM-DD_HH-MM-SS.json
    MAIN_DIR/YYYY/MM/DD/JSON/comments.json
    MAIN_DIR/YYYY/MM/DD/<detector>/data-YYYY-MM-DD_HH-MM-SS.{txt,csv,png}
    MAIN_DIR/YYYY/MM/DD/Together/Together-YYYY-MM-DD_HH-MM-SS.png
    MAIN_DIR/YYYY/MM/DD/Same/Same-YYYY-MM-DD_HH-MM-SS.png

Nothing here touches the filesystem; callers decide whether a missing
directory is created or reported as not found.
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Union

from .errors import InvalidFilename
from .filenames import DateKey, pad_to_two_digits, parse_date, validate_filename


class DetectorCategory(str, Enum):
    """Subdirectories of a day directory."""

    JSON = "JSON"
    PDS = "PDS"
    BDS = "BDS"
    DSAT = "DSAT"
    USAT = "USAT"
    PMT11 = "PMT11"
    TOGETHER = "Together"
    SAME = "Same"

    @classmethod
    def parse(cls, value: Union[str, "DetectorCategory"]) -> "DetectorCategory":
        try:
            return cls(value)
        except ValueError:
            raise InvalidFilename(f"Unknown detector: {value}") from None

    @property
    def is_combined_view(self) -> bool:
        return self in (DetectorCategory.TOGETHER, DetectorCategory.SAME)


# Physical detectors, in the order the parameter table shows them
DETECTORS = (
    DetectorCategory.PDS,
    DetectorCategory.BDS,
    DetectorCategory.DSAT,
    DetectorCategory.USAT,
    DetectorCategory.PMT11,
)


class FileKind(str, Enum):
    """Derived file types and their extensions."""

    JSON = ".json"
    SIGNAL = ".txt"
    CSV = ".csv"
    IMAGE = ".png"


def resolve_directory(
    root: Union[str, Path],
    date_key: DateKey,
    category: Optional[DetectorCategory] = None,
) -> Path:
    """``root/year/MM[/DD][/category]``. No existence check is performed."""
    path = Path(root) / date_key.year / pad_to_two_digits(date_key.month)
    if date_key.day is not None:
        path = path / pad_to_two_digits(date_key.day)
    if category is not None:
        path = path / DetectorCategory.parse(category).value
    return path


def resolve_file_path(
    root: Union[str, Path],
    date_key: DateKey,
    category: DetectorCategory,
    base_name: str,
) -> Path:
    return resolve_directory(root, date_key, category) / base_name


def derive_base_name(
    filename: str,
    kind: FileKind,
    category: Optional[DetectorCategory] = None,
) -> str:
    """Name of the file of ``kind`` derived from an acquisition filename.

    Combined views carry their category name in place of the ``data`` prefix.
    """
    base = filename[: -len(".json")] + kind.value if filename.endswith(".json") else filename
    if category is not None:
        category = DetectorCategory.parse(category)
        if category.is_combined_view:
            base = base.replace("data", category.value, 1)
    return base


def resolve_acquisition(
    root: Union[str, Path],
    filename: str,
    category: Union[str, DetectorCategory],
    kind: FileKind,
) -> Path:
    """Validate ``filename`` then locate its derived file under ``category``.

    Raises:
        InvalidFilename: traversal attempt or unknown category.
        InvalidFormat: the name does not encode a day-level date.
    """
    validate_filename(filename)
    category = DetectorCategory.parse(category)
    date_key = parse_date(filename)
    return resolve_file_path(root, date_key, category, derive_base_name(filename, kind, category))


def download_name(filename: str, detector: DetectorCategory, kind: FileKind) -> str:
    """Attachment name for a signal download, e.g. ``PDS-2025-05-14_10-30-00.txt``."""
    return derive_base_name(filename, kind).replace("data", detector.value, 1)
