"""
Filename date codec.

Acquisition files produced by the analysis pipeline are named
``data-YYYY-MM-DD_HH-MM-SS.json``. The date encoded in the name is the only
key used to locate everything else about a dump (signals, images, comments),
so this module is the single place where names are validated and parsed.

An older month-level scheme (``xxx-YYYY-MM-xxx.json``) is still readable via
``parse_year_month`` for migrating old trees; routes only accept the
day-level scheme.
"""

import re
from dataclasses import dataclass
from typing import Iterable, List, Optional, Union

from .errors import InvalidFilename, InvalidFormat

ACQUISITION_PATTERN = re.compile(
    r"^data-(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"_(?P<hour>\d{2})-(?P<minute>\d{2})-(?P<second>\d{2})\.json$"
)
DATA_FILE_PATTERN = re.compile(r"^data-.*\.json$")


@dataclass(frozen=True)
class DateKey:
    """Year/month[/day] triple locating a day (or legacy month) directory."""

    year: str
    month: str
    day: Optional[str] = None

    @classmethod
    def from_parts(
        cls,
        year: Union[int, str],
        month: Union[int, str],
        day: Union[int, str, None] = None,
    ) -> "DateKey":
        """Build a key from caller-supplied values (date pickers, URL segments)."""
        year_s = str(year)
        if not re.fullmatch(r"\d{4}", year_s):
            raise InvalidFormat(f"Invalid year: {year}")
        month_s = _checked_part(month, "month", 12)
        day_s = _checked_part(day, "day", 31) if day is not None else None
        return cls(year_s, month_s, day_s)

    @property
    def is_day_level(self) -> bool:
        return self.day is not None


def _checked_part(value: Union[int, str], name: str, upper: int) -> str:
    text = str(value)
    if not text.isdigit() or not 1 <= int(text) <= upper:
        raise InvalidFormat(f"Invalid {name}: {value}")
    return pad_to_two_digits(text)


def pad_to_two_digits(value: Union[int, str]) -> str:
    """Left-pad a month/day to two characters. Longer values are kept as-is."""
    return str(value).rjust(2, "0")


def validate_filename(filename: str) -> None:
    """Reject names that could escape the data tree.

    Must be called before any path is built from user input.

    Raises:
        InvalidFilename: name does not end in ``.json`` or contains a
            parent-directory segment or a path separator.
    """
    if (
        not filename.endswith(".json")
        or ".." in filename
        or "/" in filename
        or "\\" in filename
        or "\x00" in filename
    ):
        raise InvalidFilename("Invalid file name")


def parse_date(filename: str) -> DateKey:
    """Extract the day-level date from an acquisition filename.

    Raises:
        InvalidFormat: the name is not ``data-YYYY-MM-DD_HH-MM-SS.json``.
    """
    match = ACQUISITION_PATTERN.match(filename)
    if match is None:
        raise InvalidFormat(f"Invalid filename format: {filename}")
    return DateKey(match["year"], match["month"], match["day"])


def parse_year_month(filename: str) -> DateKey:
    """Extract year and month from the legacy ``xxx-YYYY-MM-xxx.json`` scheme."""
    parts = filename.split("-")
    if len(parts) < 3:
        raise InvalidFormat("Invalid filename format: year and month not found.")
    year, month = parts[1], parts[2]
    if not re.fullmatch(r"\d{4}", year) or not re.fullmatch(r"\d{2}", month):
        raise InvalidFormat("Invalid year or month format.")
    return DateKey(year, month)


def parse_timestamp(filename: str) -> Optional[str]:
    """Human-readable ``YYYY-MM-DD HH:MM:SS`` for an acquisition, else None."""
    match = ACQUISITION_PATTERN.match(filename)
    if match is None:
        return None
    return (
        f"{match['year']}-{match['month']}-{match['day']} "
        f"{match['hour']}:{match['minute']}:{match['second']}"
    )


def sort_acquisitions(filenames: Iterable[str]) -> List[str]:
    """Keep ``data-*.json`` names only, newest first."""
    return sorted((f for f in filenames if DATA_FILE_PATTERN.match(f)), reverse=True)
