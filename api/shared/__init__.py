"""
Shared utilities for the burritos webapp API.

Filename parsing, path resolution, JSON I/O and the error taxonomy used by
every route module.
"""
from .errors import (
    BurritosError,
    ConfigUnavailable,
    InvalidFilename,
    InvalidFormat,
    NotFound,
    StorageError,
    UpstreamProcessFailure,
)
from .filenames import DateKey, pad_to_two_digits, parse_date, validate_filename
from .paths import DetectorCategory, FileKind, resolve_directory, resolve_file_path

__all__ = [
    "BurritosError",
    "ConfigUnavailable",
    "InvalidFilename",
    "InvalidFormat",
    "NotFound",
    "StorageError",
    "UpstreamProcessFailure",
    "DateKey",
    "pad_to_two_digits",
    "parse_date",
    "validate_filename",
    "DetectorCategory",
    "FileKind",
    "resolve_directory",
    "resolve_file_path",
]
