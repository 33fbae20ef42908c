"""
Pulse parameters shown for each detector of an acquisition.

Acquisition documents are keyed by detector (``PDS``, ``BDS``, ...), each
holding the pulse fit results computed by the analysis pipeline. This module
extracts the displayed subset and builds the skimmer report, a
tab-separated table of one detector's parameters over a range of dumps.
"""

import math
from typing import Any, Dict, List, Optional, Sequence

from .shared.filenames import parse_timestamp
from .shared.paths import DETECTORS, DetectorCategory

# (document key, display label)
PARAMETER_KEYS = (
    ("area", "Area [V·ns]"),
    ("fwhm", "FWHM [ns]"),
    ("peak", "Peak [V]"),
    ("rise", "Rise [ns]"),
    ("time peak", "Time Peak [ns]"),
)

MISSING = "N/A"


def format_significant(value: Any, digits: int = 5) -> str:
    """Format like JavaScript ``toPrecision``; ``N/A`` when not a finite number."""
    if isinstance(value, bool):
        return MISSING
    try:
        number = float(value)
    except (TypeError, ValueError):
        return MISSING
    if not math.isfinite(number):
        return MISSING

    # exponent after rounding to ``digits`` significant figures
    coeff, exp = f"{number:.{digits - 1}e}".split("e")
    exponent = int(exp)
    if exponent < -6 or exponent >= digits:
        return f"{coeff}e{'+' if exponent >= 0 else '-'}{abs(exponent)}"
    return f"{number:.{digits - 1 - exponent}f}"


def parameter_table(document: Dict[str, Any]) -> Dict[str, Dict[str, Any]]:
    """``{detector: {parameter: value}}`` for detectors present in ``document``."""
    table = {}
    for detector in DETECTORS:
        values = document.get(detector.value)
        if not isinstance(values, dict):
            continue
        table[detector.value] = {key: values.get(key) for key, _ in PARAMETER_KEYS}
    return table


def skim_rows(
    filenames: Sequence[str],
    documents: Sequence[Optional[Dict[str, Any]]],
    detector: DetectorCategory = DetectorCategory.PMT11,
) -> List[Dict[str, Any]]:
    rows = []
    for filename, document in zip(filenames, documents):
        values = (document or {}).get(detector.value) or {}
        rows.append({
            "filename": filename,
            "timestamp": parse_timestamp(filename),
            "values": {key: format_significant(values.get(key)) for key, _ in PARAMETER_KEYS},
        })
    return rows


def skim_text(rows: List[Dict[str, Any]]) -> str:
    """Tab-separated report: a header line then one line per acquisition."""
    if not rows:
        return "No data available."
    header = "Timestamp\t\t" + "".join(f"{label}\t" for _, label in PARAMETER_KEYS)
    lines = [header]
    for row in rows:
        cells = "".join(f"{row['values'][key]}\t" for key, _ in PARAMETER_KEYS)
        lines.append(f"{row['timestamp']}\t{cells}")
    return "\n".join(lines) + "\n"
