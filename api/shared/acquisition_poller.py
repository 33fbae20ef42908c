"""
Polling client for the acquisition listing.

The dashboard refreshes the day's file list every couple of seconds and only
updates its selection when the number of files changes. The last-seen count
is held by each ``AcquisitionPoller`` instance, so independent pollers (and
tests) never interfere with each other.
"""

import time
from dataclasses import dataclass, field
from typing import Iterator, List, Optional

import httpx

from .errors import InvalidFormat
from .filenames import DateKey, sort_acquisitions
from .logger import get_logger

logger = get_logger(__name__)

DEFAULT_INTERVAL_SECONDS = 2.0


@dataclass
class PollResult:
    changed: bool
    files: List[str] = field(default_factory=list)
    selected: Optional[str] = None


class AcquisitionPoller:
    """Fetch ``/api/{year}/{month}/{day}/json`` and report changes."""

    def __init__(self, client: httpx.Client, interval: float = DEFAULT_INTERVAL_SECONDS):
        self.client = client
        self.interval = interval
        self.last_count = -1

    def reset(self) -> None:
        """Forget the last-seen count (e.g. when the selected date changes)."""
        self.last_count = -1

    def poll(self, date_key: DateKey) -> PollResult:
        """Fetch the listing once.

        Raises:
            InvalidFormat: ``date_key`` has no day; listings are per day.
            httpx.HTTPStatusError: the server answered with an error status.
        """
        if not date_key.is_day_level:
            raise InvalidFormat(f"Polling needs a day, got {date_key.year}-{date_key.month}")
        response = self.client.get(f"/api/{date_key.year}/{date_key.month}/{date_key.day}/json")
        response.raise_for_status()
        listing = response.json()

        if len(listing) == self.last_count:
            return PollResult(changed=False)

        self.last_count = len(listing)
        files = sort_acquisitions(listing)
        logger.debug("Acquisition list changed: %d files", len(files))
        return PollResult(changed=True, files=files, selected=files[0] if files else None)

    def watch(self, date_key: DateKey, max_polls: Optional[int] = None) -> Iterator[PollResult]:
        """Poll every ``interval`` seconds, yielding only changed listings."""
        polls = 0
        while max_polls is None or polls < max_polls:
            if polls:
                time.sleep(self.interval)
            polls += 1
            result = self.poll(date_key)
            if result.changed:
                yield result


def parse_day(text: str) -> DateKey:
    """``YYYY-MM-DD`` from the command line to a day-level key."""
    parts = text.split("-")
    if len(parts) != 3:
        raise InvalidFormat(f"Expected YYYY-MM-DD, got {text}")
    return DateKey.from_parts(*parts)


def follow(
    base_url: str,
    date_key: DateKey,
    interval: float = DEFAULT_INTERVAL_SECONDS,
    max_polls: Optional[int] = None,
    transport: Optional[httpx.BaseTransport] = None,
) -> Optional[PollResult]:
    """Log each change of a running server's acquisition list.

    Runs until interrupted unless ``max_polls`` is given. Returns the last
    change seen.
    """
    last = None
    with httpx.Client(base_url=base_url, timeout=10.0, transport=transport) as client:
        for result in AcquisitionPoller(client, interval).watch(date_key, max_polls):
            logger.info("%d acquisitions, newest: %s", len(result.files), result.selected)
            last = result
    return last
