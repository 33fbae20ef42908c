"""
Centralized logging for the burritos webapp backend.

Every route used to print a Paris-time timestamp followed by its message;
this wraps Python's built-in logging module so the same timestamp format is
produced by a single formatter.

Usage:
    from api.shared.logger import get_logger

    logger = get_logger(__name__)
    logger.info("Server started on port %d", port)
    logger.warning("Signal file not found: %s", path)
"""

import logging
import sys
from datetime import datetime
from zoneinfo import ZoneInfo

_configured = False

LOG_TIMEZONE = ZoneInfo("Europe/Paris")


class ParisFormatter(logging.Formatter):
    """Formatter rendering ``asctime`` as ``YYYY-MM-DD HH:MM:SS`` in Paris time."""

    def formatTime(self, record, datefmt=None):
        stamp = datetime.fromtimestamp(record.created, tz=LOG_TIMEZONE)
        return stamp.strftime(datefmt or "%Y-%m-%d %H:%M:%S")


def setup_logging(level: str = "INFO") -> None:
    """Configure root logging for the webapp backend.

    Call once at startup (main.py). Subsequent calls are no-ops.
    """
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(ParisFormatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        handlers=[handler],
        force=True,
    )
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger scoped to the webapp namespace.

    Args:
        name: Module name (typically ``__name__``).
    """
    return logging.getLogger(name)
