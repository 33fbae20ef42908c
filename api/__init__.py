"""
API package for the burritos webapp FastAPI backend.

This package provides the REST API endpoints for:
- Acquisition listing, documents, plots and signals (acquisitions.py)
- Operator comments (comments.py, comment_store.py)
- Analysis configuration and freshness marker (configuration.py, configuration_store.py)
- Re-running the analysis script (reanalysis.py)
- Cookie/JWT login (auth.py)
- Liveness and system info (system.py)
"""

from .comment_store import CommentStore
from .configuration_store import ConfigurationStore
from .settings import Settings, get_settings

__all__ = [
    "CommentStore",
    "ConfigurationStore",
    "Settings",
    "get_settings",
]
