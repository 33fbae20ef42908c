"""
Analysis configuration storage.

The external analysis pipeline reads its parameters from a handful of JSON
documents under ``ANALYSIS_DIR/configurations``:

- ``configuration.json``: the active configuration (species, fit flag, ...)
- ``default_config_positrons.json`` / ``default_config_antiprotons.json``
- ``latest.json``: timestamp (and species) of the most recent dump

Documents are replaced wholesale; merging fields is the caller's job.
"""

from pathlib import Path
from typing import Any, Dict, Union

from .shared.errors import BurritosError, ConfigUnavailable, InvalidFormat, StorageError
from .shared.json_io import read_json, write_json_atomic
from .shared.logger import get_logger

logger = get_logger(__name__)

CONFIGURATIONS_DIRNAME = "configurations"
ACTIVE_CONFIG = "configuration.json"
LATEST_MARKER = "latest.json"
PARTICLES = ("positrons", "antiprotons")
DEFAULT_CONFIGS = {
    "positrons": "default_config_positrons.json",
    "antiprotons": "default_config_antiprotons.json",
}


def check_particle(document: Dict[str, Any]) -> None:
    """Raise InvalidFormat unless ``config`` is absent or a known species."""
    if "config" in document and document["config"] not in PARTICLES:
        raise InvalidFormat("Config has to be defined (positrons or antiprotons)")


class ConfigurationStore:
    """Read/replace the analysis configuration documents."""

    def __init__(self, analysis_root: Union[str, Path]):
        self.analysis_root = Path(analysis_root)

    @property
    def directory(self) -> Path:
        return self.analysis_root / CONFIGURATIONS_DIRNAME

    def _load_document(self, name: str) -> Dict[str, Any]:
        path = self.directory / name
        try:
            data = read_json(path)
        except BurritosError as e:
            raise ConfigUnavailable(f"Unable to read configuration file {name}: {e.message}") from e
        if not isinstance(data, dict):
            raise ConfigUnavailable(f"Configuration file {name} is not a JSON object")
        try:
            check_particle(data)
        except InvalidFormat as e:
            raise ConfigUnavailable(f"{name}: {e.message}") from e
        return data

    def get_configuration(self) -> Dict[str, Dict[str, Any]]:
        """Active configuration plus both species defaults, all or nothing."""
        return {
            "configData": self._load_document(ACTIVE_CONFIG),
            "configPos": self._load_document(DEFAULT_CONFIGS["positrons"]),
            "configPbar": self._load_document(DEFAULT_CONFIGS["antiprotons"]),
        }

    def get_defaults(self, particle: str) -> Dict[str, Any]:
        if particle not in DEFAULT_CONFIGS:
            raise InvalidFormat(f"Unknown particle: {particle}")
        return self._load_document(DEFAULT_CONFIGS[particle])

    def post_configuration(self, document: Dict[str, Any]) -> None:
        """Replace the active configuration with ``document``."""
        if not isinstance(document, dict):
            raise InvalidFormat("Configuration must be a JSON object")
        check_particle(document)
        write_json_atomic(self.directory / ACTIVE_CONFIG, document)
        logger.info("Configuration updated (config=%s, fit=%s)", document.get("config"), document.get("fit"))

    def get_latest(self) -> Dict[str, Any]:
        """Freshness marker written by the pipeline after each dump."""
        try:
            data = read_json(self.directory / LATEST_MARKER)
        except StorageError as e:
            raise ConfigUnavailable(f"Unable to read {LATEST_MARKER}: {e.message}") from e
        if not isinstance(data, dict) or "latest" not in data:
            raise ConfigUnavailable(f"{LATEST_MARKER} has no 'latest' field")
        result = {"latest": data["latest"]}
        if data.get("particle") is not None:
            result["particle"] = data["particle"]
        return result
