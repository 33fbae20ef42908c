"""
Configuration API routes for the burritos webapp.

Expose the analysis configuration documents and the freshness marker the
dashboard polls to detect new dumps.
"""

from typing import Any, Dict

from fastapi import APIRouter, Body, Depends

from .auth import require_user
from .configuration_store import ConfigurationStore
from .settings import Settings, get_settings
from .shared.json_io import run_blocking

router = APIRouter()


def get_configuration_store(settings: Settings = Depends(get_settings)) -> ConfigurationStore:
    return ConfigurationStore(settings.analysis_dir)


@router.get("/configuration")
async def get_configuration(store: ConfigurationStore = Depends(get_configuration_store)):
    """Active configuration with the positron and antiproton defaults."""
    return await run_blocking(store.get_configuration)


@router.post("/configuration", dependencies=[Depends(require_user)])
async def post_configuration(
    document: Dict[str, Any] = Body(...),
    store: ConfigurationStore = Depends(get_configuration_store),
):
    """Replace the active configuration (the client merges fields beforehand)."""
    await run_blocking(store.post_configuration, document)
    return {"success": True, "message": "Configuration updated successfully"}


@router.get("/configuration/defaults/{particle}")
async def get_default_configuration(particle: str, store: ConfigurationStore = Depends(get_configuration_store)):
    return await run_blocking(store.get_defaults, particle)


@router.get("/latest")
async def get_latest(store: ConfigurationStore = Depends(get_configuration_store)):
    return await run_blocking(store.get_latest)
