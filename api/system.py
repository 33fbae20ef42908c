"""
System API routes for the burritos webapp.

This module provides FastAPI routes for liveness checks and basic
information about the configured data roots.
"""

import platform
import sys

from fastapi import APIRouter, Depends

from .settings import Settings, get_settings

router = APIRouter()


@router.get("/test")
async def api_test():
    """Smoke test used by the dashboard on load."""
    return {"message": "API is working"}


@router.get("/health")
async def health_check(settings: Settings = Depends(get_settings)):
    """Health check endpoint."""
    return {
        "status": "healthy",
        "message": "burritos webapp is running",
        "main_dir_available": settings.main_dir.is_dir(),
        "analysis_dir_available": settings.analysis_dir.is_dir(),
    }


@router.get("/system/info")
async def system_info(settings: Settings = Depends(get_settings)):
    """Get runtime and configuration information."""
    return {
        "python": {
            "version": sys.version,
            "platform": sys.platform,
            "executable": sys.executable,
        },
        "system": {
            "os": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "paths": {
            "main_dir": str(settings.main_dir),
            "analysis_dir": str(settings.analysis_dir),
            "analysis_script": str(settings.analysis_script),
            "python_path": settings.python_path,
        },
        "auth_enabled": settings.auth_enabled,
    }
