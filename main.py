"""
FastAPI backend for the burritos webapp.

This module provides the web API behind the acquisition dashboard: it serves
the JSON documents, plots and signals written by the analysis pipeline under
MAIN_DIR, stores operator comments and the analysis configuration, and can
re-run the analysis script on a dump.
"""

import os
from pathlib import Path

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, ORJSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

load_dotenv()

from api.shared.logger import get_logger, setup_logging

setup_logging(os.environ.get("LOG_LEVEL", "INFO"))
logger = get_logger(__name__)

from api.acquisitions import router as acquisitions_router
from api.auth import router as auth_router
from api.comments import router as comments_router
from api.configuration import router as configuration_router
from api.reanalysis import router as reanalysis_router
from api.settings import get_settings
from api.shared.errors import BurritosError
from api.system import router as system_router

# Create FastAPI app
app = FastAPI(
    title="burritos API",
    description="API for browsing detector acquisitions produced by the analysis pipeline",
    version="1.0.0",
    default_response_class=ORJSONResponse,
)


# ============= Exception Handlers =============


@app.exception_handler(BurritosError)
async def burritos_exception_handler(request: Request, exc: BurritosError):
    """Map domain errors to their HTTP status."""
    if exc.status_code >= 500:
        logger.error("%s %s: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("%s %s: %s", request.method, request.url.path, exc.message)

    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Log HTTP exceptions and return JSON response."""
    if exc.status_code == 404:
        logger.warning("404 Not Found: %s", request.url.path)
    elif exc.status_code >= 500:
        logger.error("%s %s: %s", request.method, request.url.path, exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Log unexpected exceptions and return JSON response."""
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


# Dashboard dev server (Vite) runs on another port
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include API routes
app.include_router(system_router, prefix="/api", tags=["system"])
app.include_router(auth_router, prefix="/api", tags=["auth"])
app.include_router(acquisitions_router, prefix="/api", tags=["acquisitions"])
app.include_router(comments_router, prefix="/api", tags=["comments"])
app.include_router(configuration_router, prefix="/api", tags=["configuration"])
app.include_router(reanalysis_router, prefix="/api", tags=["reanalysis"])


# ============= Startup Events =============


@app.on_event("startup")
async def startup_event():
    settings = get_settings()
    logger.info("Server started")
    logger.info("Main directory is set to: %s", settings.main_dir)
    logger.info("Analysis directory is set to: %s", settings.analysis_dir)
    if not settings.auth_enabled:
        logger.warning("JWT_SECRET/USER_LOGIN/USER_PASSWORD_HASH not all set, write routes are open")


# Serve the built dashboard
dist_path = Path(__file__).parent / "dist"

if dist_path.exists() and (dist_path / "assets").exists():
    app.mount("/assets", StaticFiles(directory=str(dist_path / "assets")), name="assets")


@app.get("/")
async def serve_spa():
    """Serve the main SPA HTML file"""
    index_file = dist_path / "index.html"
    if index_file.exists():
        return FileResponse(str(index_file))
    return {"message": "dist/index.html not found. Run: npm run build"}


# Catch-all route for SPA client-side routing
@app.get("/{full_path:path}")
async def serve_spa_routes(full_path: str):
    """Serve SPA for all non-API routes"""
    if full_path.startswith("api/"):
        raise HTTPException(status_code=404, detail="Endpoint not found.")

    index_file = dist_path / "index.html"
    if index_file.exists():
        return FileResponse(str(index_file))
    return {"message": "dist/index.html not found. Run: npm run build"}


if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="burritos backend server")
    parser.add_argument(
        "--port",
        type=int,
        default=int(os.environ.get("PORT", 3001)),
        help="Port to run the server on (default: 3001 or PORT env var)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default="0.0.0.0",
        help="Host to bind to (default: 0.0.0.0)",
    )
    parser.add_argument(
        "--reload",
        action=argparse.BooleanOptionalAction,
        default=False,
        help="Enable auto-reload",
    )
    parser.add_argument(
        "--watch",
        metavar="YYYY-MM-DD",
        help="Follow the acquisition list of a server already running on --port instead of serving",
    )
    args = parser.parse_args()

    if args.watch:
        from api.shared.acquisition_poller import follow, parse_day

        try:
            follow(f"http://localhost:{args.port}", parse_day(args.watch))
        except KeyboardInterrupt:
            logger.info("Stopped watching %s", args.watch)
    else:
        uvicorn.run(
            "main:app",
            host=args.host,
            port=args.port,
            reload=args.reload,
            log_level="info",
        )
