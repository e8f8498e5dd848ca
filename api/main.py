"""
Brick Collector - FastAPI Application

Main entry point for the API server.
Configuration reads from settings (.env file).
"""

import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from brick_collector.exceptions import (
    CollectorError,
    ConfirmationDeclined,
    DuplicateSetError,
    InvalidImportError,
    InvalidSetError,
    LastCollectionError,
    SearchError,
    UnknownCollectionError,
)
from brick_collector.settings import get_settings
from api.dependencies import lifespan_handler
from api.routers import collections, search, transfer, themes, health

# Get settings
cfg = get_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, cfg.log_level),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

ERROR_STATUS = {
    DuplicateSetError: 409,
    LastCollectionError: 409,
    ConfirmationDeclined: 409,
    InvalidImportError: 400,
    InvalidSetError: 400,
    UnknownCollectionError: 404,
    SearchError: 502,
}


async def collector_error_handler(request: Request, exc: CollectorError) -> JSONResponse:
    """Map domain errors to HTTP answers; the workspace stays usable."""
    status = next((code for cls, code in ERROR_STATUS.items() if isinstance(exc, cls)), 400)
    logger.warning(f"{request.method} {request.url.path} rejected ({status}): {exc}")
    return JSONResponse(status_code=status, content={"detail": str(exc), "error": type(exc).__name__})


def create_app() -> FastAPI:
    """
    Application factory for creating FastAPI app.

    Returns:
        Configured FastAPI application instance
    """
    app = FastAPI(
        title="Brick Collector API",
        description="Manage local LEGO set collections backed by the Rebrickable database",
        version="0.1.0",
        lifespan=lifespan_handler  # Handles startup/shutdown
    )

    logger.info(f"Configuring CORS with origins: {cfg.cors_origins}")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cfg.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(CollectorError, collector_error_handler)

    # Mount routers
    app.include_router(collections.router, prefix="/api/v1", tags=["collections"])
    app.include_router(transfer.router, prefix="/api/v1", tags=["import-export"])
    app.include_router(search.router, prefix="/api/v1", tags=["search"])
    app.include_router(themes.router, prefix="/api/v1", tags=["themes"])
    app.include_router(health.router, prefix="/api/v1/health", tags=["health"])

    logger.info(f"FastAPI application created (env={cfg.env})")

    return app


# Create app instance
app = create_app()


# Root endpoint
@app.get("/")
async def root():
    """Root endpoint - API info"""
    return {
        "name": "Brick Collector API",
        "version": "0.1.0",
        "environment": cfg.env,
        "status": "running",
        "docs": "/docs",
        "health": "/api/v1/health/ready"
    }


if __name__ == "__main__":
    import uvicorn

    logger.info(f"Starting API server on {cfg.api_host}:{cfg.api_port}")
    uvicorn.run(
        "api.main:app",
        host=cfg.api_host,
        port=cfg.api_port,
        reload=cfg.api_reload,
        log_level=cfg.log_level.lower()
    )
