"""
Watimage - Main FastAPI Application
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from watimage import __version__
from watimage.api.exceptions import register_exception_handlers
from watimage.api.routers import image, system
from watimage.common.constants import APIConstants, SystemConstants
from watimage.config import Settings, get_settings

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    """Configure root logging from system settings."""
    handlers = [logging.StreamHandler()]
    if settings.system.log_file:
        handlers.append(logging.FileHandler(settings.system.log_file))

    logging.basicConfig(
        level=getattr(logging, settings.system.log_level),
        format=SystemConstants.LOG_FORMAT,
        handlers=handlers,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle"""
    settings = app.state.settings

    logger.info("Starting Watimage server...")
    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Debug mode: {settings.system.debug}")

    yield

    logger.info("Watimage server shutdown complete")


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use (defaults to the cached global settings)

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Watimage",
        description="Image resize, crop, rotate, flip and watermark pipeline",
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.debug = settings.system.debug

    if settings.api.cors_enabled:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.api.cors_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    register_exception_handlers(app)

    app.include_router(image.router, prefix=f"{APIConstants.API_PREFIX}/image", tags=["image"])
    app.include_router(system.router, prefix=f"{APIConstants.API_PREFIX}/system", tags=["system"])

    return app


app = create_app()


def main() -> None:
    """Run the API server."""
    settings = get_settings()
    configure_logging(settings)

    uvicorn.run(
        "watimage.main:app",
        host=settings.api.host,
        port=settings.api.port,
        reload=settings.system.debug,
        log_level=settings.system.log_level.lower(),
    )


if __name__ == "__main__":
    main()
