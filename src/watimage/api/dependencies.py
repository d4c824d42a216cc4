"""
Shared FastAPI dependencies for Watimage.
"""

import logging

from fastapi import Depends, Request

from watimage.config import ImageConfig, Settings, get_settings
from watimage.services.pipeline_service import ImagePipeline

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    """
    Get settings from app state, falling back to the cached global settings.

    Args:
        request: FastAPI request object
    """
    return getattr(request.app.state, "settings", None) or get_settings()


def get_image_config(settings: Settings = Depends(get_app_settings)) -> ImageConfig:
    """Get image configuration."""
    return settings.image


def get_pipeline(config: ImageConfig = Depends(get_image_config)) -> ImagePipeline:
    """Create a fresh pipeline for the current request."""
    return ImagePipeline(config=config)
