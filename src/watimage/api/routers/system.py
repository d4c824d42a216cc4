"""
System API Router - Health check
"""

import logging
import time

from fastapi import APIRouter

from watimage import __version__
from watimage.api.exceptions import safe_endpoint
from watimage.core.enums import ImageFormat
from watimage.schemas import HealthStatus

logger = logging.getLogger(__name__)

router = APIRouter()

# Track start time
START_TIME = time.time()


@router.get("/health")
@safe_endpoint
async def get_health() -> HealthStatus:
    """Get service health and supported formats"""
    return HealthStatus(
        status="healthy",
        version=__version__,
        uptime=time.time() - START_TIME,
        formats=[image_format.mime_type for image_format in ImageFormat],
    )
