"""
API schemas for Watimage.
"""

from .image import (
    CropOperation,
    FlipOperation,
    Operation,
    ResizeOperation,
    RotateOperation,
    TransformRequest,
    TransformResponse,
    WatermarkOperation,
    WatermarkOptions,
)
from .system import HealthStatus

__all__ = [
    "CropOperation",
    "FlipOperation",
    "Operation",
    "ResizeOperation",
    "RotateOperation",
    "TransformRequest",
    "TransformResponse",
    "WatermarkOperation",
    "WatermarkOptions",
    "HealthStatus",
]
