"""
Common package - fundamental types without project dependencies.

This package contains basic types that are used throughout the system:
- Constants (ImageConstants, FormatConstants, etc.)
- Base models (Dimensions, Margin, CropRect, ErrorRecord)
- Exceptions (WatimageException and its subclasses)

IMPORTANT: This package must NOT import from any other project packages
(schemas, core, services, api) to avoid circular dependencies.
"""

from watimage.common.base import CropRect, Dimensions, ErrorRecord, Margin
from watimage.common.constants import (
    APIConstants,
    FormatConstants,
    ImageConstants,
    SystemConstants,
    WatermarkConstants,
)
from watimage.common.exceptions import (
    EmptyRegionError,
    EncodeError,
    GeometryError,
    InvalidGeometryError,
    LoadError,
    NotLoadedError,
    RangeError,
    WatimageException,
)

__all__ = [
    "CropRect",
    "Dimensions",
    "ErrorRecord",
    "Margin",
    "APIConstants",
    "FormatConstants",
    "ImageConstants",
    "SystemConstants",
    "WatermarkConstants",
    "EmptyRegionError",
    "EncodeError",
    "GeometryError",
    "InvalidGeometryError",
    "LoadError",
    "NotLoadedError",
    "RangeError",
    "WatimageException",
]
