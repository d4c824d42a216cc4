"""
Image processing utilities - functional architecture.

This package provides focused image utilities as pure functions:
- converters: Raster backend (format detection, decode, encode, base64)
- colors: Colour parsing for backgrounds and mattes
- geometry: Geometric calculations (resize targets, crop clamping, rotation bounds, anchors)
- processors: Transform operations (resize, crop, rotate, flip)
- overlay: Watermark compositing

All utilities are re-exported from this module for convenient access.
"""

# Colour utilities
from watimage.core.image.colors import TRANSPARENT, parse_color

# Converter functions
from watimage.core.image.converters import (
    decode,
    detect_format,
    encode,
    flatten,
    from_base64,
    png_compression_from_quality,
    to_base64,
)

# Geometry functions
from watimage.core.image.geometry import (
    anchor_offset,
    clamp_crop,
    derive_dimensions,
    normalize_degrees,
    resolve_resize,
    resolve_watermark_size,
    rotated_canvas_dims,
)

# Overlay functions
from watimage.core.image.overlay import alpha_over, apply_watermark

# Processor functions
from watimage.core.image.processors import crop, flip, resize, rotate, scale_canvas

__all__ = [
    # Colour utilities
    "TRANSPARENT",
    "parse_color",
    # Converter functions
    "decode",
    "detect_format",
    "encode",
    "flatten",
    "from_base64",
    "png_compression_from_quality",
    "to_base64",
    # Geometry functions
    "anchor_offset",
    "clamp_crop",
    "derive_dimensions",
    "normalize_degrees",
    "resolve_resize",
    "resolve_watermark_size",
    "rotated_canvas_dims",
    # Overlay functions
    "alpha_over",
    "apply_watermark",
    # Processor functions
    "crop",
    "flip",
    "resize",
    "rotate",
    "scale_canvas",
]
