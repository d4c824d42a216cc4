"""
Image transform operations.

Handles canvas manipulation using OpenCV:
- Resizing (bilinear resampling for every policy)
- Cropping
- Rotation by any angle with background fill
- Flipping

Every function takes a source Canvas and returns a new one; the source is
left untouched.
"""

import logging
from typing import Any, Optional

import cv2
import numpy as np

from watimage.common.base import CropRect, Dimensions
from watimage.core.canvas import Canvas, RGBA, Size
from watimage.core.enums import FlipAxis, ResizeMode
from watimage.core.image.colors import TRANSPARENT
from watimage.core.image.geometry import (
    clamp_crop,
    normalize_degrees,
    resolve_resize,
    rotated_canvas_dims,
)

logger = logging.getLogger(__name__)

# Bilinear resampling is used for every resize and arbitrary-angle rotation
INTERPOLATION = cv2.INTER_LINEAR


def premultiply(pixels: np.ndarray) -> np.ndarray:
    """Straight-alpha uint8 RGBA to premultiplied float32 RGBA."""
    result = pixels.astype(np.float32)
    result[..., :3] *= result[..., 3:4] / 255.0
    return result


def unpremultiply(pixels: np.ndarray) -> np.ndarray:
    """Premultiplied float32 RGBA back to straight-alpha uint8 RGBA."""
    alpha = pixels[..., 3:4]
    rgb = np.divide(
        pixels[..., :3] * 255.0, alpha, out=np.zeros_like(pixels[..., :3]), where=alpha > 0
    )
    result = np.concatenate([rgb, alpha], axis=-1)
    return np.clip(np.rint(result), 0, 255).astype(np.uint8)


def scale_canvas(canvas: Canvas, size: Size) -> Canvas:
    """
    Resample a canvas to an exact size.

    Canvases with transparency are resampled with premultiplied alpha so
    transparent neighbours do not darken the edges.

    Args:
        canvas: Source canvas
        size: Target (width, height)

    Returns:
        New canvas of the requested size
    """
    if size == canvas.size:
        return canvas.copy()

    if canvas.is_opaque:
        return Canvas(cv2.resize(canvas.pixels, size, interpolation=INTERPOLATION))

    pixels = cv2.resize(premultiply(canvas.pixels), size, interpolation=INTERPOLATION)
    return Canvas(unpremultiply(pixels))


def resize(
    canvas: Canvas, mode: ResizeMode, target: Dimensions, max_pixels: Optional[int] = None
) -> Canvas:
    """
    Resize a canvas according to a resize policy.

    Args:
        canvas: Source canvas
        mode: resize, resizemin, resizecrop or crop
        target: Requested dimensions (0 on an axis derives it from the aspect ratio)
        max_pixels: Largest allowed scaled area

    Returns:
        Resized (and possibly cropped) canvas

    Raises:
        InvalidGeometryError: If the target resolves to a zero axis or is too large
    """
    new_size, crop_after = resolve_resize(mode, target, canvas.size, max_pixels)

    result = scale_canvas(canvas, new_size)
    logger.debug(f"{mode.value}: {canvas.width}x{canvas.height} -> {new_size[0]}x{new_size[1]}")

    if crop_after is not None:
        result = crop(result, crop_after)

    return result


def crop(canvas: Canvas, rect: CropRect) -> Canvas:
    """
    Copy a rectangle out of a canvas, clamped to its bounds.

    Args:
        canvas: Source canvas
        rect: Requested rectangle

    Returns:
        New canvas with the clamped region

    Raises:
        EmptyRegionError: If the rectangle does not overlap the canvas
    """
    region = clamp_crop(rect, canvas.size)
    return Canvas(canvas.pixels[region.y : region.y2, region.x : region.x2].copy())


def rotate(canvas: Canvas, degrees: float, background: RGBA = TRANSPARENT) -> Canvas:
    """
    Rotate a canvas counter-clockwise about its centre.

    The output canvas grows to the bounding box of the rotated image and
    uncovered pixels are filled with the background colour. A transparent
    background leaves those pixels at alpha 0. Interpolation runs on
    premultiplied alpha unless the result is fully opaque.

    Args:
        canvas: Source canvas
        degrees: Angle in degrees, any real value
        background: RGBA fill for pixels outside the source

    Returns:
        Rotated canvas; the input canvas itself when the angle is a multiple of 360
    """
    angle = normalize_degrees(degrees)

    if angle == 0.0:
        return canvas

    # Quarter turns are exact pixel permutations
    if angle in (90.0, 180.0, 270.0):
        return Canvas(np.rot90(canvas.pixels, k=int(angle // 90)).copy())

    new_width, new_height = rotated_canvas_dims(canvas.size, angle)
    width, height = canvas.size

    matrix = cv2.getRotationMatrix2D(((width - 1) / 2.0, (height - 1) / 2.0), angle, 1.0)
    matrix[0, 2] += (new_width - width) / 2.0
    matrix[1, 2] += (new_height - height) / 2.0

    # Opaque results need no alpha handling
    opaque = canvas.is_opaque and background[3] == 255
    source = canvas.pixels if opaque else premultiply(canvas.pixels)
    fill = background if opaque else premultiply(np.array(background, dtype=np.uint8))

    pixels = cv2.warpAffine(
        source,
        matrix,
        (new_width, new_height),
        flags=INTERPOLATION,
        borderMode=cv2.BORDER_CONSTANT,
        borderValue=tuple(float(channel) for channel in fill),
    )

    logger.debug(f"Rotated {width}x{height} by {angle} -> {new_width}x{new_height}")
    return Canvas(pixels if opaque else unpremultiply(pixels))


def flip(canvas: Canvas, axis: Any = FlipAxis.HORIZONTAL) -> Canvas:
    """
    Mirror a canvas.

    Args:
        canvas: Source canvas
        axis: horizontal (mirror columns), vertical (mirror rows) or both

    Returns:
        Flipped canvas of identical size

    Raises:
        ValueError: If the axis is unknown
    """
    axis = FlipAxis(axis)

    flip_codes = {
        FlipAxis.HORIZONTAL: 1,
        FlipAxis.VERTICAL: 0,
        FlipAxis.BOTH: -1,
    }

    return Canvas(cv2.flip(canvas.pixels, flip_codes[axis]))
