"""
Geometric calculations for image transformations.

Pure functions working on explicit sizes, (width, height) tuples:
- Angle normalization
- Resize target resolution for the four resize policies
- Crop rectangle clamping
- Rotated canvas bounding box
- Watermark anchor placement and sizing
"""

import logging
import math
from typing import Any, Optional, Tuple

from watimage.common.exceptions import EmptyRegionError, InvalidGeometryError
from watimage.common.base import CropRect, Dimensions, Margin
from watimage.common.constants import ImageConstants, WatermarkConstants
from watimage.core.canvas import Size
from watimage.core.enums import AnchorPosition, ResizeMode

logger = logging.getLogger(__name__)


def normalize_degrees(degrees: float) -> float:
    """
    Normalize an angle in degrees to the [0, 360) range.

    Args:
        degrees: Any real angle, negative values included

    Returns:
        Equivalent angle in [0, 360)

    Raises:
        InvalidGeometryError: If the angle is infinite or NaN
    """
    angle = float(degrees)
    if not math.isfinite(angle):
        raise InvalidGeometryError(f"Invalid rotation angle: {degrees}")

    angle = math.fmod(angle, 360.0)
    if angle < 0:
        angle += 360.0
    # fmod of tiny negatives lands exactly on 360
    if angle >= 360.0:
        angle = 0.0
    return angle


def derive_dimensions(target: Dimensions, source: Size) -> Size:
    """
    Fill in a 0 axis of the target from the source aspect ratio.

    Args:
        target: Requested dimensions (0 means "derive")
        source: Source (width, height)

    Returns:
        Concrete (width, height), both >= 1

    Raises:
        InvalidGeometryError: If both axes are 0 or an axis resolves to 0
    """
    width, height = source
    x, y = target.x, target.y

    if x == 0 and y == 0:
        raise InvalidGeometryError(
            "Target size must have at least one non-zero axis",
            details={"target": target.model_dump()},
        )

    if x == 0:
        x = int(round(width * y / height))
    elif y == 0:
        y = int(round(height * x / width))

    if x < 1 or y < 1:
        raise InvalidGeometryError(
            f"Target size resolves to {x}x{y} for a {width}x{height} image",
            details={"target": target.model_dump(), "source": [width, height]},
        )

    return x, y


def check_area(size: Size, max_pixels: Optional[int] = None) -> Size:
    """
    Reject sizes whose area exceeds the pixel limit.

    Raises:
        InvalidGeometryError: If width * height is larger than max_pixels
    """
    limit = max_pixels or ImageConstants.DEFAULT_MAX_PIXELS
    width, height = size
    if width * height > limit:
        raise InvalidGeometryError(
            f"Target size {width}x{height} exceeds the {limit} pixel limit",
            details={"width": width, "height": height, "max_pixels": limit},
        )
    return size


def resolve_resize(
    mode: ResizeMode, target: Dimensions, source: Size, max_pixels: Optional[int] = None
) -> Tuple[Size, Optional[CropRect]]:
    """
    Compute the scaled size and optional follow-up crop for a resize policy.

    Args:
        mode: Resize policy
        target: Requested dimensions
        source: Source (width, height)
        max_pixels: Largest allowed scaled area (width * height)

    Returns:
        Tuple of (new (width, height), CropRect to apply afterwards or None)

    Raises:
        InvalidGeometryError: If the target resolves to a zero axis or the
            scaled image would exceed max_pixels
    """
    width, height = source
    target_x, target_y = derive_dimensions(target, source)

    if mode == ResizeMode.RESIZE:
        return check_area((target_x, target_y), max_pixels), None

    if mode == ResizeMode.CROP:
        rect = CropRect(
            x=(width - target_x) // 2,
            y=(height - target_y) // 2,
            width=target_x,
            height=target_y,
        )
        return (width, height), rect

    # resizemin / resizecrop: the governing axis lands exactly on its target
    if target_x / width >= target_y / height:
        new_size = (target_x, max(target_y, int(round(height * target_x / width))))
    else:
        new_size = (max(target_x, int(round(width * target_y / height))), target_y)

    check_area(new_size, max_pixels)

    if mode == ResizeMode.RESIZE_MIN:
        return new_size, None

    rect = CropRect(
        x=(new_size[0] - target_x) // 2,
        y=(new_size[1] - target_y) // 2,
        width=target_x,
        height=target_y,
    )
    return new_size, rect


def clamp_crop(rect: CropRect, source: Size) -> CropRect:
    """
    Intersect a crop rectangle with the image bounds.

    Args:
        rect: Requested rectangle
        source: Image (width, height)

    Returns:
        Rectangle lying entirely inside the image

    Raises:
        EmptyRegionError: If the intersection is empty
    """
    width, height = source

    x1 = max(rect.x, 0)
    y1 = max(rect.y, 0)
    x2 = min(rect.x2, width)
    y2 = min(rect.y2, height)

    if x2 <= x1 or y2 <= y1:
        raise EmptyRegionError(rect.to_dict(), {"width": width, "height": height})

    clamped = CropRect(x=x1, y=y1, width=x2 - x1, height=y2 - y1)
    if clamped != rect:
        logger.debug(f"Crop {rect.to_dict()} clamped to {clamped.to_dict()}")
    return clamped


def rotated_canvas_dims(source: Size, degrees: float) -> Size:
    """
    Bounding box of a rectangle rotated about its centre.

    Args:
        source: Source (width, height)
        degrees: Rotation angle in degrees

    Returns:
        (width, height) of the bounding box, rounded up to whole pixels
    """
    width, height = source
    theta = math.radians(normalize_degrees(degrees))
    cos_t = abs(math.cos(theta))
    sin_t = abs(math.sin(theta))

    precision = ImageConstants.ROTATION_DIMENSION_PRECISION
    new_width = math.ceil(round(width * cos_t + height * sin_t, precision))
    new_height = math.ceil(round(width * sin_t + height * cos_t, precision))

    return max(1, new_width), max(1, new_height)


def anchor_offset(
    container: Size, content: Size, position: AnchorPosition, margin: Margin
) -> Tuple[int, int]:
    """
    Top-left placement of content inside a container for an anchor.

    The margin is measured from the edge(s) the anchor touches; centred axes
    ignore it.

    Args:
        container: Container (width, height)
        content: Content (width, height)
        position: Anchor position
        margin: Margin from the anchored edges

    Returns:
        (x, y) offset, possibly negative or past the container edge
    """
    container_w, container_h = container
    content_w, content_h = content

    if position.horizontal == "left":
        x = margin.x
    elif position.horizontal == "right":
        x = container_w - content_w - margin.x
    else:
        x = (container_w - content_w) // 2

    if position.vertical == "top":
        y = margin.y
    elif position.vertical == "bottom":
        y = container_h - content_h - margin.y
    else:
        y = (container_h - content_h) // 2

    return x, y


def resolve_watermark_size(
    size: Any, container: Size, content: Size, max_pixels: Optional[int] = None
) -> Size:
    """
    Compute the size a watermark is scaled to before compositing.

    Args:
        size: None (keep), "full" (stretch to container), "NN%" (percentage of
            the container width, aspect kept) or anything Dimensions.parse accepts
        container: Target image (width, height)
        content: Watermark (width, height)
        max_pixels: Largest allowed watermark area (width * height)

    Returns:
        Watermark (width, height) to use

    Raises:
        InvalidGeometryError: If the size cannot be parsed, resolves to zero
            or exceeds max_pixels
    """
    if size is None:
        return content

    if isinstance(size, str):
        text = size.strip().lower()
        if text == WatermarkConstants.FULL_SIZE:
            return container
        if text.endswith("%"):
            try:
                percent = float(text[:-1])
            except ValueError:
                raise InvalidGeometryError(f"Invalid watermark size: {size!r}")
            scaled = container[0] * percent / 100.0
            if not math.isfinite(scaled) or percent <= 0:
                raise InvalidGeometryError(f"Invalid watermark size: {size!r}")
            width = int(round(scaled))
            return check_area(
                derive_dimensions(Dimensions(x=max(width, 1), y=0), content), max_pixels
            )

    try:
        target = Dimensions.parse(size)
    except ValueError as e:
        raise InvalidGeometryError(f"Invalid watermark size: {e}")

    return check_area(derive_dimensions(target, content), max_pixels)
