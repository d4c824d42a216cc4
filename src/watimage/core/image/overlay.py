"""
Watermark compositing.

Places a watermark canvas at one of nine anchors and alpha-blends it onto
the target canvas.
"""

import logging
from typing import Any, Optional

import numpy as np

from watimage.common.base import Margin
from watimage.core.canvas import Canvas
from watimage.core.enums import AnchorPosition
from watimage.core.image.geometry import anchor_offset, resolve_watermark_size
from watimage.core.image.processors import scale_canvas

logger = logging.getLogger(__name__)


def alpha_over(src: np.ndarray, dst: np.ndarray) -> np.ndarray:
    """
    Composite straight-alpha RGBA pixels src over dst.

    out_a = sa + da * (1 - sa)
    out_rgb = (src_rgb * sa + dst_rgb * da * (1 - sa)) / out_a

    With an opaque destination this reduces to src * sa + dst * (1 - sa).
    Where out_a is 0 the destination pixel is kept unchanged.

    Args:
        src: uint8 array (..., 4)
        dst: uint8 array of the same shape

    Returns:
        Blended uint8 array
    """
    src_f = src.astype(np.float32) / 255.0
    dst_f = dst.astype(np.float32) / 255.0

    src_a = src_f[..., 3:4]
    dst_a = dst_f[..., 3:4]

    out_a = src_a + dst_a * (1.0 - src_a)
    weighted = src_f[..., :3] * src_a + dst_f[..., :3] * dst_a * (1.0 - src_a)
    out_rgb = np.divide(weighted, out_a, out=np.zeros_like(weighted), where=out_a > 0)

    out = np.concatenate([out_rgb, out_a], axis=-1)
    out = np.clip(np.rint(out * 255.0), 0, 255).astype(np.uint8)

    return np.where(out_a > 0, out, dst)


def apply_watermark(
    target: Canvas,
    watermark: Canvas,
    position: AnchorPosition = AnchorPosition.BOTTOM_RIGHT,
    margin: Optional[Margin] = None,
    size: Any = None,
    max_pixels: Optional[int] = None,
) -> Canvas:
    """
    Blend a watermark onto a canvas.

    Watermark pixels that fall outside the target are skipped.

    Args:
        target: Canvas to draw on
        watermark: Watermark canvas
        position: Anchor the watermark is placed at
        margin: Distance from the anchored edges
        size: Optional watermark size, see resolve_watermark_size
        max_pixels: Largest allowed scaled watermark area

    Returns:
        New canvas with the watermark applied
    """
    margin = margin or Margin()

    watermark_size = resolve_watermark_size(size, target.size, watermark.size, max_pixels)
    if watermark_size != watermark.size:
        watermark = scale_canvas(watermark, watermark_size)

    offset_x, offset_y = anchor_offset(target.size, watermark.size, position, margin)

    # Visible part of the watermark in target coordinates
    x1 = max(offset_x, 0)
    y1 = max(offset_y, 0)
    x2 = min(offset_x + watermark.width, target.width)
    y2 = min(offset_y + watermark.height, target.height)

    result = target.copy()

    if x2 <= x1 or y2 <= y1:
        logger.warning(
            f"Watermark at ({offset_x}, {offset_y}) lies outside the "
            f"{target.width}x{target.height} image"
        )
        return result

    src = watermark.pixels[y1 - offset_y : y2 - offset_y, x1 - offset_x : x2 - offset_x]
    dst = result.pixels[y1:y2, x1:x2]
    result.pixels[y1:y2, x1:x2] = alpha_over(src, dst)

    logger.debug(
        f"Watermark {watermark.width}x{watermark.height} applied at "
        f"({offset_x}, {offset_y}) [{position.value}]"
    )
    return result
