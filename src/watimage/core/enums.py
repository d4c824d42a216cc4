"""
Centralized enums for Watimage.

This module contains all enumeration types used throughout the system,
providing a single source of truth for enum definitions.
"""

from enum import Enum
from typing import Tuple

from watimage.common.constants import FormatConstants


class ResizeMode(str, Enum):
    """Resize policies."""

    RESIZE = "resize"  # exact target, aspect ignored
    RESIZE_MIN = "resizemin"  # smaller side reaches target, aspect kept
    RESIZE_CROP = "resizecrop"  # resizemin, then centred crop to exact target
    CROP = "crop"  # centred crop, no scaling


class FlipAxis(str, Enum):
    """Flip directions."""

    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BOTH = "both"


class AnchorPosition(str, Enum):
    """Nine placement anchors for a watermark."""

    TOP_LEFT = "top left"
    TOP_CENTER = "top center"
    TOP_RIGHT = "top right"
    MIDDLE_LEFT = "middle left"
    MIDDLE_CENTER = "middle center"
    MIDDLE_RIGHT = "middle right"
    BOTTOM_LEFT = "bottom left"
    BOTTOM_CENTER = "bottom center"
    BOTTOM_RIGHT = "bottom right"

    @property
    def vertical(self) -> str:
        """Vertical component: top, middle or bottom."""
        return self.value.split()[0]

    @property
    def horizontal(self) -> str:
        """Horizontal component: left, center or right."""
        return self.value.split()[1]

    @classmethod
    def parse(cls, value) -> "AnchorPosition":
        """
        Parse an anchor from free-form text.

        Accepts either word order ("bottom right", "right bottom"), a single
        word ("top" is top center, "left" is middle left, "center" is the
        middle of the image) and "centre"/"centered" spellings.

        Raises:
            ValueError: If the text names no valid anchor
        """
        if isinstance(value, cls):
            return value

        tokens = str(value).strip().lower().replace("-", " ").replace("_", " ").split()
        aliases = {"centre": "center", "centered": "center", "centred": "center"}
        tokens = [aliases.get(token, token) for token in tokens]

        vertical, horizontal = _split_anchor_tokens(tokens)
        if vertical is None or horizontal is None:
            raise ValueError(f"Invalid watermark position: {value!r}")

        return cls(f"{vertical} {horizontal}")


def _split_anchor_tokens(tokens) -> Tuple:
    vertical = horizontal = None
    ambiguous = 0

    for token in tokens:
        if token in ("top", "bottom", "middle"):
            if vertical is not None:
                return None, None
            vertical = token
        elif token in ("left", "right"):
            if horizontal is not None:
                return None, None
            horizontal = token
        elif token == "center":
            ambiguous += 1
        else:
            return None, None

    if not tokens:
        return None, None

    # "center" fills whichever axis is still free
    for _ in range(ambiguous):
        if horizontal is None:
            horizontal = "center"
        elif vertical is None:
            vertical = "middle"
        else:
            return None, None

    return vertical or "middle", horizontal or "center"


class ImageFormat(str, Enum):
    """Raster formats the backend can decode and encode."""

    PNG = "png"
    JPEG = "jpeg"
    GIF = "gif"

    @property
    def mime_type(self) -> str:
        return FormatConstants.MIME_TYPES[self.value]

    @property
    def supports_alpha(self) -> bool:
        return self is not ImageFormat.JPEG

    @property
    def is_lossy(self) -> bool:
        return self is ImageFormat.JPEG

    @classmethod
    def from_mime(cls, mime_type: str) -> "ImageFormat":
        """
        Resolve a MIME type (or bare format name) to a format.

        Raises:
            ValueError: If the format is not supported
        """
        name = mime_type.strip().lower()
        if name.startswith("image/"):
            name = name[len("image/") :]
        name = {"jpg": "jpeg", "pjpeg": "jpeg", "x-png": "png"}.get(name, name)
        try:
            return cls(name)
        except ValueError:
            raise ValueError(f"Unsupported image format: {mime_type}")
