"""
Base data models - fundamental types without dependencies.

This module contains basic Pydantic models used throughout the system:
- Dimensions: target size where 0 on an axis means "derive from aspect ratio"
- Margin: watermark offset from the anchored edges
- CropRect: crop rectangle, possibly outside the image until clamped
- ErrorRecord: one entry of the pipeline error log

IMPORTANT: This module must NOT import from core, services or api
to avoid circular dependencies.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Mapping, Tuple

from pydantic import BaseModel, Field


def _parse_pair(value: Any, names: Tuple[Tuple[str, str], ...]) -> Tuple[int, int]:
    """
    Turn a scalar, a 2-sequence or a mapping into an (x, y) int pair.

    Raises:
        ValueError: If the value has no recognisable shape
    """
    if isinstance(value, bool):
        raise ValueError(f"Expected a number or a pair, got {value!r}")

    if isinstance(value, (int, float)):
        return _to_int(value), _to_int(value)

    if isinstance(value, str):
        parts = value.lower().replace("x", " ").replace(",", " ").split()
        if len(parts) == 1:
            return _to_int(parts[0]), _to_int(parts[0])
        if len(parts) == 2:
            return _to_int(parts[0]), _to_int(parts[1])
        raise ValueError(f"Cannot parse pair from {value!r}")

    if isinstance(value, Mapping):
        for x_key, y_key in names:
            if x_key in value or y_key in value:
                return _to_int(value.get(x_key) or 0), _to_int(value.get(y_key) or 0)
        # Positional mapping such as {0: 200, 1: 100}
        if 0 in value:
            return _to_int(value[0]), _to_int(value.get(1, 0))
        raise ValueError(f"Cannot parse pair from {dict(value)!r}")

    if isinstance(value, (list, tuple)):
        if len(value) == 1:
            return _to_int(value[0]), _to_int(value[0])
        if len(value) == 2:
            return _to_int(value[0]), _to_int(value[1])

    raise ValueError(f"Expected a number or a pair, got {value!r}")


def _to_int(value: Any) -> int:
    # int() raises OverflowError for infinities and TypeError for odd types
    try:
        return int(value)
    except (OverflowError, TypeError) as e:
        raise ValueError(f"Expected an integer, got {value!r}") from e


class Dimensions(BaseModel):
    """
    Target dimensions.

    A scalar means a square target; 0 on one axis means the axis is derived
    from the source aspect ratio when the target is resolved.
    """

    x: int = Field(..., ge=0, description="Target width")
    y: int = Field(..., ge=0, description="Target height")

    @classmethod
    def square(cls, size: int) -> "Dimensions":
        return cls(x=size, y=size)

    @classmethod
    def parse(cls, value: Any) -> "Dimensions":
        """
        Build Dimensions from user input.

        Accepts 200, "200", (200, 100), [200, 0], "200x100",
        {"x": 200, "y": 100} or {"width": 200, "height": 100}.

        Raises:
            ValueError: If the value cannot be parsed or has a negative axis
        """
        if isinstance(value, cls):
            return value
        x, y = _parse_pair(value, (("x", "y"), ("width", "height")))
        if x < 0 or y < 0:
            raise ValueError(f"Dimensions must not be negative: {x}x{y}")
        return cls(x=x, y=y)

    def as_tuple(self) -> Tuple[int, int]:
        return self.x, self.y


class Margin(BaseModel):
    """Watermark margin in pixels, applied on the sides the anchor touches."""

    x: int = 0
    y: int = 0

    @classmethod
    def parse(cls, value: Any) -> "Margin":
        """Build a Margin from a scalar, a pair or a mapping; None means no margin."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls()
        x, y = _parse_pair(value, (("x", "y"),))
        return cls(x=x, y=y)


class CropRect(BaseModel):
    """
    Crop rectangle relative to the image top-left corner.

    Coordinates may be negative and the rectangle may exceed the image;
    it is clamped to the image bounds before use.
    """

    x: int = Field(default=0, description="X coordinate")
    y: int = Field(default=0, description="Y coordinate")
    width: int = Field(..., ge=0, description="Width")
    height: int = Field(..., ge=0, description="Height")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CropRect":
        """Create CropRect from dictionary."""
        return cls(
            x=_to_int(data.get("x", 0)),
            y=_to_int(data.get("y", 0)),
            width=_to_int(data.get("width", 0)),
            height=_to_int(data.get("height", 0)),
        )

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "width": self.width, "height": self.height}

    @property
    def x2(self) -> int:
        """Get right edge coordinate (exclusive)."""
        return self.x + self.width

    @property
    def y2(self) -> int:
        """Get bottom edge coordinate (exclusive)."""
        return self.y + self.height

    @property
    def area_pixels(self) -> int:
        return self.width * self.height


class ErrorRecord(BaseModel):
    """A failed pipeline operation."""

    kind: str = Field(..., description="Error category: load, range, geometry, not_loaded, encode")
    operation: str = Field(..., description="Pipeline operation that failed")
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.now)
