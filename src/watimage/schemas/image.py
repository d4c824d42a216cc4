"""
Image transformation API models.

This module contains models for the transform endpoint:
- Operation steps (resize, crop, rotate, flip, watermark)
- Watermark options
- Transform request and response
"""

from typing import Annotated, Any, List, Literal, Optional, Union

from pydantic import BaseModel, Field

from watimage.common.base import ErrorRecord
from watimage.core.enums import FlipAxis, ResizeMode


class BaseOperation(BaseModel):
    """Base class for a pipeline step."""

    model_config = {"extra": "forbid"}


class ResizeOperation(BaseOperation):
    op: Literal["resize"]
    mode: ResizeMode = Field(default=ResizeMode.RESIZE, description="Resize policy")
    size: Any = Field(..., description="Scalar, [x, y] or {x, y}; 0 keeps the aspect ratio")


class CropOperation(BaseOperation):
    op: Literal["crop"]
    x: int = 0
    y: int = 0
    width: int = Field(..., ge=0)
    height: int = Field(..., ge=0)


class RotateOperation(BaseOperation):
    op: Literal["rotate"]
    degrees: float
    background: Any = Field(default="transparent", description="Colour or 'transparent'")


class FlipOperation(BaseOperation):
    op: Literal["flip"]
    axis: FlipAxis = FlipAxis.HORIZONTAL


class WatermarkOperation(BaseOperation):
    op: Literal["watermark"]


Operation = Union[
    ResizeOperation, CropOperation, RotateOperation, FlipOperation, WatermarkOperation
]


class WatermarkOptions(BaseModel):
    """Watermark image and placement."""

    image: str = Field(..., description="Base64 encoded watermark image")
    position: Optional[str] = Field(default=None, description="Anchor such as 'bottom right'")
    margin: Any = Field(default=0, description="Scalar or [x, y] margin in pixels")
    size: Any = Field(default=None, description="None, 'full', 'NN%' or target dimensions")


class TransformRequest(BaseModel):
    """Request to transform an image."""

    image: str = Field(..., description="Base64 encoded source image")
    operations: List[Annotated[Operation, Field(discriminator="op")]] = Field(
        default_factory=list, description="Steps applied in order"
    )
    watermark: Optional[WatermarkOptions] = None
    mime_type: Optional[str] = Field(default=None, description="Output type, e.g. image/png")
    quality: Optional[int] = Field(default=None, description="Quality or PNG compression level")
    stop_on_error: bool = Field(default=False, description="Skip remaining steps after a failure")


class TransformResponse(BaseModel):
    """Result of a transform request."""

    success: bool
    image: Optional[str] = Field(default=None, description="Base64 encoded result")
    mime_type: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None
    errors: List[ErrorRecord] = Field(default_factory=list)
