"""
Core components for Watimage.
"""

from watimage.core.canvas import Canvas
from watimage.core.enums import AnchorPosition, FlipAxis, ImageFormat, ResizeMode

__all__ = ["Canvas", "AnchorPosition", "FlipAxis", "ImageFormat", "ResizeMode"]
