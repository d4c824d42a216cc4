"""
Watimage - image transformation and watermarking pipeline.

Loads PNG, JPEG and GIF images, applies resize, crop, rotate, flip and
watermark operations, and encodes the result with configurable quality.
"""

__version__ = "1.0.0"

from watimage.core.canvas import Canvas  # noqa: E402
from watimage.services.pipeline_service import ImagePipeline  # noqa: E402

__all__ = ["Canvas", "ImagePipeline", "__version__"]
