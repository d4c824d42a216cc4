"""
Service Layer - Business logic between the API and the image engine.

The pipeline service sequences image operations, owns pipeline state and
turns engine exceptions into an ordered error log.
"""

from .pipeline_service import ImagePipeline, Watermark

__all__ = ["ImagePipeline", "Watermark"]
