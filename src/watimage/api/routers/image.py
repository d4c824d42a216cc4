"""
Image API Router - Image transformation pipeline
"""

import logging

from fastapi import APIRouter, Depends

from watimage.api.dependencies import get_app_settings, get_pipeline
from watimage.api.exceptions import LoadError, safe_endpoint
from watimage.config import Settings
from watimage.core.enums import ImageFormat
from watimage.core.image.converters import from_base64, to_base64
from watimage.schemas import (
    CropOperation,
    FlipOperation,
    ResizeOperation,
    RotateOperation,
    TransformRequest,
    TransformResponse,
    WatermarkOperation,
)
from watimage.services.pipeline_service import ImagePipeline

logger = logging.getLogger(__name__)

router = APIRouter()


def _decode_upload(data: str, settings: Settings, what: str) -> bytes:
    raw = from_base64(data)
    limit = settings.api.max_upload_size_mb * 1024 * 1024
    if len(raw) > limit:
        raise LoadError(
            f"{what} is {len(raw)} bytes, limit is {limit}", details={"size": len(raw)}
        )
    return raw


def _run_operation(pipeline: ImagePipeline, operation) -> bool:
    if isinstance(operation, ResizeOperation):
        return pipeline.resize(operation.mode, operation.size)
    if isinstance(operation, CropOperation):
        return pipeline.crop(operation.model_dump(exclude={"op"}))
    if isinstance(operation, RotateOperation):
        return pipeline.rotate(operation.degrees, operation.background)
    if isinstance(operation, FlipOperation):
        return pipeline.flip(operation.axis)
    if isinstance(operation, WatermarkOperation):
        return pipeline.apply_watermark()
    raise ValueError(f"Unknown operation: {operation!r}")


@router.post("/transform")
@safe_endpoint
async def transform_image(
    request: TransformRequest,
    pipeline: ImagePipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_app_settings),
) -> TransformResponse:
    """
    Run a sequence of operations on an uploaded image.

    Steps are applied in order. A failed step is reported in `errors` and
    leaves the image as it was before the step; remaining steps still run
    unless `stop_on_error` is set.

    Args:
        request: Source image, operations and output options
        pipeline: Fresh pipeline for this request

    Returns:
        TransformResponse with the encoded result and the error log
    """
    if not pipeline.load(_decode_upload(request.image, settings, "image")):
        error = pipeline.last_error
        raise LoadError(error.details.get("reason", error.message))

    if request.watermark is not None:
        watermark = request.watermark
        pipeline.load_watermark(
            _decode_upload(watermark.image, settings, "watermark"),
            position=watermark.position,
            margin=watermark.margin,
            size=watermark.size,
        )

    if request.quality is not None:
        pipeline.set_quality(request.quality)

    for operation in request.operations:
        if not _run_operation(pipeline, operation) and request.stop_on_error:
            break

    output = pipeline.generate(mime_type=request.mime_type)
    canvas = pipeline.canvas

    logger.info(
        f"Transformed image with {len(request.operations)} operations, "
        f"{len(pipeline.errors)} errors"
    )

    if output is None:
        return TransformResponse(success=False, errors=pipeline.errors)

    output_format = (
        ImageFormat.from_mime(request.mime_type) if request.mime_type else pipeline.source_format
    )
    return TransformResponse(
        success=not pipeline.errors,
        image=to_base64(output),
        mime_type=output_format.mime_type,
        width=canvas.width,
        height=canvas.height,
        errors=pipeline.errors,
    )
