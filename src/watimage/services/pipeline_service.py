"""
Pipeline Service - sequences image operations against one current canvas.

The pipeline owns the current canvas, the optional watermark and the encode
intent. Every public operation either succeeds and replaces the current
canvas, or fails, leaves the state as it was and appends an ErrorRecord
to the error log.
"""

import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from watimage.common.exceptions import (
    EncodeError,
    InvalidGeometryError,
    LoadError,
    NotLoadedError,
    RangeError,
    WatimageException,
)
from watimage.common.base import CropRect, Dimensions, ErrorRecord, Margin
from watimage.common.constants import ImageConstants
from watimage.config import ImageConfig, get_settings
from watimage.core.canvas import Canvas
from watimage.core.enums import AnchorPosition, FlipAxis, ImageFormat, ResizeMode
from watimage.core.image import converters, overlay, processors
from watimage.core.image.colors import parse_color

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class Watermark:
    """A loaded watermark and its placement."""

    def __init__(
        self,
        canvas: Canvas,
        position: AnchorPosition,
        margin: Margin,
        size: Any = None,
    ):
        self.canvas = canvas
        self.position = position
        self.margin = margin
        self.size = size


class ImagePipeline:
    """
    Image transformation pipeline.

    Typical use:

        pipeline = ImagePipeline()
        pipeline.load(data)
        pipeline.resize("resizecrop", (400, 300))
        pipeline.load_watermark(logo, position="bottom right", margin=(10, 10))
        pipeline.apply_watermark()
        output = pipeline.generate(mime_type="image/jpeg")
        if output is None:
            print(pipeline.error_messages)

    Instances are not thread-safe; use one pipeline per thread or task.
    """

    def __init__(self, config: Optional[ImageConfig] = None):
        """
        Initialize pipeline.

        Args:
            config: Image configuration (defaults to the global settings)
        """
        self.config = config or get_settings().image

        self._canvas: Optional[Canvas] = None
        self._source_format: Optional[ImageFormat] = None
        self._watermark: Optional[Watermark] = None
        self._quality: Optional[int] = None
        self._compression: Optional[int] = None
        self._errors: List[ErrorRecord] = []

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def canvas(self) -> Optional[Canvas]:
        """Current canvas, or None before a successful load."""
        return self._canvas

    @property
    def source_format(self) -> Optional[ImageFormat]:
        return self._source_format

    @property
    def watermark_loaded(self) -> bool:
        return self._watermark is not None

    @property
    def quality(self) -> Optional[int]:
        return self._quality

    @property
    def compression(self) -> Optional[int]:
        return self._compression

    @property
    def errors(self) -> List[ErrorRecord]:
        """Errors in the order they happened."""
        return list(self._errors)

    @property
    def error_messages(self) -> List[str]:
        return [record.message for record in self._errors]

    @property
    def last_error(self) -> Optional[ErrorRecord]:
        return self._errors[-1] if self._errors else None

    def _record(self, operation: str, exc: WatimageException) -> None:
        logger.warning(f"{operation} failed: {exc.message}")
        self._errors.append(
            ErrorRecord(
                kind=exc.kind,
                operation=operation,
                message=exc.message,
                details=exc.details,
            )
        )

    def _require_canvas(self) -> Canvas:
        if self._canvas is None:
            raise NotLoadedError("image")
        return self._canvas

    # ------------------------------------------------------------------
    # Loading and encode intent
    # ------------------------------------------------------------------

    def load(self, source: bytes) -> bool:
        """
        Decode an image and make it the current canvas.

        Args:
            source: Encoded PNG, JPEG or GIF bytes

        Returns:
            True on success; False if the bytes could not be decoded
        """
        try:
            canvas, image_format = converters.decode(source, max_pixels=self.config.max_pixels)
        except WatimageException as e:
            self._record("load", e)
            return False

        self._canvas = canvas
        self._source_format = image_format
        logger.info(f"Loaded {image_format.value} image {canvas.width}x{canvas.height}")
        return True

    def load_file(self, path: PathLike) -> bool:
        """Read an image file and load it."""
        try:
            data = _read_file(path)
        except WatimageException as e:
            self._record("load", e)
            return False
        return self.load(data)

    def set_quality(self, level: int) -> bool:
        """
        Set output quality.

        For a loaded PNG the level is a compression level (0-9); otherwise
        it is a quality from 0 (worst) to 100 (best).

        Args:
            level: Quality or compression level

        Returns:
            True on success; False if the level is out of range
        """
        try:
            if self._source_format is ImageFormat.PNG:
                self._compression = _check_range(
                    "compression",
                    level,
                    ImageConstants.MIN_COMPRESSION,
                    ImageConstants.MAX_COMPRESSION,
                )
            else:
                self._quality = _check_range(
                    "quality", level, ImageConstants.MIN_QUALITY, ImageConstants.MAX_QUALITY
                )
        except WatimageException as e:
            self._record("set_quality", e)
            return False
        return True

    def set_compression(self, level: int) -> bool:
        """
        Set PNG compression level.

        Args:
            level: 0 (no compression) to 9 (maximum)

        Returns:
            True on success; False if the level is out of range
        """
        try:
            self._compression = _check_range(
                "compression",
                level,
                ImageConstants.MIN_COMPRESSION,
                ImageConstants.MAX_COMPRESSION,
            )
        except WatimageException as e:
            self._record("set_compression", e)
            return False
        return True

    # ------------------------------------------------------------------
    # Transforms
    # ------------------------------------------------------------------

    def resize(self, mode: Any, size: Any) -> bool:
        """
        Resize the current canvas.

        Args:
            mode: "resize", "resizemin", "resizecrop" or "crop"
            size: Scalar (square), (x, y) pair or {"x", "y"} mapping;
                0 on an axis keeps the aspect ratio

        Returns:
            True on success; False on invalid geometry
        """
        try:
            canvas = self._require_canvas()
            resize_mode = _parse_enum(ResizeMode, mode, "resize mode")
            target = _parse_dimensions(size)
            self._canvas = processors.resize(
                canvas, resize_mode, target, max_pixels=self.config.max_pixels
            )
        except WatimageException as e:
            self._record("resize", e)
            return False
        return True

    def crop(self, rect: Any) -> bool:
        """
        Crop the current canvas.

        Args:
            rect: CropRect or mapping with x, y, width and height;
                the rectangle is clamped to the image

        Returns:
            True on success; False if the region is empty
        """
        try:
            canvas = self._require_canvas()
            crop_rect = _parse_crop_rect(rect)
            self._canvas = processors.crop(canvas, crop_rect)
        except WatimageException as e:
            self._record("crop", e)
            return False
        return True

    def rotate(self, degrees: float, background: Any = "transparent") -> bool:
        """
        Rotate the current canvas counter-clockwise.

        Args:
            degrees: Any finite angle
            background: Fill colour for uncovered pixels; "transparent" or -1
                leaves them fully transparent

        Returns:
            True on success; False for a non-finite angle or bad colour
        """
        try:
            canvas = self._require_canvas()
            try:
                fill = parse_color(background)
                angle = float(degrees)
            except (TypeError, ValueError, OverflowError) as e:
                raise InvalidGeometryError(f"Invalid rotation: {e}")
            self._canvas = processors.rotate(canvas, angle, fill)
        except WatimageException as e:
            self._record("rotate", e)
            return False
        return True

    def flip(self, axis: Any = FlipAxis.HORIZONTAL) -> bool:
        """
        Flip the current canvas.

        Args:
            axis: "horizontal", "vertical" or "both"

        Returns:
            True on success
        """
        try:
            canvas = self._require_canvas()
            flip_axis = _parse_enum(FlipAxis, axis, "flip type")
            self._canvas = processors.flip(canvas, flip_axis)
        except WatimageException as e:
            self._record("flip", e)
            return False
        return True

    # ------------------------------------------------------------------
    # Watermark
    # ------------------------------------------------------------------

    def load_watermark(
        self,
        source: bytes,
        position: Any = None,
        margin: Any = None,
        size: Any = None,
    ) -> bool:
        """
        Decode a watermark image and remember where it goes.

        Args:
            source: Encoded watermark bytes
            position: Anchor such as "bottom right" (configured default if None)
            margin: Scalar or (x, y) distance from the anchored edges
            size: None, "full", "NN%" or target dimensions

        Returns:
            True on success; False if the watermark could not be loaded
        """
        try:
            try:
                anchor = AnchorPosition.parse(position or self.config.watermark_position)
                offsets = Margin.parse(margin)
            except ValueError as e:
                raise LoadError(f"invalid watermark options: {e}")
            canvas, _ = converters.decode(source, max_pixels=self.config.max_pixels)
        except WatimageException as e:
            self._record("load_watermark", e)
            return False

        self._watermark = Watermark(canvas, anchor, offsets, size)
        logger.info(
            f"Loaded watermark {canvas.width}x{canvas.height} at {anchor.value}, "
            f"margin ({offsets.x}, {offsets.y})"
        )
        return True

    def load_watermark_file(self, path: PathLike, **options) -> bool:
        """Read a watermark file and load it."""
        try:
            data = _read_file(path)
        except WatimageException as e:
            self._record("load_watermark", e)
            return False
        return self.load_watermark(data, **options)

    def apply_watermark(self) -> bool:
        """
        Composite the loaded watermark onto the current canvas.

        Returns:
            True on success; False if no watermark or image is loaded
        """
        try:
            canvas = self._require_canvas()
            if self._watermark is None:
                raise NotLoadedError("watermark")
            watermark = self._watermark
            self._canvas = overlay.apply_watermark(
                canvas,
                watermark.canvas,
                watermark.position,
                watermark.margin,
                watermark.size,
                max_pixels=self.config.max_pixels,
            )
        except WatimageException as e:
            self._record("apply_watermark", e)
            return False
        return True

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------

    def generate(
        self, destination: Optional[PathLike] = None, mime_type: Optional[str] = None
    ) -> Optional[bytes]:
        """
        Encode the current canvas.

        Args:
            destination: Optional file path to write the result to
            mime_type: Output type such as "image/png"; defaults to the loaded format

        Returns:
            Encoded bytes on success (also written to destination if given),
            None on failure
        """
        try:
            canvas = self._require_canvas()
            image_format = self._output_format(mime_type)
            data = converters.encode(
                canvas,
                image_format,
                quality=self._jpeg_quality(),
                compression=self._png_compression(),
                matte=parse_color(self.config.matte_color),
            )
            if destination is not None:
                _write_file(destination, data)
        except WatimageException as e:
            self._record("generate", e)
            return None

        logger.info(
            f"Generated {image_format.value} image {canvas.width}x{canvas.height} "
            f"({len(data)} bytes)"
        )
        return data

    def _output_format(self, mime_type: Optional[str]) -> ImageFormat:
        if mime_type is None:
            return self._source_format or ImageFormat.PNG
        try:
            return ImageFormat.from_mime(mime_type)
        except ValueError as e:
            raise EncodeError(str(e), details={"mime_type": mime_type})

    def _jpeg_quality(self) -> int:
        if self._quality is not None:
            return self._quality
        return self.config.jpeg_quality

    def _png_compression(self) -> int:
        if self._compression is not None:
            return self._compression
        if self._quality is not None:
            return converters.png_compression_from_quality(self._quality)
        return self.config.png_compression


def _check_range(name: str, value: Any, minimum: int, maximum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        try:
            value = int(value)
        except (TypeError, ValueError, OverflowError):
            raise RangeError(name, value, minimum, maximum)
    if not minimum <= value <= maximum:
        raise RangeError(name, value, minimum, maximum)
    return value


def _parse_enum(enum_type, value: Any, label: str):
    try:
        return enum_type(str(value.value if isinstance(value, enum_type) else value).lower())
    except ValueError:
        choices = ", ".join(member.value for member in enum_type)
        raise InvalidGeometryError(f"Invalid {label} {value!r}: expected one of {choices}")


def _parse_dimensions(size: Any) -> Dimensions:
    try:
        return Dimensions.parse(size)
    except ValueError as e:
        raise InvalidGeometryError(f"Invalid size {size!r}: {e}")


def _parse_crop_rect(rect: Any) -> CropRect:
    if isinstance(rect, CropRect):
        return rect
    try:
        return CropRect.from_dict(rect)
    except (AttributeError, TypeError, ValueError) as e:
        raise InvalidGeometryError(f"Invalid crop rectangle {rect!r}: {e}")


def _read_file(path: PathLike) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise LoadError(f"cannot read {path}: {e}", details={"path": str(path)})


def _write_file(path: PathLike, data: bytes) -> None:
    try:
        Path(path).write_bytes(data)
    except OSError as e:
        raise EncodeError(f"cannot write {path}: {e}", details={"path": str(path)})
