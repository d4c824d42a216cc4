"""
Raster backend - decoding and encoding canvases.

Handles conversions between encoded bytes and RGBA canvases:
- Format detection from file signatures
- Decoding PNG/JPEG with OpenCV and GIF with Pillow
- Encoding PNG/JPEG with OpenCV and GIF with Pillow
- Flattening alpha for formats without transparency
"""

import base64
import binascii
import io
import logging
from typing import Optional, Tuple

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from watimage.common.exceptions import EncodeError, LoadError
from watimage.common.constants import FormatConstants, ImageConstants
from watimage.core.canvas import RGBA, Canvas
from watimage.core.enums import ImageFormat

logger = logging.getLogger(__name__)


def detect_format(data: bytes) -> ImageFormat:
    """
    Identify the raster format of encoded bytes from their signature.

    Args:
        data: Encoded image bytes

    Returns:
        Detected format

    Raises:
        LoadError: If the data is empty or the format is not supported
    """
    if not data:
        raise LoadError("empty input")

    for signature, name in FormatConstants.SIGNATURES.items():
        if data.startswith(signature):
            return ImageFormat(name)

    raise LoadError("unsupported or unrecognised image format")


def to_rgba(image: np.ndarray) -> np.ndarray:
    """
    Convert an OpenCV-decoded array (gray, BGR or BGRA, 8 or 16 bit) to RGBA uint8.

    Args:
        image: Array returned by cv2.imdecode with IMREAD_UNCHANGED

    Returns:
        (height, width, 4) uint8 RGBA array
    """
    if image.dtype == np.uint16:
        image = (image >> 8).astype(np.uint8)
    elif image.dtype != np.uint8:
        image = cv2.normalize(image, None, 0, 255, cv2.NORM_MINMAX).astype(np.uint8)

    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)

    channels = image.shape[2]
    if channels == 1:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2RGBA)
    if channels == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2RGBA)
    if channels == 4:
        return cv2.cvtColor(image, cv2.COLOR_BGRA2RGBA)

    raise LoadError(f"unsupported channel count {channels}")


def decode(data: bytes, max_pixels: Optional[int] = None) -> Tuple[Canvas, ImageFormat]:
    """
    Decode image bytes into an RGBA canvas.

    Args:
        data: Encoded PNG, JPEG or GIF bytes
        max_pixels: Optional limit on width * height

    Returns:
        Tuple of (canvas, detected source format)

    Raises:
        LoadError: If the bytes are malformed, unsupported or too large
    """
    image_format = detect_format(data)

    # Reject oversized images from the header, before any pixel buffer exists
    width, height = _read_dimensions(data, image_format)
    limit = max_pixels or ImageConstants.DEFAULT_MAX_PIXELS
    if width * height > limit:
        raise LoadError(
            f"image of {width}x{height} exceeds the {limit} pixel limit",
            details={"width": width, "height": height},
        )

    if image_format is ImageFormat.GIF:
        pixels = _decode_gif(data)
    else:
        decoded = cv2.imdecode(np.frombuffer(data, np.uint8), cv2.IMREAD_UNCHANGED)
        if decoded is None:
            raise LoadError(f"malformed {image_format.value} data")
        pixels = to_rgba(decoded)

    height, width = pixels.shape[:2]
    logger.debug(f"Decoded {image_format.value} image: {width}x{height}")
    return Canvas(pixels), image_format


def _read_dimensions(data: bytes, image_format: ImageFormat) -> Tuple[int, int]:
    # Pillow parses only the header here; pixel data is read lazily
    try:
        with Image.open(io.BytesIO(data)) as image:
            return image.size
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise LoadError(f"malformed {image_format.value} data: {e}")


def _decode_gif(data: bytes) -> np.ndarray:
    # Only the first frame is used
    try:
        with Image.open(io.BytesIO(data)) as image:
            image.seek(0)
            return np.array(image.convert("RGBA"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError, ValueError) as e:
        raise LoadError(f"malformed gif data: {e}")


def flatten(canvas: Canvas, matte: RGBA) -> np.ndarray:
    """
    Composite a canvas onto an opaque matte colour.

    Args:
        canvas: Canvas possibly containing transparency
        matte: Background colour; its alpha is ignored

    Returns:
        (height, width, 3) uint8 RGB array
    """
    pixels = canvas.pixels.astype(np.float32)
    alpha = pixels[:, :, 3:4] / 255.0
    background = np.array(matte[:3], dtype=np.float32)

    rgb = pixels[:, :, :3] * alpha + background * (1.0 - alpha)
    return np.clip(np.rint(rgb), 0, 255).astype(np.uint8)


def png_compression_from_quality(quality: int) -> int:
    """Map a 0-100 quality onto PNG compression (0-9, higher = more compression)."""
    compression = 9 - int(quality / 11)
    return max(ImageConstants.MIN_COMPRESSION, min(ImageConstants.MAX_COMPRESSION, compression))


def encode(
    canvas: Canvas,
    image_format: ImageFormat,
    quality: int = ImageConstants.DEFAULT_QUALITY,
    compression: int = ImageConstants.DEFAULT_COMPRESSION,
    matte: RGBA = (255, 255, 255, 255),
) -> bytes:
    """
    Encode a canvas to bytes.

    Args:
        canvas: Canvas to encode
        image_format: Output format
        quality: JPEG quality (0-100)
        compression: PNG compression level (0-9)
        matte: Background used to flatten alpha for JPEG

    Returns:
        Encoded bytes

    Raises:
        EncodeError: If the backend fails to encode
    """
    if image_format is ImageFormat.GIF:
        return _encode_gif(canvas)

    if image_format is ImageFormat.JPEG:
        image = cv2.cvtColor(flatten(canvas, matte), cv2.COLOR_RGB2BGR)
        ext = ".jpg"
        params = [cv2.IMWRITE_JPEG_QUALITY, int(quality), cv2.IMWRITE_JPEG_OPTIMIZE, 1]
    else:
        # Fully opaque images are written as RGB
        if canvas.is_opaque:
            image = cv2.cvtColor(canvas.pixels, cv2.COLOR_RGBA2BGR)
        else:
            image = cv2.cvtColor(canvas.pixels, cv2.COLOR_RGBA2BGRA)
        ext = ".png"
        params = [cv2.IMWRITE_PNG_COMPRESSION, int(compression)]

    success, buffer = cv2.imencode(ext, image, params)
    if not success:
        raise EncodeError(f"backend could not encode {image_format.value}")

    return buffer.tobytes()


def _encode_gif(canvas: Canvas) -> bytes:
    output = io.BytesIO()
    try:
        Image.fromarray(canvas.pixels).save(output, format="GIF")
    except (OSError, ValueError) as e:
        raise EncodeError(f"backend could not encode gif: {e}")
    return output.getvalue()


def to_base64(data: bytes) -> str:
    """Encode bytes as a base64 string."""
    return base64.b64encode(data).decode("utf-8")


def from_base64(base64_string: str) -> bytes:
    """
    Decode a base64 string, tolerating a data URL prefix.

    Raises:
        LoadError: If the string is not valid base64
    """
    if base64_string.startswith("data:") and "," in base64_string:
        base64_string = base64_string.split(",", 1)[1]

    try:
        return base64.b64decode(base64_string, validate=True)
    except (binascii.Error, ValueError) as e:
        raise LoadError(f"invalid base64 data: {e}")
