"""
Constants and configuration values for Watimage.
Centralizes all magic numbers and configuration constants.
"""


class ImageConstants:
    """Constants related to encoding and canvas handling."""

    # Lossy formats (JPEG)
    MIN_QUALITY = 0
    MAX_QUALITY = 100
    DEFAULT_QUALITY = 80

    # Lossless formats with a compression level (PNG)
    MIN_COMPRESSION = 0
    MAX_COMPRESSION = 9
    DEFAULT_COMPRESSION = 6

    # Background used when alpha has to be dropped (JPEG output)
    DEFAULT_MATTE_COLOR = "#ffffff"

    # Decompression bomb guard
    DEFAULT_MAX_PIXELS = 50_000_000

    # Rotated canvas dimensions are rounded to this many decimals before ceil
    ROTATION_DIMENSION_PRECISION = 6


class WatermarkConstants:
    """Constants related to watermark placement."""

    DEFAULT_POSITION = "bottom right"
    DEFAULT_MARGIN = 0
    FULL_SIZE = "full"


class FormatConstants:
    """Raster format signatures and MIME types."""

    SIGNATURES = {
        b"\x89PNG\r\n\x1a\n": "png",
        b"\xff\xd8\xff": "jpeg",
        b"GIF87a": "gif",
        b"GIF89a": "gif",
    }

    MIME_TYPES = {
        "png": "image/png",
        "jpeg": "image/jpeg",
        "gif": "image/gif",
    }

    EXTENSIONS = {
        "png": ".png",
        "jpeg": ".jpg",
        "gif": ".gif",
    }


class SystemConstants:
    """System-level constants."""

    LOG_LEVEL_DEFAULT = "INFO"
    LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class APIConstants:
    """API-related constants."""

    API_VERSION = "v1"
    API_PREFIX = "/api"
    MAX_UPLOAD_SIZE_MB = 50
