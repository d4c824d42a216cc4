"""
Error taxonomy for Watimage.

The image engine raises these; the pipeline records them in its error log
and the API maps them to HTTP responses.
"""

from typing import Dict, Optional


class WatimageException(Exception):
    """Base exception for Watimage."""

    kind = "error"

    def __init__(self, message: str, status_code: int = 500, details: Optional[Dict] = None):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class LoadError(WatimageException):
    """Exception raised when input bytes cannot be decoded."""

    kind = "load"

    def __init__(self, reason: str, details: Optional[Dict] = None):
        super().__init__(
            message=f"Failed to load image: {reason}",
            status_code=415,
            details={"reason": reason, **(details or {})},
        )


class RangeError(WatimageException):
    """Exception raised when quality or compression is out of bounds."""

    kind = "range"

    def __init__(self, name: str, value: int, minimum: int, maximum: int):
        super().__init__(
            message=f"Invalid {name} {value}: must be between {minimum} and {maximum}",
            status_code=400,
            details={"name": name, "value": value, "min": minimum, "max": maximum},
        )


class GeometryError(WatimageException):
    """Exception raised when requested geometry cannot be satisfied."""

    kind = "geometry"

    def __init__(self, message: str, details: Optional[Dict] = None):
        super().__init__(message=message, status_code=400, details=details)


class InvalidGeometryError(GeometryError):
    """Zero or negative target dimensions."""


class EmptyRegionError(GeometryError):
    """Crop region is empty after clamping to the image bounds."""

    def __init__(self, rect: Dict, bounds: Dict):
        super().__init__(
            message=f"Crop region {rect} does not overlap image bounds {bounds}",
            details={"rect": rect, "bounds": bounds},
        )


class NotLoadedError(WatimageException):
    """Exception raised when an operation needs an image or watermark that is not loaded."""

    kind = "not_loaded"

    def __init__(self, what: str):
        super().__init__(
            message=f"No {what} loaded", status_code=409, details={"missing": what}
        )


class EncodeError(WatimageException):
    """Exception raised when the image cannot be encoded or written."""

    kind = "encode"

    def __init__(self, reason: str, details: Optional[Dict] = None):
        super().__init__(
            message=f"Failed to generate image: {reason}",
            status_code=500,
            details={"reason": reason, **(details or {})},
        )

