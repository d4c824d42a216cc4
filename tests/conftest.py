"""
Pytest configuration and fixtures for Watimage tests
"""

import cv2
import numpy as np
import pytest

from watimage.config import ImageConfig
from watimage.core.canvas import Canvas
from watimage.services.pipeline_service import ImagePipeline


def make_gradient(width: int, height: int) -> Canvas:
    """Opaque canvas whose red channel follows x and green channel follows y."""
    pixels = np.zeros((height, width, 4), dtype=np.uint8)
    pixels[:, :, 0] = np.linspace(0, 255, width, dtype=np.uint8)[np.newaxis, :]
    pixels[:, :, 1] = np.linspace(0, 255, height, dtype=np.uint8)[:, np.newaxis]
    pixels[:, :, 2] = 64
    pixels[:, :, 3] = 255
    return Canvas(pixels)


def encode_bgr(image: np.ndarray, ext: str) -> bytes:
    """Encode a BGR(A) array with OpenCV."""
    success, buffer = cv2.imencode(ext, image)
    assert success
    return buffer.tobytes()


@pytest.fixture
def test_canvas():
    """Create a 400x300 opaque test canvas"""
    return make_gradient(400, 300)


@pytest.fixture
def small_canvas():
    """Create a 4x3 canvas with a unique colour per pixel"""
    pixels = np.zeros((3, 4, 4), dtype=np.uint8)
    for y in range(3):
        for x in range(4):
            pixels[y, x] = (x * 60, y * 100, x + y * 4, 255)
    return Canvas(pixels)


@pytest.fixture
def watermark_canvas():
    """Create a 20x20 opaque red watermark"""
    return Canvas.blank(20, 20, (255, 0, 0, 255))


@pytest.fixture
def png_bytes():
    """400x300 opaque PNG"""
    image = np.zeros((300, 400, 3), dtype=np.uint8)
    cv2.rectangle(image, (100, 100), (300, 200), (255, 255, 255), -1)
    return encode_bgr(image, ".png")


@pytest.fixture
def jpeg_bytes():
    """400x300 JPEG"""
    image = np.full((300, 400, 3), 128, dtype=np.uint8)
    cv2.circle(image, (200, 150), 50, (0, 0, 255), -1)
    return encode_bgr(image, ".jpg")


@pytest.fixture
def watermark_png_bytes():
    """20x20 PNG, opaque blue square on a transparent border"""
    image = np.zeros((20, 20, 4), dtype=np.uint8)
    image[5:15, 5:15] = (255, 0, 0, 255)  # BGRA blue
    return encode_bgr(image, ".png")


@pytest.fixture
def image_config():
    """Image configuration with explicit defaults"""
    return ImageConfig(jpeg_quality=80, png_compression=6, matte_color="#ffffff")


@pytest.fixture
def pipeline(image_config):
    """Create an empty ImagePipeline"""
    return ImagePipeline(config=image_config)


@pytest.fixture
def loaded_pipeline(pipeline, png_bytes):
    """Create an ImagePipeline with a 400x300 PNG loaded"""
    assert pipeline.load(png_bytes)
    return pipeline
