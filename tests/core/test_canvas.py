"""
Tests for the Canvas pixel buffer.
"""

import numpy as np
import pytest

from watimage.core.canvas import Canvas


class TestCanvas:
    """Test Canvas construction and pixel access"""

    def test_blank_canvas(self):
        """Test creating a filled canvas"""
        canvas = Canvas.blank(5, 3, (10, 20, 30))

        assert canvas.size == (5, 3)
        assert canvas.width == 5
        assert canvas.height == 3
        assert canvas.pixels.shape == (3, 5, 4)
        assert canvas.get_pixel(4, 2) == (10, 20, 30, 255)
        assert canvas.is_opaque

    def test_blank_defaults_to_transparent(self):
        """Test blank canvases are transparent by default"""
        canvas = Canvas.blank(2, 2)
        assert canvas.get_pixel(0, 0) == (0, 0, 0, 0)
        assert not canvas.is_opaque

    def test_set_pixel(self):
        """Test writing a single pixel"""
        canvas = Canvas.blank(3, 3)
        canvas.set_pixel(1, 2, (1, 2, 3, 4))

        assert canvas.get_pixel(1, 2) == (1, 2, 3, 4)
        assert canvas.pixels[2, 1].tolist() == [1, 2, 3, 4]

    @pytest.mark.parametrize("width,height", [(0, 5), (5, 0), (0, 0)])
    def test_zero_area_rejected(self, width, height):
        """Test a canvas can never have zero area"""
        with pytest.raises(ValueError):
            Canvas.blank(width, height)

    def test_wrong_shape_rejected(self):
        """Test RGB arrays are rejected"""
        with pytest.raises(ValueError):
            Canvas(np.zeros((10, 10, 3), dtype=np.uint8))

    def test_wrong_dtype_rejected(self):
        """Test float arrays are rejected"""
        with pytest.raises(ValueError):
            Canvas(np.zeros((10, 10, 4), dtype=np.float32))

    def test_copy_is_independent(self):
        """Test copies do not share pixel buffers"""
        canvas = Canvas.blank(2, 2, (255, 255, 255, 255))
        clone = canvas.copy()
        clone.set_pixel(0, 0, (0, 0, 0, 0))

        assert canvas.get_pixel(0, 0) == (255, 255, 255, 255)
        assert canvas != clone

    def test_equality(self):
        """Test equality compares size and pixel data"""
        assert Canvas.blank(2, 3, (1, 1, 1)) == Canvas.blank(2, 3, (1, 1, 1))
        assert Canvas.blank(2, 3) != Canvas.blank(3, 2)
