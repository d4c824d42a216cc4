"""
Tests for core.image.processors module.

Tests resize policies, cropping, rotation and flipping on canvases.
"""

import numpy as np
import pytest

from watimage.common.base import CropRect, Dimensions
from watimage.common.exceptions import EmptyRegionError, InvalidGeometryError
from watimage.core.canvas import Canvas
from watimage.core.enums import FlipAxis, ResizeMode
from watimage.core.image.processors import (
    crop,
    flip,
    premultiply,
    resize,
    rotate,
    scale_canvas,
    unpremultiply,
)


class TestScaleCanvas:
    """Tests for scale_canvas function."""

    def test_scale_exact_size(self, test_canvas):
        """Test resampling to an exact size."""
        result = scale_canvas(test_canvas, (50, 60))
        assert result.size == (50, 60)

    def test_scale_same_size_is_copy(self, test_canvas):
        """Test same-size scaling returns an equal but separate canvas."""
        result = scale_canvas(test_canvas, test_canvas.size)
        assert result == test_canvas
        assert result is not test_canvas

    def test_uniform_colour_survives(self):
        """Test bilinear resampling keeps a flat colour flat."""
        canvas = Canvas.blank(10, 10, (10, 200, 30, 255))
        result = scale_canvas(canvas, (33, 7))
        assert np.all(result.pixels == (10, 200, 30, 255))


class TestPremultiply:
    """Tests for premultiplied alpha helpers."""

    def test_round_trip(self):
        """Test straight alpha survives a premultiply round trip."""
        pixels = np.array([[[200, 100, 50, 128], [10, 20, 30, 255], [90, 90, 90, 0]]], np.uint8)
        result = unpremultiply(premultiply(pixels))

        assert result[0, 0].tolist() == [200, 100, 50, 128]
        assert result[0, 1].tolist() == [10, 20, 30, 255]
        assert result[0, 2].tolist() == [0, 0, 0, 0]

    def test_transparent_scaling_keeps_colour(self):
        """Test downscaling a shape on a transparent field keeps its colour."""
        canvas = Canvas.blank(20, 20)
        canvas.pixels[5:15, 5:15] = (0, 0, 255, 255)

        result = scale_canvas(canvas, (7, 7))
        visible = result.pixels[result.pixels[:, :, 3] > 0]

        assert len(visible) > 0
        assert np.all(visible[:, :3] == (0, 0, 255))


class TestResize:
    """Tests for resize function."""

    def test_resize_plain(self, test_canvas):
        """Test plain resize ignores the aspect ratio."""
        result = resize(test_canvas, ResizeMode.RESIZE, Dimensions(x=100, y=100))
        assert result.size == (100, 100)

    def test_resize_derived_axis(self, test_canvas):
        """Test a zero axis is derived from the aspect ratio."""
        result = resize(test_canvas, ResizeMode.RESIZE, Dimensions(x=200, y=0))
        assert result.size == (200, 150)

    def test_resize_min(self, test_canvas):
        """Test resizemin covers the target box."""
        result = resize(test_canvas, ResizeMode.RESIZE_MIN, Dimensions(x=100, y=100))
        assert result.size == (133, 100)

    def test_resize_crop(self, test_canvas):
        """Test resizecrop ends at exactly the target size."""
        result = resize(test_canvas, ResizeMode.RESIZE_CROP, Dimensions(x=100, y=100))
        assert result.size == (100, 100)

    def test_resize_min_then_crop(self, test_canvas):
        """Test resizemin followed by a centred crop gives a square thumbnail."""
        scaled = resize(test_canvas, ResizeMode.RESIZE_MIN, Dimensions(x=100, y=100))
        result = crop(scaled, CropRect(x=16, y=0, width=100, height=100))
        assert result.size == (100, 100)

    def test_crop_mode_keeps_scale(self, small_canvas):
        """Test the crop policy cuts the centre without resampling."""
        result = resize(small_canvas, ResizeMode.CROP, Dimensions(x=2, y=1))
        assert result.size == (2, 1)
        assert result.get_pixel(0, 0) == small_canvas.get_pixel(1, 1)
        assert result.get_pixel(1, 0) == small_canvas.get_pixel(2, 1)

    def test_crop_mode_oversized_target(self, small_canvas):
        """Test an oversized crop policy target clamps to the whole image."""
        result = resize(small_canvas, ResizeMode.CROP, Dimensions(x=40, y=40))
        assert result == small_canvas

    def test_resize_over_pixel_limit(self, test_canvas):
        """Test scaled sizes above the pixel limit are rejected."""
        with pytest.raises(InvalidGeometryError):
            resize(test_canvas, ResizeMode.RESIZE, Dimensions(x=200, y=200), max_pixels=1000)

    def test_resize_invalid_target(self, test_canvas):
        """Test a 0x0 target is rejected."""
        with pytest.raises(InvalidGeometryError):
            resize(test_canvas, ResizeMode.RESIZE, Dimensions(x=0, y=0))

    def test_source_untouched(self, test_canvas):
        """Test the input canvas is not modified."""
        before = test_canvas.copy()
        resize(test_canvas, ResizeMode.RESIZE_CROP, Dimensions(x=10, y=10))
        assert test_canvas == before


class TestCrop:
    """Tests for crop function."""

    def test_crop_region(self, small_canvas):
        """Test cropping copies the exact pixels."""
        result = crop(small_canvas, CropRect(x=1, y=1, width=2, height=2))

        assert result.size == (2, 2)
        assert result.get_pixel(0, 0) == small_canvas.get_pixel(1, 1)
        assert result.get_pixel(1, 1) == small_canvas.get_pixel(2, 2)

    def test_crop_clamped(self, test_canvas):
        """Test a rectangle past the edges is clamped."""
        result = crop(test_canvas, CropRect(x=350, y=250, width=100, height=100))
        assert result.size == (50, 50)

    def test_crop_outside(self, test_canvas):
        """Test a rectangle outside the image fails."""
        with pytest.raises(EmptyRegionError):
            crop(test_canvas, CropRect(x=1000, y=1000, width=10, height=10))

    def test_crop_does_not_share_memory(self, small_canvas):
        """Test the cropped canvas owns its pixels."""
        result = crop(small_canvas, CropRect(x=0, y=0, width=2, height=2))
        result.set_pixel(0, 0, (1, 1, 1, 1))
        assert small_canvas.get_pixel(0, 0) != (1, 1, 1, 1)


class TestRotate:
    """Tests for rotate function."""

    @pytest.mark.parametrize("degrees", [0, 360, -360, 720])
    def test_full_turns_are_identity(self, small_canvas, degrees):
        """Test multiples of 360 leave the image unchanged."""
        assert rotate(small_canvas, degrees) == small_canvas

    def test_rotate_90_counter_clockwise(self, small_canvas):
        """Test a quarter turn is an exact counter-clockwise permutation."""
        result = rotate(small_canvas, 90)

        assert result.size == (3, 4)
        # Top-right corner moves to the top-left
        assert result.get_pixel(0, 0) == small_canvas.get_pixel(3, 0)
        # Bottom-left corner moves to the bottom-right
        assert result.get_pixel(2, 3) == small_canvas.get_pixel(0, 2)

    def test_rotate_180(self, small_canvas):
        """Test a half turn swaps opposite corners."""
        result = rotate(small_canvas, 180)
        assert result.size == small_canvas.size
        assert result.get_pixel(0, 0) == small_canvas.get_pixel(3, 2)

    def test_rotate_minus_90_equals_270(self, small_canvas):
        """Test negative angles are normalized."""
        assert rotate(small_canvas, -90) == rotate(small_canvas, 270)

    def test_four_quarter_turns(self, small_canvas):
        """Test four quarter turns return the original image."""
        result = small_canvas
        for _ in range(4):
            result = rotate(result, 90)
        assert result == small_canvas

    def test_rotate_45_grows_canvas(self):
        """Test arbitrary angles grow the canvas to the bounding box."""
        canvas = Canvas.blank(100, 100, (200, 100, 50, 255))
        result = rotate(canvas, 45)

        assert result.size == (142, 142)
        # Centre is still covered by the source
        assert result.get_pixel(71, 71) == (200, 100, 50, 255)

    def test_rotate_transparent_background(self):
        """Test uncovered corners stay fully transparent."""
        canvas = Canvas.blank(100, 100, (200, 100, 50, 255))
        result = rotate(canvas, 45)
        assert result.get_pixel(0, 0)[3] == 0
        assert not result.is_opaque

    def test_rotate_transparent_edges_keep_colour(self):
        """Test partially transparent edge pixels are not darkened."""
        canvas = Canvas.blank(40, 40, (255, 255, 255, 255))
        result = rotate(canvas, 30)

        alpha = result.pixels[:, :, 3]
        partial = (alpha > 0) & (alpha < 255)
        assert partial.any()
        assert np.all(result.pixels[alpha > 0][:, :3] == 255)

    def test_rotate_non_finite(self, small_canvas):
        """Test infinite and NaN angles are rejected."""
        for degrees in (float("inf"), float("nan")):
            with pytest.raises(InvalidGeometryError):
                rotate(small_canvas, degrees)

    def test_rotate_coloured_background(self):
        """Test uncovered corners take the background colour."""
        canvas = Canvas.blank(100, 100, (200, 100, 50, 255))
        result = rotate(canvas, 30, background=(0, 255, 0, 255))
        assert result.get_pixel(0, 0) == (0, 255, 0, 255)
        assert result.is_opaque

    def test_rotate_back_restores_interior(self):
        """Test rotating by an angle and back approximately restores the centre."""
        canvas = Canvas.blank(60, 40, (120, 60, 30, 255))
        canvas.pixels[15:25, 25:35] = (250, 250, 250, 255)

        result = rotate(rotate(canvas, 30), -30)
        cx, cy = result.width // 2, result.height // 2

        centre = result.pixels[cy - 2 : cy + 2, cx - 2 : cx + 2].astype(int)
        assert np.all(np.abs(centre - (250, 250, 250, 255)) <= 8)


class TestFlip:
    """Tests for flip function."""

    def test_flip_horizontal(self, small_canvas):
        """Test horizontal flip mirrors columns."""
        result = flip(small_canvas, FlipAxis.HORIZONTAL)
        assert result.get_pixel(0, 0) == small_canvas.get_pixel(3, 0)
        assert result.get_pixel(3, 2) == small_canvas.get_pixel(0, 2)

    def test_flip_vertical(self, small_canvas):
        """Test vertical flip mirrors rows."""
        result = flip(small_canvas, "vertical")
        assert result.get_pixel(0, 0) == small_canvas.get_pixel(0, 2)

    def test_flip_both(self, small_canvas):
        """Test flipping both axes equals a half turn."""
        assert flip(small_canvas, FlipAxis.BOTH) == rotate(small_canvas, 180)

    @pytest.mark.parametrize("axis", list(FlipAxis))
    def test_double_flip_is_identity(self, small_canvas, axis):
        """Test flipping twice restores the image."""
        assert flip(flip(small_canvas, axis), axis) == small_canvas

    def test_flip_invalid_axis(self, small_canvas):
        """Test unknown axes are rejected."""
        with pytest.raises(ValueError):
            flip(small_canvas, "diagonal")
