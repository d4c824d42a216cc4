"""
Tests for colour parsing.
"""

import pytest

from watimage.core.image.colors import TRANSPARENT, is_transparent, parse_color


class TestParseColor:
    """Tests for parse_color function."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("transparent", TRANSPARENT),
            (None, TRANSPARENT),
            (-1, TRANSPARENT),
            ("#ffffff", (255, 255, 255, 255)),
            ("00FF00", (0, 255, 0, 255)),
            ("#f00", (255, 0, 0, 255)),
            ("#11223344", (0x11, 0x22, 0x33, 0x44)),
            (0x102030, (0x10, 0x20, 0x30, 255)),
            ((1, 2, 3), (1, 2, 3, 255)),
            ([1, 2, 3, 4], (1, 2, 3, 4)),
            ("White", (255, 255, 255, 255)),
        ],
    )
    def test_valid(self, value, expected):
        assert parse_color(value) == expected

    @pytest.mark.parametrize(
        "value", ["#12", "#gggggg", 0x1000000, (1, 2), (0, 0, 256), True, 1.5]
    )
    def test_invalid(self, value):
        with pytest.raises(ValueError):
            parse_color(value)

    def test_is_transparent(self):
        assert is_transparent(TRANSPARENT)
        assert not is_transparent((0, 0, 0, 255))
