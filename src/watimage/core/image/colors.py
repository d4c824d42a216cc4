"""
Colour parsing for rotation backgrounds and the JPEG matte.

Accepted inputs:
- "transparent", None or -1 (fully transparent)
- "#rgb", "#rrggbb", "#rrggbbaa" (with or without the leading #)
- packed 0xRRGGBB integers
- (r, g, b) and (r, g, b, a) sequences
"""

from typing import Any

from watimage.core.canvas import RGBA


TRANSPARENT: RGBA = (0, 0, 0, 0)

NAMED_COLORS = {
    "transparent": TRANSPARENT,
    "black": (0, 0, 0, 255),
    "white": (255, 255, 255, 255),
    "red": (255, 0, 0, 255),
    "green": (0, 128, 0, 255),
    "blue": (0, 0, 255, 255),
}


def parse_color(value: Any) -> RGBA:
    """
    Parse a colour value into an RGBA tuple.

    Args:
        value: Colour in any of the accepted forms

    Returns:
        (r, g, b, a) with every channel in 0-255

    Raises:
        ValueError: If the value is not a recognisable colour
    """
    if value is None:
        return TRANSPARENT

    if isinstance(value, bool):
        raise ValueError(f"Invalid colour: {value!r}")

    if isinstance(value, int):
        if value == -1:
            return TRANSPARENT
        if not 0 <= value <= 0xFFFFFF:
            raise ValueError(f"Invalid packed colour: {value}")
        return (value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF, 255

    if isinstance(value, str):
        return _parse_color_string(value)

    if isinstance(value, (list, tuple)) and len(value) in (3, 4):
        channels = [int(channel) for channel in value]
        if any(channel < 0 or channel > 255 for channel in channels):
            raise ValueError(f"Colour channels must be 0-255: {value!r}")
        if len(channels) == 3:
            channels.append(255)
        return tuple(channels)

    raise ValueError(f"Invalid colour: {value!r}")


def _parse_color_string(value: str) -> RGBA:
    text = value.strip().lower()
    if text in NAMED_COLORS:
        return NAMED_COLORS[text]

    hex_digits = text[1:] if text.startswith("#") else text
    if len(hex_digits) == 3:
        hex_digits = "".join(digit * 2 for digit in hex_digits)

    if len(hex_digits) not in (6, 8):
        raise ValueError(f"Invalid colour: {value!r}")

    try:
        channels = [int(hex_digits[i : i + 2], 16) for i in range(0, len(hex_digits), 2)]
    except ValueError:
        raise ValueError(f"Invalid colour: {value!r}")

    if len(channels) == 3:
        channels.append(255)
    return tuple(channels)


def is_transparent(color: RGBA) -> bool:
    return color[3] == 0
