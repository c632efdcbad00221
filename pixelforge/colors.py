"""
Color and palette-index guards.

All pixel data stores palette indices rather than raw RGBA values. These
predicates are shared by the palette, the cel models and the drawing
operations, so they live apart from any single entity.
"""

from typing import Any

from pixelforge.exceptions import (
    ColorOutOfRangeError,
    InvalidColorError,
    PaletteIndexOutOfRangeError,
)

Color = tuple[int, int, int, int]

MAX_COLORS = 256
TRANSPARENT: Color = (0, 0, 0, 0)


def _is_int(value: Any) -> bool:
    # bool is an int subclass but never a valid channel or index
    return isinstance(value, int) and not isinstance(value, bool)


def is_valid_channel(value: Any) -> bool:
    """Return True for an 8-bit color channel (integer 0-255)."""
    return _is_int(value) and 0 <= value <= 255


def is_valid_palette_index(value: Any) -> bool:
    """Return True for a palette index (integer 0-255)."""
    return _is_int(value) and 0 <= value < MAX_COLORS


def is_valid_color(value: Any) -> bool:
    """Return True for a 4-element RGBA sequence with channels 0-255."""
    if not isinstance(value, (list, tuple)) or len(value) != 4:
        return False
    return all(is_valid_channel(channel) for channel in value)


def require_palette_index(value: Any) -> int:
    """
    Validate a palette index.

    Raises:
        PaletteIndexOutOfRangeError: If the value is not an integer 0-255
    """
    if not is_valid_palette_index(value):
        raise PaletteIndexOutOfRangeError(value)
    return value


def require_color(value: Any) -> Color:
    """
    Validate an RGBA color and return it as a tuple.

    Raises:
        InvalidColorError: If the value is not a 4-sequence of integers
        ColorOutOfRangeError: If a channel falls outside 0-255
    """
    if not isinstance(value, (list, tuple)) or len(value) != 4:
        raise InvalidColorError(value)
    if not all(_is_int(channel) for channel in value):
        raise InvalidColorError(value)
    if not all(is_valid_channel(channel) for channel in value):
        raise ColorOutOfRangeError(value)
    return tuple(value)
