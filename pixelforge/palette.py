"""
Palette - Indexed color table for an asset.

A palette holds 256 slots. Each slot is either an RGBA tuple or unset; unset
slots read as transparent black. Serialized form is a list of
``[r, g, b, a]`` entries with ``None`` marking unset slots:

    [[0, 0, 0, 0], [255, 0, 0, 255], null, [0, 0, 255, 255]]

Trailing unset slots are trimmed on serialization.
"""

import logging
from typing import Any, Iterable, Optional

from pixelforge.colors import MAX_COLORS, TRANSPARENT, Color, require_color, require_palette_index
from pixelforge.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)


class Palette:
    """Fixed-capacity indexed color table."""

    def __init__(self):
        self._colors: list[Optional[Color]] = [None] * MAX_COLORS

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Palette):
            return NotImplemented
        return self._colors == other._colors

    def get(self, index: int) -> Color:
        """
        Get the color at an index.

        Args:
            index: Palette index (0-255)

        Returns:
            The stored color, or transparent black if the slot is unset
        """
        require_palette_index(index)
        color = self._colors[index]
        return TRANSPARENT if color is None else color

    def is_set(self, index: int) -> bool:
        """Check whether a slot holds a color."""
        require_palette_index(index)
        return self._colors[index] is not None

    def set(self, index: int, color: Iterable[int]) -> None:
        """
        Overwrite a slot.

        Args:
            index: Palette index (0-255)
            color: RGBA color, each channel 0-255
        """
        require_palette_index(index)
        self._colors[index] = require_color(_as_sequence(color))

    def set_bulk(self, entries: Iterable[tuple[int, Iterable[int]]]) -> None:
        """
        Apply several index/color pairs as one unit.

        Every entry is validated before any slot is written, so a bad entry
        leaves the palette untouched.
        """
        validated = []
        for index, color in entries:
            require_palette_index(index)
            validated.append((index, require_color(_as_sequence(color))))
        for index, color in validated:
            self._colors[index] = color

    def clear(self, index: int) -> None:
        """Unset a slot."""
        require_palette_index(index)
        self._colors[index] = None

    def swap(self, i: int, j: int) -> None:
        """Exchange two slots."""
        require_palette_index(i)
        require_palette_index(j)
        self._colors[i], self._colors[j] = self._colors[j], self._colors[i]

    def generate_ramp(self, start: int, end: int) -> None:
        """
        Linearly interpolate every slot strictly between two endpoints.

        Both endpoints must hold a color other than transparent black.

        Args:
            start: Lower palette index
            end: Upper palette index, greater than start
        """
        require_palette_index(start)
        require_palette_index(end)
        if start >= end:
            raise InvalidArgumentError(f"Ramp requires start < end, got {start} and {end}")
        first = self.get(start)
        last = self.get(end)
        for index, color in ((start, first), (end, last)):
            if color == TRANSPARENT:
                raise InvalidArgumentError(f"Palette index {index} has no color defined")

        steps = end - start
        for i in range(1, steps):
            t = i / steps
            self._colors[start + i] = tuple(
                int(a + (b - a) * t + 0.5) for a, b in zip(first, last)
            )
        logger.debug("Generated palette ramp %d..%d", start, end)

    def to_list(self) -> list[Optional[list[int]]]:
        """Serialize to a list of ``[r, g, b, a]`` or ``None`` entries."""
        data = [list(color) if color is not None else None for color in self._colors]
        while data and data[-1] is None:
            data.pop()
        return data

    @classmethod
    def from_list(cls, data: Iterable[Any]) -> 'Palette':
        """
        Create a palette from its serialized list.

        Raises:
            InvalidArgumentError: If there are more than 256 entries
            InvalidColorError: If an entry is neither ``None`` nor a color
        """
        palette = cls()
        palette.restore(data)
        return palette

    def restore(self, data: Iterable[Any]) -> None:
        """Replace every slot from a serialized list, validating first."""
        entries = list(data)
        if len(entries) > MAX_COLORS:
            raise InvalidArgumentError(
                f"Palette has {len(entries)} entries; at most {MAX_COLORS} are allowed"
            )
        colors: list[Optional[Color]] = [None] * MAX_COLORS
        for i, entry in enumerate(entries):
            if entry is not None:
                colors[i] = require_color(entry)
        self._colors = colors

    def to_file_dict(self, name: str) -> dict[str, Any]:
        """Serialize to the palette-file shape ``{name, colors}``."""
        return {'name': name, 'colors': self.to_list()}

    @classmethod
    def from_file_dict(cls, data: dict[str, Any]) -> tuple[str, 'Palette']:
        """
        Parse the palette-file shape.

        Returns:
            Tuple of (palette name, palette)
        """
        if not isinstance(data, dict) or not isinstance(data.get('name'), str):
            raise InvalidArgumentError("Palette file requires a string 'name'")
        colors = data.get('colors')
        if not isinstance(colors, list):
            raise InvalidArgumentError("Palette file requires a 'colors' list")
        return data['name'], cls.from_list(colors)


def _as_sequence(color: Any) -> Any:
    # Accept any iterable of channels but keep non-iterables for the error path
    if isinstance(color, (list, tuple)):
        return color
    try:
        return tuple(color)
    except TypeError:
        return color
