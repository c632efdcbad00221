"""
Tests for the indexed palette.

Run with: pytest tests/test_palette.py -v
"""

import pytest

from pixelforge.exceptions import (
    ColorOutOfRangeError,
    InvalidArgumentError,
    InvalidColorError,
    PaletteIndexOutOfRangeError,
)
from pixelforge.palette import Palette


@pytest.fixture
def palette():
    return Palette.from_list([[0, 0, 0, 0], [255, 0, 0, 255]])


class TestPaletteAccess:
    """Tests for get/set/clear/swap."""

    def test_unset_slot_reads_transparent(self, palette):
        """Unset slots read as transparent black."""
        assert palette.get(200) == (0, 0, 0, 0)
        assert not palette.is_set(200)

    def test_set_and_get(self, palette):
        """A set color comes back as a tuple."""
        palette.set(5, [10, 20, 30, 255])
        assert palette.get(5) == (10, 20, 30, 255)

    def test_set_rejects_bad_index(self, palette):
        """Indices outside 0-255 raise."""
        with pytest.raises(PaletteIndexOutOfRangeError):
            palette.set(256, (0, 0, 0, 255))

    def test_set_rejects_bad_color(self, palette):
        """Channel range and shape are both checked."""
        with pytest.raises(ColorOutOfRangeError):
            palette.set(2, (0, 0, 0, 300))
        with pytest.raises(InvalidColorError):
            palette.set(2, (0, 0, True, 255))

    def test_set_bulk_is_all_or_nothing(self, palette):
        """One bad entry leaves every slot untouched."""
        before = palette.to_list()
        with pytest.raises(ColorOutOfRangeError):
            palette.set_bulk([(2, (1, 1, 1, 255)), (3, (1, 1, 1, -1))])
        assert palette.to_list() == before

    def test_swap(self, palette):
        """Swapping exchanges set and unset slots alike."""
        palette.swap(1, 7)
        assert palette.get(7) == (255, 0, 0, 255)
        assert not palette.is_set(1)

    def test_clear(self, palette):
        """Cleared slots become unset."""
        palette.clear(1)
        assert not palette.is_set(1)


class TestPaletteRamp:
    """Tests for generate_ramp."""

    def test_ramp_interpolates_between_endpoints(self):
        """Inner slots are linear blends, rounded half up."""
        palette = Palette()
        palette.set(0, (0, 0, 0, 255))
        palette.set(4, (100, 200, 40, 255))
        palette.generate_ramp(0, 4)
        assert palette.get(1) == (25, 50, 10, 255)
        assert palette.get(2) == (50, 100, 20, 255)
        assert palette.get(3) == (75, 150, 30, 255)
        assert palette.get(4) == (100, 200, 40, 255)

    def test_ramp_needs_start_before_end(self):
        """start must be lower than end."""
        palette = Palette()
        with pytest.raises(InvalidArgumentError):
            palette.generate_ramp(4, 4)

    def test_ramp_needs_defined_endpoints(self):
        """Transparent endpoints cannot anchor a ramp."""
        palette = Palette()
        palette.set(4, (1, 2, 3, 255))
        with pytest.raises(InvalidArgumentError, match='no color'):
            palette.generate_ramp(0, 4)


class TestPaletteSerialization:
    """Tests for list and palette-file serialization."""

    def test_trailing_unset_slots_are_trimmed(self):
        """Only slots up to the last set one are written; gaps are None."""
        palette = Palette()
        palette.set(2, (1, 2, 3, 4))
        assert palette.to_list() == [None, None, [1, 2, 3, 4]]

    def test_from_list_rejects_oversized(self):
        """At most 256 entries fit."""
        with pytest.raises(InvalidArgumentError):
            Palette.from_list([None] * 257)

    def test_from_list_validates_entries(self):
        """Entries are colors or None."""
        with pytest.raises(InvalidColorError):
            Palette.from_list([[0, 0, 0]])

    def test_file_dict(self, palette):
        """The palette-file shape carries a name and the color list."""
        data = palette.to_file_dict('warm')
        assert data == {'name': 'warm', 'colors': [[0, 0, 0, 0], [255, 0, 0, 255]]}
        name, loaded = Palette.from_file_dict(data)
        assert name == 'warm'
        assert loaded == palette

    def test_file_dict_requires_name(self):
        """A palette file without a name is invalid."""
        with pytest.raises(InvalidArgumentError):
            Palette.from_file_dict({'colors': []})
