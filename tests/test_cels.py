"""
Tests for cel addressing, cel payloads and the color guards.

Run with: pytest tests/test_cels.py -v
"""

import pytest

from pixelforge.cels import (
    CelKey,
    ImageCel,
    LinkedCel,
    ShapeCel,
    TilemapCel,
    cel_from_dict,
    pack_cel_key,
    parse_cel_key,
)
from pixelforge.colors import is_valid_color, is_valid_palette_index, require_color, require_palette_index
from pixelforge.exceptions import (
    ColorOutOfRangeError,
    InvalidArgumentError,
    InvalidColorError,
    PaletteIndexOutOfRangeError,
)


class TestCelKeys:
    """Tests for packing and parsing cel keys."""

    def test_pack_and_parse(self):
        """A packed key parses back to the same pair."""
        key = pack_cel_key(3, 12)
        assert key == '3/12'
        assert parse_cel_key(key) == CelKey(layer_id=3, frame_index=12)

    @pytest.mark.parametrize('key', ['1/2/3', '1', '1/', '/2', 'a/1', '1/-2', ' 1/2', '1.0/2', '', '١/2'])
    def test_malformed_keys_do_not_parse(self, key):
        """Anything but two ASCII decimal segments is rejected."""
        assert parse_cel_key(key) is None

    def test_non_string_does_not_parse(self):
        """Only strings are cel keys."""
        assert parse_cel_key(12) is None
        assert parse_cel_key(None) is None

    def test_leading_zero_parses_but_does_not_round_trip(self):
        """'01/2' parses, yet packing gives a different key."""
        parsed = parse_cel_key('01/2')
        assert parsed == (1, 2)
        assert pack_cel_key(*parsed) != '01/2'


class TestCelPayloads:
    """Tests for cel variants and their deserialization."""

    def test_image_cel(self):
        """Image cels keep their offset and rows."""
        cel = cel_from_dict({'x': 2, 'y': 1, 'data': [[0, 1], [2, 3]]})
        assert isinstance(cel, ImageCel)
        assert (cel.width, cel.height) == (2, 2)
        assert cel.pixel_at(3, 2) == 3
        assert cel.pixel_at(0, 0) is None

    def test_tilemap_cel(self):
        """-1 marks an empty tile."""
        cel = cel_from_dict({'grid': [[-1, 0], [4, 4]]})
        assert isinstance(cel, TilemapCel)

    def test_shape_cel(self):
        """Shapes are parsed by their type."""
        cel = cel_from_dict({'shapes': [{'type': 'rect', 'name': 'hit', 'x': 0, 'y': 0, 'width': 2, 'height': 2}]})
        assert isinstance(cel, ShapeCel)
        assert cel.find('hit') == 0
        assert cel.find('missing') == -1

    def test_linked_cel(self):
        """Links expose their parsed target."""
        cel = cel_from_dict({'link': '1/0'})
        assert isinstance(cel, LinkedCel)
        assert cel.target == (1, 0)

    def test_empty_payload_rejected(self):
        """A cel needs one payload key."""
        with pytest.raises(InvalidArgumentError):
            cel_from_dict({'x': 0, 'y': 0})

    def test_ambiguous_payload_rejected(self):
        """Two payload keys cannot be told apart."""
        with pytest.raises(InvalidArgumentError, match='ambiguous'):
            cel_from_dict({'data': [[0]], 'link': '1/0'})

    def test_out_of_range_index_rejected(self):
        """Image data holds palette indices only."""
        with pytest.raises(InvalidArgumentError):
            cel_from_dict({'x': 0, 'y': 0, 'data': [[0, 256]]})

    def test_ragged_rows_rejected(self):
        """Rows of a grid must have one length."""
        with pytest.raises(InvalidArgumentError):
            cel_from_dict({'data': [[0, 1], [1]]})

    def test_invalid_link_rejected(self):
        """Links must be cel keys."""
        with pytest.raises(InvalidArgumentError):
            cel_from_dict({'link': 'layer-1'})

    def test_serialization_keeps_payload_key(self):
        """to_dict writes the same shape from_dict reads."""
        data = {'x': 1, 'y': 0, 'data': [[1, 2]]}
        assert cel_from_dict(data).to_dict() == data


class TestColorGuards:
    """Tests for palette index and color predicates."""

    @pytest.mark.parametrize('value,expected', [
        (0, True), (255, True), (256, False), (-1, False), (1.0, False), (True, False), ('1', False),
    ])
    def test_palette_index(self, value, expected):
        """Palette indices are integers 0-255; booleans are not integers here."""
        assert is_valid_palette_index(value) is expected

    @pytest.mark.parametrize('value,expected', [
        ((0, 0, 0, 0), True),
        ([255, 128, 0, 255], True),
        ((0, 0, 0), False),
        ((0, 0, 0, 256), False),
        ((0, 0, 0, True), False),
        ('abcd', False),
    ])
    def test_color(self, value, expected):
        """Colors are four channels 0-255."""
        assert is_valid_color(value) is expected

    def test_require_palette_index(self):
        """Out-of-range indices raise with the offending value."""
        with pytest.raises(PaletteIndexOutOfRangeError) as exc_info:
            require_palette_index(300)
        assert exc_info.value.index == 300

    def test_require_color_distinguishes_shape_and_range(self):
        """Wrong shape and wrong range are different errors."""
        with pytest.raises(InvalidColorError):
            require_color((1, 2, 3))
        with pytest.raises(ColorOutOfRangeError):
            require_color((1, 2, 3, 999))
        assert require_color([1, 2, 3, 4]) == (1, 2, 3, 4)
