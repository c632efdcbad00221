"""
Cels - The content at one (layer, frame) intersection.

Cels are stored in an asset under string keys of the form
``"<layerId>/<frameIndex>"``. A cel is one of four variants, told apart by
the single payload key it carries:

    image    {"x": 0, "y": 0, "data": [[0, 1], [1, 0]]}   palette indices [y][x]
    tilemap  {"grid": [[-1, 3], [4, 4]]}                   tile indices, -1 = empty
    shape    {"shapes": [{"type": "rect", ...}]}
    link     {"link": "1/0"}                               another cel on the same layer
"""

import re
from typing import Any, ClassVar, NamedTuple, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from pixelforge.colors import is_valid_palette_index
from pixelforge.exceptions import InvalidArgumentError
from pixelforge.shapes import PolygonShape, RectShape

_KEY_SEGMENT = re.compile(r'[0-9]+')


class CelKey(NamedTuple):
    """Parsed cel key."""

    layer_id: int
    frame_index: int


def pack_cel_key(layer_id: int, frame_index: int) -> str:
    """Build the cel key for a layer id and frame index."""
    return f"{layer_id}/{frame_index}"


def parse_cel_key(key: Any) -> Optional[CelKey]:
    """
    Split a cel key into its layer id and frame index.

    Returns:
        CelKey, or None if the key is not exactly two decimal segments
    """
    if not isinstance(key, str):
        return None
    parts = key.split('/')
    if len(parts) != 2:
        return None
    if not all(_KEY_SEGMENT.fullmatch(part) for part in parts):
        return None
    return CelKey(int(parts[0]), int(parts[1]))


def _require_rectangular(rows: list[list[int]]) -> list[list[int]]:
    if rows and any(len(row) != len(rows[0]) for row in rows):
        raise ValueError('all rows must have the same length')
    return rows


class BaseCel(BaseModel):
    """Common configuration for every cel variant."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra='forbid',
    )

    # Payload key that identifies the variant
    PAYLOAD: ClassVar[str] = ''
    KIND: ClassVar[str] = ''

    def to_dict(self) -> dict[str, Any]:
        """Serialize using JSON field names."""
        return self.model_dump(by_alias=True, mode='json')


class ImageCel(BaseCel):
    """Indexed pixel grid placed at an offset on the canvas."""

    PAYLOAD: ClassVar[str] = 'data'
    KIND: ClassVar[str] = 'image'

    x: int = 0
    y: int = 0
    data: list[list[int]] = Field(default_factory=list)

    @field_validator('data')
    @classmethod
    def _check_data(cls, rows: list[list[int]]) -> list[list[int]]:
        _require_rectangular(rows)
        for row in rows:
            for value in row:
                if not is_valid_palette_index(value):
                    raise ValueError(f'palette index {value} is out of range (0-255)')
        return rows

    @property
    def width(self) -> int:
        return len(self.data[0]) if self.data else 0

    @property
    def height(self) -> int:
        return len(self.data)

    def pixel_at(self, x: int, y: int) -> Optional[int]:
        """Palette index at canvas coordinates, or None outside the grid."""
        col = x - self.x
        row = y - self.y
        if 0 <= row < self.height and 0 <= col < self.width:
            return self.data[row][col]
        return None


class TilemapCel(BaseCel):
    """Grid of tile indices aligned to the asset's tile grid."""

    PAYLOAD: ClassVar[str] = 'grid'
    KIND: ClassVar[str] = 'tilemap'

    grid: list[list[int]] = Field(default_factory=list)

    @field_validator('grid')
    @classmethod
    def _check_grid(cls, rows: list[list[int]]) -> list[list[int]]:
        _require_rectangular(rows)
        for row in rows:
            for value in row:
                if value < -1:
                    raise ValueError(f'tile index {value} is invalid; use -1 for empty')
        return rows


class ShapeCel(BaseCel):
    """Collision shapes for a shape layer."""

    PAYLOAD: ClassVar[str] = 'shapes'
    KIND: ClassVar[str] = 'shape'

    shapes: list[Union[RectShape, PolygonShape]] = Field(default_factory=list)

    def find(self, name: str) -> int:
        """Index of the shape with a name, or -1."""
        for i, shape in enumerate(self.shapes):
            if shape.name == name:
                return i
        return -1


class LinkedCel(BaseCel):
    """Reference to another cel's key."""

    PAYLOAD: ClassVar[str] = 'link'
    KIND: ClassVar[str] = 'link'

    link: str

    @field_validator('link')
    @classmethod
    def _check_link(cls, link: str) -> str:
        if parse_cel_key(link) is None:
            raise ValueError(f'link {link!r} is not a valid cel key')
        return link

    @property
    def target(self) -> CelKey:
        return parse_cel_key(self.link)


Cel = Union[ImageCel, TilemapCel, ShapeCel, LinkedCel]

_CEL_PAYLOADS: dict[str, type[BaseCel]] = {
    cel_class.PAYLOAD: cel_class for cel_class in (ImageCel, TilemapCel, ShapeCel, LinkedCel)
}


def cel_from_dict(data: Any) -> Cel:
    """
    Create a cel from its serialized dictionary.

    Exactly one payload key (data, grid, shapes, link) must be present.

    Raises:
        InvalidArgumentError: For empty, ambiguous or malformed payloads
    """
    if not isinstance(data, dict):
        raise InvalidArgumentError(f"Cel must be an object, got {type(data).__name__}")
    present = [key for key in _CEL_PAYLOADS if key in data]
    if not present:
        raise InvalidArgumentError("Cel has no payload; expected one of data, grid, shapes, link")
    if len(present) > 1:
        raise InvalidArgumentError(f"Cel payload is ambiguous: {', '.join(present)}")
    cel_class = _CEL_PAYLOADS[present[0]]
    try:
        return cel_class.model_validate(data)
    except ValidationError as exc:
        raise InvalidArgumentError(f"Invalid {cel_class.KIND} cel: {exc}") from exc


def copy_cel(cel: Cel) -> Cel:
    """Deep copy of a cel."""
    return cel.model_copy(deep=True)
