"""
Shape models for collision geometry on shape layers.

Serialization format:
    {"type": "rect", "name": "hitbox", "x": 2, "y": 4, "width": 8, "height": 12}
    {"type": "polygon", "name": "feet", "points": [[0, 0], [4, 0], [2, 3]]}
"""

from typing import Any, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pixelforge.exceptions import InvalidArgumentError


class BaseShape(BaseModel):
    """Common fields for every shape."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra='forbid',
    )

    name: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize using JSON field names."""
        return self.model_dump(by_alias=True, mode='json')


class RectShape(BaseShape):
    """Axis-aligned rectangle."""

    TYPE: ClassVar[str] = 'rect'
    shape_type: Literal['rect'] = Field(default='rect', alias='type')

    x: int = 0
    y: int = 0
    width: int = Field(default=0, ge=0)
    height: int = Field(default=0, ge=0)

    def translated(self, dx: int, dy: int) -> 'RectShape':
        """Return a copy moved by (dx, dy)."""
        return self.model_copy(update={'x': self.x + dx, 'y': self.y + dy})


class PolygonShape(BaseShape):
    """Closed polygon given by its ordered vertices."""

    TYPE: ClassVar[str] = 'polygon'
    shape_type: Literal['polygon'] = Field(default='polygon', alias='type')

    points: list[tuple[int, int]] = Field(min_length=3)

    def translated(self, dx: int, dy: int) -> 'PolygonShape':
        """Return a copy moved by (dx, dy)."""
        return self.model_copy(update={'points': [(x + dx, y + dy) for x, y in self.points]})


Shape = Union[RectShape, PolygonShape]

_SHAPE_REGISTRY: dict[str, type[BaseShape]] = {
    'rect': RectShape,
    'polygon': PolygonShape,
}


def shape_from_dict(data: Any) -> Shape:
    """
    Create a shape from its serialized dictionary.

    Raises:
        InvalidArgumentError: For an unknown type or malformed fields
    """
    if not isinstance(data, dict):
        raise InvalidArgumentError(f"Shape must be an object, got {type(data).__name__}")
    shape_class = _SHAPE_REGISTRY.get(data.get('type'))
    if shape_class is None:
        raise InvalidArgumentError(f"Unknown shape type {data.get('type')!r}")
    try:
        return shape_class.model_validate(data)
    except ValidationError as exc:
        raise InvalidArgumentError(f"Invalid {shape_class.TYPE} shape: {exc}") from exc
