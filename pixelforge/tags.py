"""
Tags label ranges of frames (animation sequences) or sets of layers.

Serialization format:
    {"type": "frame", "name": "walk", "start": 0, "end": 3,
     "direction": "forward", "facing": "S"}
    {"type": "layer", "name": "armor", "layers": [2, 3]}
"""

from typing import Any, ClassVar, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from pixelforge.exceptions import InvalidArgumentError

Direction = Literal['forward', 'reverse', 'ping_pong']
Facing = Literal['N', 'NE', 'E', 'SE', 'S', 'SW', 'W', 'NW']


class BaseTag(BaseModel):
    """Common fields for every tag."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra='forbid',
    )

    name: str

    def to_dict(self) -> dict[str, Any]:
        """Serialize using JSON field names, omitting unset optionals."""
        return self.model_dump(by_alias=True, mode='json', exclude_none=True)


class FrameTag(BaseTag):
    """Named inclusive range of frames."""

    TYPE: ClassVar[str] = 'frame'
    tag_type: Literal['frame'] = Field(default='frame', alias='type')

    start: int = Field(ge=0)
    end: int = Field(ge=0)
    direction: Direction = 'forward'
    facing: Optional[Facing] = None

    def matches(self, name: str, facing: Optional[str] = None) -> bool:
        """Whether this tag is addressed by a name and optional facing."""
        if self.name != name:
            return False
        return facing is None or self.facing == facing


class LayerTag(BaseTag):
    """Named set of layer ids."""

    TYPE: ClassVar[str] = 'layer'
    tag_type: Literal['layer'] = Field(default='layer', alias='type')

    layers: list[int] = Field(default_factory=list)

    def matches(self, name: str, facing: Optional[str] = None) -> bool:
        return self.name == name


Tag = Union[FrameTag, LayerTag]

_TAG_REGISTRY: dict[str, type[BaseTag]] = {
    'frame': FrameTag,
    'layer': LayerTag,
}


def tag_from_dict(data: Any) -> Tag:
    """
    Create a tag from its serialized dictionary.

    Raises:
        InvalidArgumentError: For an unknown type or malformed fields
    """
    if not isinstance(data, dict):
        raise InvalidArgumentError(f"Tag must be an object, got {type(data).__name__}")
    tag_class = _TAG_REGISTRY.get(data.get('type'))
    if tag_class is None:
        raise InvalidArgumentError(f"Unknown tag type {data.get('type')!r}")
    try:
        return tag_class.model_validate(data)
    except ValidationError as exc:
        raise InvalidArgumentError(f"Invalid {tag_class.TYPE} tag: {exc}") from exc
