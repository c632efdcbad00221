"""
Layer Models

Pydantic models for the layers and frames of an asset.

Layer Hierarchy:
    BaseLayer
    ├── ImageLayer (type: 'image')
    ├── TilemapLayer (type: 'tilemap')
    ├── ShapeLayer (type: 'shape')
    └── LayerGroup (type: 'group')
"""

from typing import Any, Union

from pydantic import ValidationError

from pixelforge.exceptions import InvalidArgumentError

from .base import BaseLayer, LayerType
from .frame import Frame
from .image_layer import ImageLayer
from .layer_group import LayerGroup
from .shape_layer import ShapeLayer
from .tilemap_layer import TilemapLayer

Layer = Union[ImageLayer, TilemapLayer, ShapeLayer, LayerGroup]

# Layer type registry for deserialization
_LAYER_REGISTRY: dict[str, type[BaseLayer]] = {
    'image': ImageLayer,
    'tilemap': TilemapLayer,
    'shape': ShapeLayer,
    'group': LayerGroup,
}


def get_layer_class(layer_type: str) -> type[BaseLayer]:
    """
    Get the layer class for a layer type.

    Args:
        layer_type: Layer type string ('image', 'tilemap', 'shape', 'group')

    Returns:
        Layer class

    Raises:
        InvalidArgumentError: For an unknown layer type
    """
    if isinstance(layer_type, LayerType):
        layer_type = layer_type.value
    layer_class = _LAYER_REGISTRY.get(layer_type)
    if layer_class is None:
        raise InvalidArgumentError(f"Unknown layer type {layer_type!r}")
    return layer_class


def layer_from_dict(data: Any) -> BaseLayer:
    """
    Create a layer instance from a serialized dictionary.

    Automatically determines the layer type and uses the appropriate class.

    Args:
        data: Serialized layer data

    Returns:
        Layer instance of the appropriate type
    """
    if not isinstance(data, dict):
        raise InvalidArgumentError(f"Layer must be an object, got {type(data).__name__}")
    layer_class = get_layer_class(data.get('type'))
    try:
        return layer_class.model_validate(data)
    except ValidationError as exc:
        raise InvalidArgumentError(f"Invalid {layer_class.__name__}: {exc}") from exc


__all__ = [
    'BaseLayer',
    'LayerType',
    'Layer',
    'Frame',
    'ImageLayer',
    'TilemapLayer',
    'ShapeLayer',
    'LayerGroup',
    'get_layer_class',
    'layer_from_dict',
]
