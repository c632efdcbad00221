"""
ShapeLayer - Non-rendered collision geometry.

Stores named rect/polygon shapes per frame for hitboxes, hurtboxes,
navigation regions and similar.
"""

from typing import ClassVar, Literal, Optional

from pydantic import Field

from .base import BaseLayer


class ShapeLayer(BaseLayer):
    """
    Shape layer.

    Serialization adds:
    {
        "type": "shape",
        "role": "hitbox",
        "physics_layer": 1
    }
    """

    CEL_KIND: ClassVar[Optional[str]] = 'shape'
    layer_type: Literal["shape"] = Field(default="shape", alias="type")

    # Free label classifying the purpose, e.g. "hitbox"
    role: str = Field(default='default')
    physics_layer: int = Field(default=1, ge=1, le=32)
