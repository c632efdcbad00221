"""
BaseLayer - Base model for all layer types.

Provides shared properties for all layers:
- Identity: id, name, type
- Appearance: opacity (0-255), visible
- Hierarchy: parent_id (id of a group layer, or None at root level)

Uses Pydantic v2; the discriminating ``type`` key is exposed through an alias
so subclasses can narrow it with a Literal.
"""

from enum import Enum
from typing import Any, ClassVar, Optional

from pydantic import BaseModel, ConfigDict, Field


class LayerType(str, Enum):
    """Layer type identifiers."""
    IMAGE = "image"
    TILEMAP = "tilemap"
    SHAPE = "shape"
    GROUP = "group"


class BaseLayer(BaseModel):
    """
    Base model for all layer types.

    Serializes to:
    {
        "id": 1,
        "name": "Layer 1",
        "type": "image",
        "visible": true,
        "opacity": 255,
        "parent_id": 4          // omitted at root level
    }
    """

    model_config = ConfigDict(
        # Allow both field names and aliases on input
        populate_by_name=True,
        validate_assignment=False,
        extra='forbid',
        use_enum_values=True,
    )

    # Cel variant this layer accepts (None = no cels at all)
    CEL_KIND: ClassVar[Optional[str]] = None

    layer_type: str = Field(default='image', alias='type')
    id: int = Field(ge=0)
    name: str = Field(default='Layer')
    visible: bool = Field(default=True)
    opacity: int = Field(default=255, ge=0, le=255)

    # Hierarchy (None = root level)
    parent_id: Optional[int] = Field(default=None)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-ready dictionary.

        Returns:
            Dict using the serialized key names, without unset optionals
        """
        return self.model_dump(by_alias=True, mode='json', exclude_none=True)

    def is_group(self) -> bool:
        """Check if this is a group layer."""
        return False
