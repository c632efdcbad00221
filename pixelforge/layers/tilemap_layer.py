"""TilemapLayer - Layer whose cels hold tile-index grids."""

from typing import ClassVar, Literal, Optional

from pydantic import Field

from .base import BaseLayer


class TilemapLayer(BaseLayer):
    """Tilemap layer; cels reference tiles of the asset's tileset."""

    CEL_KIND: ClassVar[Optional[str]] = 'tilemap'
    layer_type: Literal["tilemap"] = Field(default="tilemap", alias="type")
