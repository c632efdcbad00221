"""ImageLayer - Layer whose cels hold indexed pixel grids."""

from typing import ClassVar, Literal, Optional

from pydantic import Field

from .base import BaseLayer


class ImageLayer(BaseLayer):
    """Raster layer of palette indices."""

    CEL_KIND: ClassVar[Optional[str]] = 'image'
    layer_type: Literal["image"] = Field(default="image", alias="type")
