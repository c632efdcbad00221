"""
LayerGroup - Container for organizing layers into folders.

Groups hold no cels. Children point at the group through ``parent_id``; the
layer list itself stays flat.
"""

from typing import Literal

from pydantic import Field

from .base import BaseLayer


class LayerGroup(BaseLayer):
    """Layer group for organizing layers."""

    layer_type: Literal["group"] = Field(default="group", alias="type")

    def is_group(self) -> bool:
        """Check if this is a group layer."""
        return True
