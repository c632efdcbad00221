"""Session data models."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class SelectionMask:
    """Selected pixels of one cel, stored as a mask over a bounding box."""

    asset_name: str
    layer_id: int
    frame_index: int
    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0
    # mask[row][col] covers canvas pixel (x + col, y + row)
    mask: list[list[bool]] = field(default_factory=list)

    @classmethod
    def rect(cls, asset_name: str, layer_id: int, frame_index: int,
             x: int, y: int, width: int, height: int) -> 'SelectionMask':
        """Fully selected rectangle."""
        return cls(
            asset_name=asset_name,
            layer_id=layer_id,
            frame_index=frame_index,
            x=x,
            y=y,
            width=width,
            height=height,
            mask=[[True] * width for _ in range(height)],
        )

    def targets(self, asset_name: str, layer_id: int, frame_index: int) -> bool:
        """Whether this selection belongs to a specific cel."""
        return (
            self.asset_name == asset_name
            and self.layer_id == layer_id
            and self.frame_index == frame_index
        )

    def contains(self, x: int, y: int) -> bool:
        col = x - self.x
        row = y - self.y
        if not (0 <= row < self.height and 0 <= col < self.width):
            return False
        return bool(self.mask[row][col])

    @property
    def pixel_count(self) -> int:
        return sum(sum(1 for selected in row if selected) for row in self.mask)

    def to_summary(self) -> dict[str, Any]:
        """Get summary dict for session info."""
        return {
            "asset_name": self.asset_name,
            "layer_id": self.layer_id,
            "frame_index": self.frame_index,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class ClipboardData:
    """Rectangular block of palette indices plus where it was copied from."""

    data: list[list[int]]
    width: int
    height: int
    origin_x: int = 0
    origin_y: int = 0

    def to_summary(self) -> dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "origin_x": self.origin_x,
            "origin_y": self.origin_y,
        }
