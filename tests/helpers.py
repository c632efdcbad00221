"""Builders shared by the test modules."""

from pixelforge.asset import Asset
from pixelforge.cels import ImageCel

# Index 0 transparent, then red, green, blue
TEST_PALETTE = [
    [0, 0, 0, 0],
    [255, 0, 0, 255],
    [0, 255, 0, 255],
    [0, 0, 255, 255],
]


def make_asset(name: str = 'hero', width: int = 8, height: int = 8, frames: int = 1) -> Asset:
    """Scaffolded asset with a clean dirty flag."""
    asset = Asset.scaffold(
        name, width, height,
        palette=TEST_PALETTE,
        frame_durations=[100] * frames,
    )
    asset.serialize_for_save()
    return asset


def gradient_cel(width: int = 8, height: int = 8) -> ImageCel:
    """Full-canvas cel whose every pixel holds a distinct index."""
    return ImageCel(x=0, y=0, data=[[row * width + col for col in range(width)] for row in range(height)])
