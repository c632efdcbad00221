"""
Drawing operations on image cels.

A ``CelCanvas`` loads one image cel as a full canvas-sized numpy grid of
palette indices, applies any number of drawing operations, and writes the
result back through ``Asset.set_cel``. Coordinates are rounded half-up to
whole pixels and writes outside the canvas are clipped.
When a selection is given, writes outside the selected pixels are clipped
too and region fills treat them as a hard boundary.

Drawing on a linked cel reads the linked content and stores the result as an
independent image cel at the addressed key; the link is replaced.

Example:
    canvas = CelCanvas(asset, layer_id=1, frame_index=0)
    canvas.line(0, 0, 7, 3, color=2)
    canvas.fill(4, 6, color=5)
    canvas.commit()
"""

import logging
from typing import Any, Optional, Protocol, Sequence

import numpy as np

from pixelforge.algorithms import (
    OUT_OF_BOUNDS,
    QuantizeResult,
    bresenham_line,
    fill_spans,
    flood_fill,
    midpoint_circle,
    midpoint_ellipse,
    quantize,
    reframe_grid,
    round_half_up,
)
from pixelforge.asset import Asset
from pixelforge.cels import ImageCel
from pixelforge.colors import MAX_COLORS, require_palette_index
from pixelforge.exceptions import (
    FrameOutOfRangeError,
    InvalidArgumentError,
    LayerNotFoundError,
    TypeMismatchError,
)

logger = logging.getLogger(__name__)


class PixelMask(Protocol):
    """Anything that can say whether a canvas pixel is selected."""

    def contains(self, x: int, y: int) -> bool:
        ...


def _require_block(data: Sequence[Sequence[int]]) -> np.ndarray:
    """Validate a rectangular block of palette indices."""
    rows = [list(row) for row in data]
    if rows and any(len(row) != len(rows[0]) for row in rows):
        raise InvalidArgumentError("Pixel rows must all have the same length")
    for row in rows:
        for value in row:
            require_palette_index(value)
    if not rows or not rows[0]:
        return np.zeros((0, 0), dtype=np.int32)
    return np.asarray(rows, dtype=np.int32)


class CelCanvas:
    """Editable full-canvas view of one image cel."""

    def __init__(self, asset: Asset, layer_id: int, frame_index: int,
                 selection: Optional[PixelMask] = None):
        layer = asset.get_layer(layer_id)
        if layer is None:
            raise LayerNotFoundError(layer_id, asset.name)
        if layer.CEL_KIND != 'image':
            raise TypeMismatchError(
                f"Layer {layer_id} is a {layer.layer_type} layer; drawing needs an image layer",
                expected='image', actual=layer.layer_type,
            )
        if not 0 <= frame_index < asset.frame_count:
            raise FrameOutOfRangeError(frame_index, asset.name, asset.frame_count)

        self.asset = asset
        self.layer_id = layer_id
        self.frame_index = frame_index
        self.selection = selection
        self.width = asset.width
        self.height = asset.height

        cel = asset.get_cel(layer_id, frame_index)
        if cel is None:
            self.pixels = np.zeros((self.height, self.width), dtype=np.int32)
        elif isinstance(cel, ImageCel):
            self.pixels = np.asarray(
                reframe_grid(cel.data, cel.x, cel.y, self.width, self.height), dtype=np.int32
            )
        else:
            raise TypeMismatchError(
                f"Cel {layer_id}/{frame_index} holds {cel.KIND} content",
                expected='image', actual=cel.KIND,
            )

    # ------------------------------------------------------------------
    # Pixel access
    # ------------------------------------------------------------------

    def in_bounds(self, x: float, y: float) -> bool:
        x, y = round_half_up(x), round_half_up(y)
        return 0 <= x < self.width and 0 <= y < self.height

    def writable(self, x: float, y: float) -> bool:
        """Inside the canvas and, if a selection is active, inside it."""
        x, y = round_half_up(x), round_half_up(y)
        if not self.in_bounds(x, y):
            return False
        return self.selection is None or self.selection.contains(x, y)

    def get(self, x: float, y: float) -> Optional[int]:
        """Palette index at (x, y), or None outside the canvas."""
        x, y = round_half_up(x), round_half_up(y)
        if not self.in_bounds(x, y):
            return None
        return int(self.pixels[y, x])

    def put(self, x: float, y: float, color: int) -> bool:
        """Write one pixel; returns False when clipped."""
        x, y = round_half_up(x), round_half_up(y)
        if not self.writable(x, y):
            return False
        self.pixels[y, x] = color
        return True

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def pixel(self, x: float, y: float, color: int) -> int:
        require_palette_index(color)
        return int(self.put(x, y, color))

    def line(self, x0: float, y0: float, x1: float, y1: float, color: int) -> int:
        require_palette_index(color)
        return sum(self.put(x, y, color) for x, y in bresenham_line(x0, y0, x1, y1))

    def rect(self, x: float, y: float, width: float, height: float, color: int, filled: bool = True) -> int:
        """Filled rectangle or one-pixel outline."""
        require_palette_index(color)
        x, y = round_half_up(x), round_half_up(y)
        width, height = round_half_up(width), round_half_up(height)
        if width < 1 or height < 1:
            raise InvalidArgumentError(f"Rectangle size must be positive, got {width}x{height}")
        if filled:
            points = [(px, py) for py in range(y, y + height) for px in range(x, x + width)]
        else:
            right = x + width - 1
            bottom = y + height - 1
            points = {(px, y) for px in range(x, right + 1)} | {(px, bottom) for px in range(x, right + 1)}
            points |= {(x, py) for py in range(y, bottom + 1)} | {(right, py) for py in range(y, bottom + 1)}
        return sum(self.put(px, py, color) for px, py in points)

    def circle(self, x: float, y: float, radius: float, color: int, filled: bool = False) -> int:
        """Midpoint circle outline, or the disc it encloses."""
        require_palette_index(color)
        points = midpoint_circle(x, y, radius)
        if filled:
            points = fill_spans(points)
        return sum(self.put(px, py, color) for px, py in points)

    def ellipse(self, x: float, y: float, radius_x: float, radius_y: float, color: int,
                filled: bool = False) -> int:
        """
        Axis-aligned midpoint ellipse centered at (x, y).

        A zero radius draws a straight segment along the other axis.
        """
        require_palette_index(color)
        points = midpoint_ellipse(x, y, radius_x, radius_y)
        if filled:
            points = fill_spans(points)
        return sum(self.put(px, py, color) for px, py in points)

    def fill(self, x: float, y: float, color: int) -> int:
        """Region fill of the 4-connected area sharing the seed's index."""
        require_palette_index(color)
        x, y = round_half_up(x), round_half_up(y)
        if not self.writable(x, y):
            return 0

        def query(qx: int, qy: int) -> Any:
            if not self.writable(qx, qy):
                return OUT_OF_BOUNDS
            return int(self.pixels[qy, qx])

        points = flood_fill(x, y, self.width, self.height, query)
        for px, py in points:
            self.pixels[py, px] = color
        return len(points)

    def write_pixels(self, data: Sequence[Sequence[int]], x: float = 0, y: float = 0,
                     skip_transparent: bool = False) -> int:
        """
        Copy a block of palette indices with its top-left corner at (x, y).

        Args:
            data: Rectangular rows of palette indices
            x: Canvas column of the block's first column
            y: Canvas row of the block's first row
            skip_transparent: Leave pixels alone where the block holds index 0

        Returns:
            Number of pixels written
        """
        block = _require_block(data)
        x, y = round_half_up(x), round_half_up(y)
        written = 0
        for row in range(block.shape[0]):
            for col in range(block.shape[1]):
                value = int(block[row, col])
                if skip_transparent and value == 0:
                    continue
                written += self.put(x + col, y + row, value)
        return written

    def read_region(self, x: float, y: float, width: int, height: int) -> list[list[int]]:
        """Block of indices; pixels outside the canvas read as 0."""
        if width < 1 or height < 1:
            raise InvalidArgumentError(f"Region size must be positive, got {width}x{height}")
        return reframe_grid(self.pixels.tolist(), -round_half_up(x), -round_half_up(y), width, height)

    def erase_region(self, x: int, y: int, width: int, height: int) -> int:
        """Set every writable pixel in a rectangle to index 0."""
        return self.rect(x, y, width, height, 0, filled=True)

    # ------------------------------------------------------------------
    # Result
    # ------------------------------------------------------------------

    def to_cel(self) -> ImageCel:
        return ImageCel(x=0, y=0, data=self.pixels.tolist())

    def commit(self) -> None:
        """Store the canvas as the cel's content."""
        self.asset.set_cel(self.layer_id, self.frame_index, self.to_cel())
        logger.debug("Asset '%s': committed drawing to cel %d/%d",
                     self.asset.name, self.layer_id, self.frame_index)


def import_rgba(
    asset: Asset,
    layer_id: int,
    frame_index: int,
    pixels: Any,
    width: int,
    height: int,
    x: int = 0,
    y: int = 0,
    max_colors: int = MAX_COLORS,
    transparency_threshold: Optional[int] = None,
) -> QuantizeResult:
    """
    Quantize straight RGBA pixels into the asset's palette and draw them.

    The quantized colors overwrite the palette slots they are assigned to,
    starting at index 0. Slots beyond the result stay as they were.

    Args:
        asset: Target asset
        layer_id: Image layer to draw into
        frame_index: Frame to draw into
        pixels: Flat RGBA data, ``width * height * 4`` values
        width: Source width
        height: Source height
        x: Canvas column for the source's left edge
        y: Canvas row for the source's top edge
        max_colors: Palette slots available to the quantizer
        transparency_threshold: Alpha at or below this is transparent

    Returns:
        The quantization result
    """
    if width < 1 or height < 1:
        raise InvalidArgumentError(f"Image size must be positive, got {width}x{height}")
    canvas = CelCanvas(asset, layer_id, frame_index)
    result = quantize(pixels, max_colors, transparency_threshold)
    if len(result.indices) != width * height:
        raise InvalidArgumentError(
            f"Expected {width * height} pixels for a {width}x{height} image, got {len(result.indices)}"
        )

    block = np.asarray(result.indices, dtype=np.int32).reshape(height, width)
    asset.set_palette_colors(sorted(result.palette.items()))
    canvas.write_pixels(block.tolist(), x, y)
    canvas.commit()
    logger.debug("Asset '%s': imported %dx%d image using %d colors",
                 asset.name, width, height, len(result.palette))
    return result
