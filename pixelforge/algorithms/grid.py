"""Grid helpers for image cels backed by numpy block copies."""

import numpy as np


def reframe_grid(
    data: list[list[int]],
    x: int,
    y: int,
    width: int,
    height: int,
    fill: int = 0,
) -> list[list[int]]:
    """
    Place a grid at an offset onto a fresh canvas-sized grid.

    The part of ``data`` that lands inside ``width`` x ``height`` is copied
    verbatim, the rest is discarded, and uncovered cells hold ``fill``.

    Args:
        data: Source rows (``data[row][col]``)
        x: Canvas column of the source's first column
        y: Canvas row of the source's first row
        width: Target width
        height: Target height
        fill: Value for cells the source does not cover

    Returns:
        New list of ``height`` rows of ``width`` values
    """
    canvas = np.full((height, width), fill, dtype=np.int32)
    if data and data[0]:
        src = np.asarray(data, dtype=np.int32)
        src_h, src_w = src.shape

        # Overlap in canvas coordinates
        left = max(x, 0)
        top = max(y, 0)
        right = min(x + src_w, width)
        bottom = min(y + src_h, height)
        if right > left and bottom > top:
            canvas[top:bottom, left:right] = src[top - y:bottom - y, left - x:right - x]
    return canvas.tolist()
