"""
Scanline region fill.

Seeds are kept in an explicit work-queue instead of the call stack. Each seed
is widened to its full matching span on its row, then the rows directly
above and below are scanned across that span, pushing one seed per matching
run. Cost is proportional to the filled area.
"""

from collections import deque
from typing import Any, Callable, Optional, Sequence

from .line import round_half_up

# Query result for coordinates outside the canvas
OUT_OF_BOUNDS = None

PixelQuery = Callable[[int, int], Any]


def flood_fill(
    x: float,
    y: float,
    width: int,
    height: int,
    query: PixelQuery,
) -> list[tuple[int, int]]:
    """
    Collect every cell 4-connected to a start point through equal values.

    Args:
        x: Start x (rounded to integer)
        y: Start y (rounded to integer)
        width: Canvas width
        height: Canvas height
        query: Returns the comparable value at (x, y), or OUT_OF_BOUNDS

    Returns:
        List of distinct (x, y) tuples in fill order; empty if the start
        point is outside the canvas
    """
    sx = round_half_up(x)
    sy = round_half_up(y)
    if not (0 <= sx < width and 0 <= sy < height):
        return []

    target = query(sx, sy)
    if target is OUT_OF_BOUNDS:
        return []

    filled: list[tuple[int, int]] = []
    visited: set[tuple[int, int]] = set()

    def matches(cx: int, cy: int) -> bool:
        if not (0 <= cx < width and 0 <= cy < height):
            return False
        if (cx, cy) in visited:
            return False
        return query(cx, cy) == target

    queue = deque([(sx, sy)])
    while queue:
        cx, cy = queue.popleft()
        if not matches(cx, cy):
            continue

        left = cx
        while matches(left - 1, cy):
            left -= 1
        right = cx
        while matches(right + 1, cy):
            right += 1

        for px in range(left, right + 1):
            visited.add((px, cy))
            filled.append((px, cy))

        for ny in (cy - 1, cy + 1):
            if not 0 <= ny < height:
                continue
            in_run = False
            for px in range(left, right + 1):
                if matches(px, ny):
                    if not in_run:
                        queue.append((px, ny))
                        in_run = True
                else:
                    in_run = False

    return filled


def grid_query(grid: Sequence[Sequence[Any]]) -> PixelQuery:
    """Build a pixel query over a row-major grid (``grid[y][x]``)."""
    def query(x: int, y: int) -> Optional[Any]:
        if 0 <= y < len(grid) and 0 <= x < len(grid[y]):
            return grid[y][x]
        return OUT_OF_BOUNDS
    return query
