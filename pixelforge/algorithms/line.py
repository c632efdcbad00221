"""
Line rasterization.

Integer error-accumulator (Bresenham) generalized to all eight octants: the
axis with the larger delta drives the loop and the other axis steps whenever
the accumulated error crosses zero.
"""

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves towards +infinity."""
    return math.floor(value + 0.5)


def _rasterize(x0: int, y0: int, x1: int, y1: int) -> list[tuple[int, int]]:
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x1 > x0 else -1
    sy = 1 if y1 > y0 else -1

    # Swap the driving axis when the line is steeper than 45 degrees
    steep = dy > dx
    if steep:
        dx, dy = dy, dx

    points = []
    x, y = x0, y0
    err = 2 * dy - dx
    for _ in range(dx + 1):
        points.append((x, y))
        if err > 0:
            if steep:
                x += sx
            else:
                y += sy
            err -= 2 * dx
        err += 2 * dy
        if steep:
            y += sy
        else:
            x += sx
    return points


def bresenham_line(x0: float, y0: float, x1: float, y1: float) -> list[tuple[int, int]]:
    """
    Rasterize a line segment into 8-connected grid coordinates.

    Endpoints are rounded to the nearest integer. The result holds exactly
    ``max(|dx|, |dy|) + 1`` points, starts at the rounded start point and ends
    at the rounded end point. Swapping the endpoints yields the exact reverse
    sequence.

    Args:
        x0: Start x
        y0: Start y
        x1: End x
        y1: End y

    Returns:
        Ordered list of (x, y) tuples
    """
    start = (round_half_up(x0), round_half_up(y0))
    end = (round_half_up(x1), round_half_up(y1))

    # Always walk from the smaller endpoint so both directions agree
    if end < start:
        points = _rasterize(*end, *start)
        points.reverse()
        return points
    return _rasterize(*start, *end)
