"""
Midpoint circle and ellipse rasterization.

Both walk one octant (circle) or one quadrant per region (ellipse) with an
integer decision variable and mirror every step into the symmetric points.
Centers and radii are rounded half-up; radii use their absolute value.
"""

from .line import round_half_up

Point = tuple[int, int]


def _unique(points: list[Point]) -> list[Point]:
    # Mirrored points on the axes and diagonals repeat
    return list(dict.fromkeys(points))


def _mirror4(cx: int, cy: int, px: int, py: int) -> list[Point]:
    points = [(cx + px, cy + py)]
    if px != 0:
        points.append((cx - px, cy + py))
    if py != 0:
        points.append((cx + px, cy - py))
    if px != 0 and py != 0:
        points.append((cx - px, cy - py))
    return points


def midpoint_circle(xc: float, yc: float, radius: float) -> list[Point]:
    """
    Outline of a circle.

    Args:
        xc: Center x
        yc: Center y
        radius: Radius; 0 yields the center point alone

    Returns:
        Distinct (x, y) outline points
    """
    xc = round_half_up(xc)
    yc = round_half_up(yc)
    r = round_half_up(abs(radius))
    if r == 0:
        return [(xc, yc)]

    points: list[Point] = []
    x, y = r, 0
    err = 1 - x
    while y <= x:
        points.extend(_mirror4(xc, yc, x, y))
        if x != y:
            points.extend(_mirror4(xc, yc, y, x))
        y += 1
        if err < 0:
            err += 2 * y + 1
        else:
            x -= 1
            err += 2 * (y - x + 1)
    return _unique(points)


def midpoint_ellipse(xc: float, yc: float, rx: float, ry: float) -> list[Point]:
    """
    Outline of an axis-aligned ellipse.

    A zero radius on one axis degenerates to a straight segment along the
    other axis.

    Args:
        xc: Center x
        yc: Center y
        rx: Horizontal radius
        ry: Vertical radius

    Returns:
        Distinct (x, y) outline points
    """
    xc = round_half_up(xc)
    yc = round_half_up(yc)
    rx = round_half_up(abs(rx))
    ry = round_half_up(abs(ry))

    if rx == 0 and ry == 0:
        return [(xc, yc)]
    if rx == 0:
        return [(xc, yc + i) for i in range(-ry, ry + 1)]
    if ry == 0:
        return [(xc + i, yc) for i in range(-rx, rx + 1)]

    rx2 = rx * rx
    ry2 = ry * ry
    points: list[Point] = []
    x, y = 0, ry
    dx = 2 * ry2 * x
    dy = 2 * rx2 * y

    # Region 1: slope shallower than -1
    d1 = ry2 - rx2 * ry + 0.25 * rx2
    while dx < dy:
        points.extend(_mirror4(xc, yc, x, y))
        x += 1
        dx += 2 * ry2
        if d1 < 0:
            d1 += dx + ry2
        else:
            y -= 1
            dy -= 2 * rx2
            d1 += dx - dy + ry2

    # Region 2: slope steeper than -1
    d2 = ry2 * (x + 0.5) ** 2 + rx2 * (y - 1) ** 2 - rx2 * ry2
    while y >= 0:
        points.extend(_mirror4(xc, yc, x, y))
        y -= 1
        dy -= 2 * rx2
        if d2 > 0:
            d2 += rx2 - dy
        else:
            x += 1
            dx += 2 * ry2
            d2 += dx - dy + rx2
    return _unique(points)


def fill_spans(points: list[Point]) -> list[Point]:
    """Every point on the horizontal spans between an outline's extremes per row."""
    spans: dict[int, tuple[int, int]] = {}
    for x, y in points:
        low, high = spans.get(y, (x, x))
        spans[y] = (min(low, x), max(high, x))
    return [(x, y) for y, (low, high) in spans.items() for x in range(low, high + 1)]
