"""
Raster algorithms used by the editing operations.

All functions are pure: they never touch an asset directly and never raise
for valid numeric input.
"""

from .fill import OUT_OF_BOUNDS, flood_fill, grid_query
from .grid import reframe_grid
from .line import bresenham_line, round_half_up
from .midpoint import fill_spans, midpoint_circle, midpoint_ellipse
from .quantize import QuantizeResult, quantize

__all__ = [
    'bresenham_line',
    'round_half_up',
    'midpoint_circle',
    'midpoint_ellipse',
    'fill_spans',
    'flood_fill',
    'grid_query',
    'OUT_OF_BOUNDS',
    'quantize',
    'QuantizeResult',
    'reframe_grid',
]
