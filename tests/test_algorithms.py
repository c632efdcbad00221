"""
Tests for the raster algorithms.

Tests cover:
- Line rasterization (length, endpoints, connectivity, reverse symmetry)
- Midpoint circles and ellipses, and filled spans
- Scanline region fill
- Median-cut quantization
- Grid reframing

Run with: pytest tests/test_algorithms.py -v
"""

import numpy as np
import pytest

from pixelforge.algorithms import (
    bresenham_line,
    fill_spans,
    flood_fill,
    grid_query,
    midpoint_circle,
    midpoint_ellipse,
    quantize,
    reframe_grid,
    round_half_up,
)
from pixelforge.exceptions import InvalidArgumentError

LINE_CASES = [
    (0, 0, 0, 0),
    (0, 0, 7, 0),
    (0, 0, 0, -5),
    (0, 0, 5, 5),
    (0, 0, 7, 3),
    (2, 9, -4, 1),
    (-3, -3, 10, -8),
    (5, 0, 0, 2),
]


class TestBresenhamLine:
    """Tests for line rasterization."""

    def test_single_point(self):
        assert bresenham_line(3, 4, 3, 4) == [(3, 4)]

    def test_horizontal(self):
        assert bresenham_line(0, 0, 3, 0) == [(0, 0), (1, 0), (2, 0), (3, 0)]

    def test_diagonal(self):
        assert bresenham_line(0, 0, 3, 3) == [(0, 0), (1, 1), (2, 2), (3, 3)]

    def test_shallow_slope(self):
        assert bresenham_line(0, 0, 4, 2) == [(0, 0), (1, 0), (2, 1), (3, 1), (4, 2)]

    @pytest.mark.parametrize('x0,y0,x1,y1', LINE_CASES)
    def test_length_and_endpoints(self, x0, y0, x1, y1):
        """Exactly max(|dx|, |dy|) + 1 points from start to end."""
        points = bresenham_line(x0, y0, x1, y1)
        assert len(points) == max(abs(x1 - x0), abs(y1 - y0)) + 1
        assert points[0] == (x0, y0)
        assert points[-1] == (x1, y1)

    @pytest.mark.parametrize('x0,y0,x1,y1', LINE_CASES)
    def test_eight_connected(self, x0, y0, x1, y1):
        """Consecutive points are neighbours."""
        points = bresenham_line(x0, y0, x1, y1)
        for (ax, ay), (bx, by) in zip(points, points[1:]):
            assert max(abs(bx - ax), abs(by - ay)) == 1

    @pytest.mark.parametrize('x0,y0,x1,y1', LINE_CASES)
    def test_reverse_symmetry(self, x0, y0, x1, y1):
        """Swapping the endpoints gives the exact reverse sequence."""
        assert bresenham_line(x1, y1, x0, y0) == list(reversed(bresenham_line(x0, y0, x1, y1)))

    def test_fractional_endpoints_round_half_up(self):
        """Endpoints are rounded with halves going up."""
        assert bresenham_line(0.5, 0, 2.4, 0) == [(1, 0), (2, 0)]
        assert round_half_up(-0.5) == 0
        assert round_half_up(-1.5) == -1


def mirrored(points, cx, cy):
    """The point set reflected across both axes through the center."""
    return {(2 * cx - x, y) for x, y in points} | {(x, 2 * cy - y) for x, y in points}


class TestMidpointCircle:
    """Tests for circle rasterization."""

    def test_zero_radius(self):
        assert midpoint_circle(3, 4, 0) == [(3, 4)]

    def test_radius_one(self):
        assert set(midpoint_circle(5, 5, 1)) == {(6, 5), (4, 5), (5, 6), (5, 4)}

    @pytest.mark.parametrize('radius', [1, 2, 3, 5, 8])
    def test_points_are_distinct_and_symmetric(self, radius):
        points = midpoint_circle(10, 10, radius)
        assert len(points) == len(set(points))
        assert mirrored(points, 10, 10) <= set(points)
        assert {(y, x) for x, y in points} == set(points)

    @pytest.mark.parametrize('radius', [2, 4, 7])
    def test_points_lie_near_radius(self, radius):
        for x, y in midpoint_circle(0, 0, radius):
            assert abs((x * x + y * y) ** 0.5 - radius) < 1

    def test_radius_two_point_count(self):
        assert len(midpoint_circle(0, 0, 2)) == 12

    def test_rounds_center_and_radius(self):
        assert midpoint_circle(0.5, 1.4, 1.4) == midpoint_circle(1, 1, 1)
        assert midpoint_circle(0, 0, -2) == midpoint_circle(0, 0, 2)


class TestMidpointEllipse:
    """Tests for ellipse rasterization."""

    def test_zero_radii(self):
        assert midpoint_ellipse(2, 2, 0, 0) == [(2, 2)]

    def test_vertical_segment(self):
        assert midpoint_ellipse(1, 5, 0, 2) == [(1, 3), (1, 4), (1, 5), (1, 6), (1, 7)]

    def test_horizontal_segment(self):
        assert len(midpoint_ellipse(0, 0, 3, 0)) == 7

    @pytest.mark.parametrize('rx,ry', [(3, 1), (2, 3), (5, 2), (4, 4)])
    def test_extremes_and_symmetry(self, rx, ry):
        points = midpoint_ellipse(10, 10, rx, ry)
        assert len(points) == len(set(points))
        assert {(10 + rx, 10), (10 - rx, 10), (10, 10 + ry), (10, 10 - ry)} <= set(points)
        assert mirrored(points, 10, 10) <= set(points)

    def test_known_outline(self):
        assert set(midpoint_ellipse(0, 0, 3, 1)) == {
            (0, 1), (1, 1), (-1, 1), (2, 1), (-2, 1),
            (0, -1), (1, -1), (-1, -1), (2, -1), (-2, -1),
            (3, 0), (-3, 0),
        }


class TestFillSpans:
    """Tests for filling an outline row by row."""

    def test_fills_between_row_extremes(self):
        filled = fill_spans([(0, 0), (3, 0), (1, 1)])
        assert sorted(filled) == [(0, 0), (1, 0), (1, 1), (2, 0), (3, 0)]

    def test_filled_circle(self):
        assert len(fill_spans(midpoint_circle(0, 0, 2))) == 21


class TestFloodFill:
    """Tests for the scanline region fill."""

    def test_uniform_grid_fills_everything(self):
        """Every cell is visited exactly once."""
        grid = [[0] * 4 for _ in range(3)]
        points = flood_fill(1, 1, 4, 3, grid_query(grid))
        assert len(points) == 12
        assert len(set(points)) == 12

    def test_wall_splits_regions(self):
        """A full column of another value stops the fill."""
        grid = [[0, 0, 1, 0, 0] for _ in range(3)]
        points = flood_fill(0, 0, 5, 3, grid_query(grid))
        assert sorted(points) == sorted((x, y) for x in range(2) for y in range(3))

    def test_fills_around_corners(self):
        """Spans re-enter regions reachable only through another row."""
        grid = [
            [0, 1, 0],
            [0, 1, 0],
            [0, 0, 0],
        ]
        points = flood_fill(0, 0, 3, 3, grid_query(grid))
        assert len(points) == 7
        assert (2, 0) in points

    def test_diagonals_do_not_connect(self):
        """Connectivity is 4-way."""
        grid = [[0, 1], [1, 0]]
        assert flood_fill(0, 0, 2, 2, grid_query(grid)) == [(0, 0)]

    def test_seed_outside_canvas(self):
        grid = [[0, 0]]
        assert flood_fill(5, 0, 2, 1, grid_query(grid)) == []

    def test_large_region_does_not_recurse(self):
        """Big areas are handled by the work-queue."""
        size = 300
        points = flood_fill(0, 0, size, size, lambda x, y: 0)
        assert len(points) == size * size


class TestQuantize:
    """Tests for median-cut quantization."""

    def test_empty_input(self):
        """No pixels give an empty result."""
        result = quantize([], 16)
        assert result.palette == {}
        assert result.indices == []

    def test_exact_mapping_in_first_occurrence_order(self):
        """Colors that fit get their own slot in order of appearance."""
        pixels = [255, 0, 0, 255, 0, 255, 0, 255, 255, 0, 0, 255]
        result = quantize(pixels, 4)
        assert result.palette == {0: (255, 0, 0, 255), 1: (0, 255, 0, 255)}
        assert result.indices == [0, 1, 0]

    def test_transparent_pixels_take_index_zero(self):
        """Transparent pixels map to index 0; opaque alpha is normalized to 255."""
        result = quantize([0, 0, 0, 0, 10, 20, 30, 200], 4)
        assert result.palette == {0: (0, 0, 0, 0), 1: (10, 20, 30, 255)}
        assert result.indices == [0, 1]

    def test_transparency_threshold(self):
        """Alpha at or below the threshold is transparent."""
        result = quantize([1, 1, 1, 127, 1, 1, 1, 128], 4)
        assert result.indices == [0, 1]
        result = quantize([1, 1, 1, 127], 4, transparency_threshold=100)
        assert result.palette == {0: (1, 1, 1, 255)}

    def test_median_cut_reduction(self):
        """Four colors in two clusters reduce to the two cluster averages."""
        pixels = [
            0, 0, 0, 255,
            10, 0, 0, 255,
            200, 0, 0, 255,
            210, 0, 0, 255,
        ]
        result = quantize(pixels, 2)
        assert result.palette == {0: (5, 0, 0, 255), 1: (205, 0, 0, 255)}
        assert result.indices == [0, 0, 1, 1]

    def test_reduction_respects_limit(self):
        """Every index points at a palette slot and the palette fits."""
        rng = np.random.default_rng(7)
        rgb = rng.integers(0, 256, size=(200, 3))
        pixels = np.concatenate([rgb, np.full((200, 1), 255)], axis=1).ravel().tolist()
        result = quantize(pixels, 8)
        assert len(result.palette) <= 8
        assert set(result.indices) <= set(result.palette)
        assert len(result.indices) == 200

    def test_bytes_input(self):
        """Raw RGBA bytes are accepted."""
        result = quantize(bytes([9, 8, 7, 255]), 2)
        assert result.palette == {0: (9, 8, 7, 255)}

    @pytest.mark.parametrize('max_colors', [0, 257])
    def test_max_colors_range(self, max_colors):
        with pytest.raises(InvalidArgumentError):
            quantize([0, 0, 0, 255], max_colors)

    def test_length_must_be_multiple_of_four(self):
        with pytest.raises(InvalidArgumentError):
            quantize([0, 0, 0], 4)


class TestReframeGrid:
    """Tests for placing a grid onto a canvas-sized grid."""

    def test_offset_into_larger_canvas(self):
        assert reframe_grid([[1, 2], [3, 4]], 1, 1, 3, 3) == [[0, 0, 0], [0, 1, 2], [0, 3, 4]]

    def test_negative_offset_crops(self):
        assert reframe_grid([[1, 2], [3, 4]], -1, 0, 2, 2) == [[2, 0], [4, 0]]

    def test_no_overlap(self):
        assert reframe_grid([[1]], 5, 5, 2, 1) == [[0, 0]]

    def test_empty_source(self):
        assert reframe_grid([], 0, 0, 2, 2) == [[0, 0], [0, 0]]
