"""
Median-cut color quantization.

Reduces straight RGBA pixels to an indexed palette of at most ``max_colors``
entries:

1. Pixels with alpha at or below the transparency threshold collapse to the
   canonical transparent color, which always takes palette index 0.
2. Remaining pixels count as opaque (alpha 255). If every distinct color fits
   in the palette, each gets its own slot in first-occurrence order.
3. Otherwise the distinct opaque colors are bisected recursively along the
   channel with the widest range, at the population-weighted median, and
   each bucket is represented by its occurrence-weighted average.
4. Every opaque pixel maps to the nearest palette entry by squared RGB
   distance.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence, Union

import numpy as np

from pixelforge.colors import MAX_COLORS, TRANSPARENT, Color
from pixelforge.config import settings
from pixelforge.exceptions import InvalidArgumentError

PixelData = Union[bytes, bytearray, Sequence[int], np.ndarray]


@dataclass
class QuantizeResult:
    """Palette slots plus one palette index per input pixel."""

    palette: dict[int, Color] = field(default_factory=dict)
    indices: list[int] = field(default_factory=list)


@dataclass
class _Bucket:
    colors: np.ndarray  # (n, 3) distinct RGB values
    counts: np.ndarray  # (n,) occurrences

    def widest_channel(self) -> tuple[int, int]:
        """Return (channel, range) of the channel spanning the most values."""
        spans = self.colors.max(axis=0) - self.colors.min(axis=0)
        channel = int(np.argmax(spans))
        return channel, int(spans[channel])

    def split(self, channel: int) -> tuple['_Bucket', '_Bucket']:
        order = np.argsort(self.colors[:, channel], kind='stable')
        colors = self.colors[order]
        counts = self.counts[order]

        # First position where the running population reaches half the total
        cumulative = np.cumsum(counts)
        cut = int(np.searchsorted(cumulative, cumulative[-1] / 2.0)) + 1
        cut = min(max(cut, 1), len(colors) - 1)
        return _Bucket(colors[:cut], counts[:cut]), _Bucket(colors[cut:], counts[cut:])

    def average(self) -> Color:
        weights = self.counts.astype(np.float64)
        mean = (self.colors * weights[:, None]).sum(axis=0) / weights.sum()
        r, g, b = (int(np.floor(channel + 0.5)) for channel in mean)
        return (r, g, b, 255)


def _median_cut(colors: np.ndarray, counts: np.ndarray, slots: int) -> list[Color]:
    buckets = [_Bucket(colors, counts)]
    while len(buckets) < slots:
        best: Optional[tuple[int, int, int]] = None  # (range, bucket index, channel)
        for i, bucket in enumerate(buckets):
            if len(bucket.colors) < 2:
                continue
            channel, span = bucket.widest_channel()
            if best is None or span > best[0]:
                best = (span, i, channel)
        if best is None:
            break
        _, index, channel = best
        low, high = buckets.pop(index).split(channel)
        buckets.extend((low, high))
    return [bucket.average() for bucket in buckets]


def quantize(
    pixels: PixelData,
    max_colors: int,
    transparency_threshold: Optional[int] = None,
) -> QuantizeResult:
    """
    Quantize flat RGBA bytes into an indexed palette.

    Args:
        pixels: Flat RGBA sequence, 4 values per pixel
        max_colors: Maximum palette size (1-256), including transparency
        transparency_threshold: Alpha at or below this counts as transparent;
            defaults to ``settings.TRANSPARENCY_THRESHOLD``

    Returns:
        QuantizeResult with the palette mapping and per-pixel indices in the
        original pixel order
    """
    if not 1 <= max_colors <= MAX_COLORS:
        raise InvalidArgumentError(f"max_colors must be 1-{MAX_COLORS}, got {max_colors}")
    if transparency_threshold is None:
        transparency_threshold = settings.TRANSPARENCY_THRESHOLD

    rgba = np.frombuffer(bytes(pixels), dtype=np.uint8) if isinstance(pixels, (bytes, bytearray)) \
        else np.asarray(pixels, dtype=np.int64)
    if rgba.size % 4 != 0:
        raise InvalidArgumentError(f"RGBA data length {rgba.size} is not a multiple of 4")
    if rgba.size == 0:
        return QuantizeResult()

    rgba = rgba.reshape(-1, 4).astype(np.int64)
    transparent = rgba[:, 3] <= transparency_threshold
    has_transparency = bool(transparent.any())
    indices = np.zeros(len(rgba), dtype=np.int64)

    result = QuantizeResult()
    next_index = 0
    if has_transparency:
        result.palette[0] = TRANSPARENT
        next_index = 1

    opaque_rgb = rgba[~transparent, :3]
    if len(opaque_rgb) == 0:
        result.indices = indices.tolist()
        return result

    # Distinct opaque colors in first-occurrence order, with counts
    packed = (opaque_rgb[:, 0] << 16) | (opaque_rgb[:, 1] << 8) | opaque_rgb[:, 2]
    unique, first_seen, inverse, counts = np.unique(
        packed, return_index=True, return_inverse=True, return_counts=True
    )
    order = np.argsort(first_seen, kind='stable')
    rank = np.empty_like(order)
    rank[order] = np.arange(len(order))
    distinct = np.stack([(unique >> 16) & 255, (unique >> 8) & 255, unique & 255], axis=1)[order]
    counts = counts[order]
    pixel_color = rank[inverse.reshape(-1)]

    slots = max_colors - next_index
    if slots <= 0:
        result.indices = indices.tolist()
        return result

    if len(distinct) <= slots:
        for i, (r, g, b) in enumerate(distinct.tolist()):
            result.palette[next_index + i] = (r, g, b, 255)
        indices[~transparent] = next_index + pixel_color
        result.indices = indices.tolist()
        return result

    representatives = _median_cut(distinct, counts, min(slots, len(distinct)))
    for i, color in enumerate(representatives):
        result.palette[next_index + i] = color

    # Nearest representative for every distinct color, then fan out to pixels
    reps = np.asarray([color[:3] for color in representatives], dtype=np.int64)
    distances = ((distinct[:, None, :] - reps[None, :, :]) ** 2).sum(axis=2)
    nearest = np.argmin(distances, axis=1)
    indices[~transparent] = next_index + nearest[pixel_color]
    result.indices = indices.tolist()
    return result
