"""
Pixel-region sampling and dominant-color selection.

A region is rendered into its own RGBA buffer (parts outside the frame stay
fully transparent), pixels are sampled at a fixed stride, filtered by alpha
and brightness, classified with the color taxonomy and tallied into a
histogram. The dominant color is then chosen with a policy that prefers
chromatic colors over dark/neutral ones when enough of them are present.
"""

from __future__ import annotations

import math
from collections import Counter
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import numpy as np

from models.errors import RegionSampleFailure
from .taxonomy import ColorName, classify_rgb

NEUTRAL_COLORS = frozenset({
    ColorName.BLACK,
    ColorName.DARK_GRAY,
    ColorName.CHARCOAL,
    ColorName.MIXED,
})

# Chromatic share of valid pixels above which the top chromatic color wins.
CHROMATIC_SHARE = 0.3
MAX_CONFIDENCE = 0.95
MIN_PIXELS_FOR_CONFIDENCE = 50
LOW_PIXEL_CONFIDENCE = 0.4


@dataclass(frozen=True)
class Region:
    """A named rectangular sampling region in frame pixel coordinates."""
    name: str
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class PixelFilter:
    """
    Sampling stride and validity thresholds.

    Attributes:
        stride: Sample every ``stride``-th pixel of the region buffer.
        min_alpha: Pixels with alpha at or below this are skipped.
        min_brightness: Pixels with mean(r, g, b) at or below this are skipped.
        max_brightness: Pixels with mean(r, g, b) at or above this are skipped (None = no limit).
    """
    stride: int
    min_alpha: int
    min_brightness: float
    max_brightness: Optional[float] = None


REGION_FILTER = PixelFilter(stride=2, min_alpha=50, min_brightness=2, max_brightness=255)
CENTER_FILTER = PixelFilter(stride=4, min_alpha=30, min_brightness=1)


@dataclass
class Histogram:
    """Color-name frequencies over the valid pixels of one region."""
    counts: Counter = field(default_factory=Counter)

    @property
    def total(self) -> int:
        return sum(self.counts.values())

    def ranked(self) -> List[Tuple[ColorName, int]]:
        """Entries by frequency, descending; ties keep first-seen order."""
        return sorted(self.counts.items(), key=lambda kv: kv[1], reverse=True)

    def top(self, n: int = 3) -> List[Tuple[ColorName, int]]:
        return self.ranked()[:n]

    def describe(self, n: int = 3) -> str:
        return ", ".join(f"{name.value}({count})" for name, count in self.top(n))


@dataclass(frozen=True)
class DominantColor:
    color: ColorName
    count: int
    total: int

    @property
    def confidence(self) -> float:
        return pixel_confidence(self.count, self.total)


def _to_rgba(patch: np.ndarray) -> np.ndarray:
    """Convert an OpenCV-ordered patch (gray, BGR or BGRA) to RGBA."""
    if patch.ndim == 2:
        rgb = np.repeat(patch[:, :, None], 3, axis=2)
        alpha = np.full(patch.shape, 255, dtype=np.uint8)
        return np.dstack([rgb, alpha])
    channels = patch.shape[2]
    if channels == 1:
        return _to_rgba(patch[:, :, 0])
    if channels == 3:
        alpha = np.full(patch.shape[:2], 255, dtype=np.uint8)
        return np.dstack([patch[:, :, ::-1], alpha])
    if channels == 4:
        return np.dstack([patch[:, :, 2::-1], patch[:, :, 3]])
    raise RegionSampleFailure(f"Unsupported channel count: {channels}")


def render_region(frame: np.ndarray, region: Region) -> np.ndarray:
    """
    Copy a region of the frame into a freshly allocated RGBA buffer.

    The buffer is sized to the region (truncated to whole pixels). Pixels
    of the region that fall outside the frame are left transparent.
    The source frame is never written to.

    Raises:
        RegionSampleFailure: If the frame cannot be read or the region is empty.
    """
    if frame is None or not isinstance(frame, np.ndarray) or frame.ndim not in (2, 3):
        raise RegionSampleFailure("Frame pixel data is unavailable")
    if frame.dtype != np.uint8:
        raise RegionSampleFailure(f"Unsupported pixel type: {frame.dtype}")

    width = int(region.width)
    height = int(region.height)
    if width <= 0 or height <= 0:
        raise RegionSampleFailure(
            f"Region '{region.name}' has no area ({region.width:.1f}x{region.height:.1f})"
        )

    frame_h, frame_w = frame.shape[:2]
    left = math.floor(region.x)
    top = math.floor(region.y)

    buffer = np.zeros((height, width, 4), dtype=np.uint8)

    src_x1 = max(left, 0)
    src_y1 = max(top, 0)
    src_x2 = min(left + width, frame_w)
    src_y2 = min(top + height, frame_h)
    if src_x2 <= src_x1 or src_y2 <= src_y1:
        return buffer

    patch = frame[src_y1:src_y2, src_x1:src_x2]
    dst_x = src_x1 - left
    dst_y = src_y1 - top
    buffer[dst_y:dst_y + patch.shape[0], dst_x:dst_x + patch.shape[1]] = _to_rgba(patch)
    return buffer


def sample_histogram(buffer: np.ndarray, pixel_filter: PixelFilter) -> Histogram:
    """Sample an RGBA buffer and tally classified colors."""
    pixels = buffer.reshape(-1, 4)[::pixel_filter.stride].astype(np.int32)
    if len(pixels) == 0:
        return Histogram()

    brightness_sum = pixels[:, :3].sum(axis=1)
    mask = (pixels[:, 3] > pixel_filter.min_alpha) & (
        brightness_sum > 3 * pixel_filter.min_brightness
    )
    if pixel_filter.max_brightness is not None:
        mask &= brightness_sum < 3 * pixel_filter.max_brightness

    valid = pixels[mask, :3]
    if len(valid) == 0:
        return Histogram()

    # Classify each distinct RGB once, in order of first appearance.
    colors, first_index, counts = np.unique(valid, axis=0, return_index=True, return_counts=True)
    histogram = Histogram()
    for i in np.argsort(first_index, kind="stable"):
        r, g, b = (int(v) for v in colors[i])
        histogram.counts[classify_rgb(r, g, b)] += int(counts[i])
    return histogram


def select_dominant(histogram: Histogram) -> Optional[DominantColor]:
    """
    Choose the dominant color of a histogram.

    The most frequent chromatic (non-neutral) color wins when chromatic
    pixels make up more than 30% of the valid pixels; otherwise the most
    frequent color overall wins. A "Mixed" winner is replaced by the
    runner-up when there is one.
    """
    ranked = histogram.ranked()
    if not ranked:
        return None
    total = histogram.total

    chromatic = [(name, count) for name, count in ranked if name not in NEUTRAL_COLORS]
    chromatic_total = sum(count for _, count in chromatic)

    if chromatic and chromatic_total > total * CHROMATIC_SHARE:
        name, count = chromatic[0]
    else:
        name, count = ranked[0]

    if name is ColorName.MIXED and len(ranked) > 1:
        name, count = ranked[1]

    return DominantColor(color=name, count=count, total=total)


def pixel_confidence(count: int, total: int) -> float:
    if total > MIN_PIXELS_FOR_CONFIDENCE:
        return min(count / total, MAX_CONFIDENCE)
    return LOW_PIXEL_CONFIDENCE
