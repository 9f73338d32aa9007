"""
Vehicle color extraction with a multi-strategy fallback chain.

Order of attempts:
1. Three geometric regions around the detector box; the most confident
   result wins when its confidence exceeds 0.2.
2. A center crop of the box, sampled at a coarser stride, accepted at a
   fixed confidence of 0.3.
3. A per-vehicle-class default color.

Extraction never raises: every failure degrades to the next step.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from models.color import ColorSample, ExtractionMethod
from models.detection import BoundingBox
from models.errors import RegionSampleFailure
from .sampling import (
    CENTER_FILTER,
    REGION_FILTER,
    DominantColor,
    Histogram,
    Region,
    render_region,
    sample_histogram,
    select_dominant,
)
from .taxonomy import ColorName, color_hex

MIN_STRATEGY_CONFIDENCE = 0.2
CENTER_FALLBACK_CONFIDENCE = 0.3
CENTER_FALLBACK_MIN_PIXELS = 5
DEFAULT_COLOR_CONFIDENCE = 0.3

# Class defaults carry their own display hex codes.
CLASS_DEFAULT_COLORS: Dict[str, Tuple[ColorName, str]] = {
    "car": (ColorName.SILVER, "#C0C0C0"),
    "truck": (ColorName.WHITE, "#FFFFFF"),
    "bus": (ColorName.YELLOW, "#FFD700"),
    "motorcycle": (ColorName.BLACK, "#333333"),
    "bicycle": (ColorName.BLUE, "#4169E1"),
    "airplane": (ColorName.WHITE, "#F5F5F5"),
    "boat": (ColorName.WHITE, "#FAFAFA"),
    "train": (ColorName.GRAY, "#808080"),
}
UNKNOWN_CLASS_COLOR: Tuple[ColorName, str] = (ColorName.GRAY, "#808080")


def _full_vehicle_adjusted(x: float, y: float, w: float, h: float) -> Tuple[float, float, float, float]:
    # Detector boxes tend to cut off the roofline.
    return x, y - h * 0.3, w, h * 1.3


def _upper_body(x: float, y: float, w: float, h: float) -> Tuple[float, float, float, float]:
    return x + w * 0.05, y - h * 0.05, w * 0.9, h * 0.8


def _main_body_panel(x: float, y: float, w: float, h: float) -> Tuple[float, float, float, float]:
    return x + w * 0.1, y, w * 0.8, h * 0.7


STRATEGIES: List[Tuple[str, Callable[[float, float, float, float], Tuple[float, float, float, float]]]] = [
    ("Full Vehicle (Adjusted)", _full_vehicle_adjusted),
    ("Upper Body Area", _upper_body),
    ("Main Body Panel", _main_body_panel),
]


def strategy_regions(bbox: BoundingBox) -> List[Region]:
    """Sampling regions for a box, with coordinates clamped to be non-negative."""
    regions = []
    for name, shape in STRATEGIES:
        x, y, w, h = shape(bbox.x, bbox.y, bbox.width, bbox.height)
        regions.append(Region(name=name, x=max(0.0, x), y=max(0.0, y), width=w, height=h))
    return regions


def center_region(bbox: BoundingBox) -> Region:
    """Center crop of the box used by the first fallback."""
    center_x, center_y = bbox.center
    width = max(20, math.floor(bbox.width * 0.4))
    height = max(20, math.floor(bbox.height * 0.3))
    return Region(
        name="Center Sample",
        x=center_x - width / 2,
        y=center_y - height / 2,
        width=width,
        height=height,
    )


def default_color(class_name: str) -> Tuple[ColorName, str]:
    """Default (color, hex) for a vehicle class; unknown classes map to gray."""
    return CLASS_DEFAULT_COLORS.get(class_name.lower(), UNKNOWN_CLASS_COLOR)


@dataclass(frozen=True)
class StrategyResult:
    region: Region
    dominant: DominantColor
    histogram: Histogram

    @property
    def confidence(self) -> float:
        return self.dominant.confidence

    def diagnostic(self) -> str:
        return (
            f"Strategy: {self.region.name}, Pixels: {self.histogram.total}, "
            f"Top colors: {self.histogram.describe(3)}"
        )


class ColorExtractor:
    """
    Extracts the dominant color of a detected vehicle.

    Example:
        extractor = ColorExtractor()
        sample = extractor.extract(frame, BoundingBox(100, 100, 200, 150), "car")
    """

    def extract(self, frame: np.ndarray, bbox: BoundingBox, class_name: str = "car") -> ColorSample:
        """
        Extract a color sample for a vehicle.

        Args:
            frame: Source frame (read-only), OpenCV channel order.
            bbox: Vehicle box in the frame's coordinate space.
            class_name: Detector class label, used for the default color.

        Returns:
            A ColorSample; never raises.
        """
        try:
            return self._extract(frame, bbox, class_name)
        except Exception as e:
            logging.warning(f"Color extraction error for {class_name}: {e}")
            return self._class_default(class_name, f"Error: {e}")

    def _extract(self, frame: np.ndarray, bbox: BoundingBox, class_name: str) -> ColorSample:
        logging.debug(
            f"Color extraction: bbox=({bbox.x:.1f}, {bbox.y:.1f}, {bbox.width:.1f}, {bbox.height:.1f})"
        )

        best: Optional[StrategyResult] = None
        for region in strategy_regions(bbox):
            result = self._run_strategy(frame, region)
            if result is None:
                continue
            if best is None or result.confidence > best.confidence:
                best = result

        if best is not None and best.confidence > MIN_STRATEGY_CONFIDENCE:
            logging.debug(f"Color result: {best.dominant.color.value} using {best.diagnostic()}")
            return ColorSample(
                color_name=best.dominant.color,
                hex_code=color_hex(best.dominant.color),
                confidence=best.confidence,
                method=ExtractionMethod.PIXEL_ANALYSIS,
                diagnostic=best.diagnostic(),
            )

        center = self._center_fallback(frame, bbox)
        if center is not None:
            return center

        logging.debug(f"Using default color for {class_name}")
        return self._class_default(class_name, "All strategies failed, using fallback")

    def _run_strategy(self, frame: np.ndarray, region: Region) -> Optional[StrategyResult]:
        try:
            buffer = render_region(frame, region)
        except RegionSampleFailure as e:
            logging.debug(f"{region.name}: skipped ({e})")
            return None

        histogram = sample_histogram(buffer, REGION_FILTER)
        dominant = select_dominant(histogram)
        logging.debug(
            f"{region.name}: valid pixels={histogram.total}, top colors: {histogram.describe(5)}"
        )
        if dominant is None:
            return None
        return StrategyResult(region=region, dominant=dominant, histogram=histogram)

    def _center_fallback(self, frame: np.ndarray, bbox: BoundingBox) -> Optional[ColorSample]:
        region = center_region(bbox)
        try:
            buffer = render_region(frame, region)
        except RegionSampleFailure as e:
            logging.debug(f"Center fallback sampling failed: {e}")
            return None

        histogram = sample_histogram(buffer, CENTER_FILTER)
        logging.debug(f"Center fallback: {histogram.total} pixels, colors: {histogram.describe(5)}")
        if histogram.total < CENTER_FALLBACK_MIN_PIXELS:
            return None

        dominant = select_dominant(histogram)
        if dominant is None:
            return None
        return ColorSample(
            color_name=dominant.color,
            hex_code=color_hex(dominant.color),
            confidence=CENTER_FALLBACK_CONFIDENCE,
            method=ExtractionMethod.PIXEL_ANALYSIS,
            diagnostic=f"Fallback center sampling: {dominant.color.value}",
        )

    @staticmethod
    def _class_default(class_name: str, diagnostic: str) -> ColorSample:
        name, hex_code = default_color(class_name)
        return ColorSample(
            color_name=name,
            hex_code=hex_code,
            confidence=DEFAULT_COLOR_CONFIDENCE,
            method=ExtractionMethod.FALLBACK,
            diagnostic=diagnostic,
        )
