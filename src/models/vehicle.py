"""
VehicleRecord model: one detected vehicle with its extracted color.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from .color import ColorSample
from .detection import BoundingBox


@dataclass(frozen=True)
class VehicleRecord:
    """
    A normalized, display-ready vehicle detection.

    Attributes:
        id: Sequential id within one detection pass (starts at 0).
        class_name: Class label with the first letter capitalized.
        score: Detection score as an integer percentage.
        raw_score: Detection score as reported by the detector (0-1).
        bbox: Box in the coordinate space of the displayed original media.
        color: Extracted color sample.
    """
    id: int
    class_name: str
    score: int
    raw_score: float
    bbox: BoundingBox
    color: ColorSample

    @property
    def color_confidence(self) -> int:
        """Color confidence as an integer percentage."""
        return to_percent(self.color.confidence)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "class_name": self.class_name,
            "score": self.score,
            "raw_score": self.raw_score,
            "bbox": list(self.bbox.as_tuple()),
            "color": self.color.to_dict(),
            "color_confidence": self.color_confidence,
        }


def to_percent(value: float) -> int:
    """Round a 0-1 fraction to an integer percentage, halves rounding up."""
    return int((value * 100) + 0.5)
