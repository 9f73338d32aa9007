"""
Detection models for object detector output.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Sequence, Tuple


@dataclass(frozen=True)
class BoundingBox:
    """
    An axis-aligned bounding box in pixel coordinates (origin top-left).

    Attributes:
        x: Left edge x coordinate.
        y: Top edge y coordinate.
        width: Box width in pixels.
        height: Box height in pixels.
    """
    x: float
    y: float
    width: float
    height: float

    @property
    def x2(self) -> float:
        return self.x + self.width

    @property
    def y2(self) -> float:
        return self.y + self.height

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y + self.height / 2)

    @property
    def area(self) -> float:
        return self.width * self.height

    def as_tuple(self) -> Tuple[float, float, float, float]:
        """Return as (x, y, width, height) tuple."""
        return (self.x, self.y, self.width, self.height)

    def as_int_tuple(self) -> Tuple[int, int, int, int]:
        """Return as integer (x, y, width, height) tuple."""
        return (int(self.x), int(self.y), int(self.width), int(self.height))

    def scale(self, scale_x: float, scale_y: float) -> "BoundingBox":
        """Scale every component by the per-axis factors."""
        return BoundingBox(
            x=self.x * scale_x,
            y=self.y * scale_y,
            width=self.width * scale_x,
            height=self.height * scale_y,
        )

    def clip(self, frame_width: float, frame_height: float) -> Optional["BoundingBox"]:
        """
        Clip the box to the frame bounds.

        Returns:
            The clipped box, or None when nothing of it lies inside the frame.
        """
        x1 = min(max(self.x, 0.0), frame_width)
        y1 = min(max(self.y, 0.0), frame_height)
        x2 = min(max(self.x2, 0.0), frame_width)
        y2 = min(max(self.y2, 0.0), frame_height)
        if x2 - x1 <= 0 or y2 - y1 <= 0:
            return None
        return BoundingBox(x=x1, y=y1, width=x2 - x1, height=y2 - y1)

    @classmethod
    def from_tuple(cls, t: Sequence[float]) -> "BoundingBox":
        """Create from (x, y, width, height) sequence."""
        return cls(x=float(t[0]), y=float(t[1]), width=float(t[2]), height=float(t[3]))

    @classmethod
    def from_xyxy(cls, x1: float, y1: float, x2: float, y2: float) -> "BoundingBox":
        """Create from corner coordinates."""
        return cls(x=x1, y=y1, width=x2 - x1, height=y2 - y1)


@dataclass(frozen=True)
class RawDetection:
    """
    A single detection as produced by the external detector.

    Attributes:
        class_name: Detector class label (e.g. "car").
        score: Detection confidence score (0-1).
        bbox: Bounding box in the coordinate space of the frame given to the detector.
    """
    class_name: str
    score: float
    bbox: BoundingBox

    def with_bbox(self, bbox: BoundingBox) -> "RawDetection":
        return RawDetection(class_name=self.class_name, score=self.score, bbox=bbox)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "RawDetection":
        """
        Adapter: Create from a detector prediction mapping.

        Accepts either ``class`` or ``class_name`` for the label and a
        ``bbox`` given as [x, y, width, height].
        """
        class_name = d.get("class_name", d.get("class"))
        if class_name is None:
            raise ValueError("Detection is missing a class label")
        return cls(
            class_name=str(class_name),
            score=float(d.get("score", 0.0)),
            bbox=BoundingBox.from_tuple(d["bbox"]),
        )
