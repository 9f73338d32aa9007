"""
Vehicle record assembly.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

from models.color import ColorSample
from models.detection import RawDetection
from models.vehicle import VehicleRecord, to_percent


def normalize_class_name(class_name: str) -> str:
    """Capitalize the first letter, leave the rest untouched."""
    return class_name[:1].upper() + class_name[1:]


class VehicleRecordBuilder:
    """Combines raw detections with their color samples into records."""

    def build(self, index: int, detection: RawDetection, color: ColorSample) -> VehicleRecord:
        return VehicleRecord(
            id=index,
            class_name=normalize_class_name(detection.class_name),
            score=to_percent(detection.score),
            raw_score=detection.score,
            bbox=detection.bbox,
            color=color,
        )

    def build_all(self, items: Sequence[Tuple[RawDetection, ColorSample]]) -> Tuple[VehicleRecord, ...]:
        """Build the records of one pass; ids are pass-local and start at 0."""
        records: List[VehicleRecord] = [
            self.build(i, detection, color) for i, (detection, color) in enumerate(items)
        ]
        return tuple(records)
