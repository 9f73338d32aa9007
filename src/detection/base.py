"""
Detector interface.

The object detector is an external collaborator: it takes a frame and
returns class/score/box predictions in the pixel space of that frame.
Implementations may be synchronous or return an awaitable.
"""

from __future__ import annotations

from typing import Any, Awaitable, Iterable, List, Protocol, Sequence, Union

import numpy as np

from models.detection import RawDetection

VEHICLE_CLASSES: Sequence[str] = (
    "car",
    "truck",
    "bus",
    "motorcycle",
    "bicycle",
    "airplane",
    "boat",
    "train",
)


class Detector(Protocol):
    """Detector interface returning detections in pixel-space."""

    def detect(self, frame: np.ndarray) -> Union[List[RawDetection], Awaitable[List[RawDetection]]]:
        ...


def filter_vehicles(
    detections: Iterable[RawDetection],
    vehicle_classes: Sequence[str] = VEHICLE_CLASSES,
) -> List[RawDetection]:
    """Keep only detections whose class is a vehicle class."""
    allowed = {c.lower() for c in vehicle_classes}
    return [d for d in detections if d.class_name.lower() in allowed]


def coerce_detections(predictions: Iterable[Any]) -> List[RawDetection]:
    """
    Adapter: Accept RawDetection objects or prediction mappings.
    """
    out: List[RawDetection] = []
    for p in predictions or []:
        if isinstance(p, RawDetection):
            out.append(p)
        else:
            out.append(RawDetection.from_dict(p))
    return out
