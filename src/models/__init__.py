"""
Typed models for the vehicle analysis pipeline.

Models are immutable; a new detection pass replaces records wholesale.
"""

from .detection import BoundingBox, RawDetection
from .errors import DetectorFailure, PlaybackFailure, RegionSampleFailure, VehicleLensError
from .frame import FrameData
from .notice import Notice, NoticeBoard, Severity

__all__ = [
    # Detection
    "BoundingBox",
    "RawDetection",
    # Frame
    "FrameData",
    # Errors
    "VehicleLensError",
    "DetectorFailure",
    "RegionSampleFailure",
    "PlaybackFailure",
    # Notices
    "Notice",
    "NoticeBoard",
    "Severity",
]
