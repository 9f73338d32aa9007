"""
Error taxonomy for the analysis pipeline.
"""

from __future__ import annotations


class VehicleLensError(Exception):
    """Base class for pipeline errors."""


class DetectorFailure(VehicleLensError):
    """The external detector rejected or failed a detection call."""


class RegionSampleFailure(VehicleLensError):
    """Pixel data for a sampling region could not be read."""


class PlaybackFailure(VehicleLensError):
    """Video playback could not be started."""
