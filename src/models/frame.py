"""
FrameData model for presented video frames and still images.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np


@dataclass
class FrameData:
    """
    A frame as presented by a media surface.

    Attributes:
        frame: Pixel data (OpenCV channel order). Treated as read-only.
        width: Native frame width in pixels.
        height: Native frame height in pixels.
        timestamp: Playback position in seconds (0 for still images).
        frame_index: Index of the decoded frame within the media.
        source: Identifier of the media the frame came from.
    """
    frame: np.ndarray
    width: int
    height: int
    timestamp: float = 0.0
    frame_index: int = 0
    source: Optional[str] = None

    @classmethod
    def from_numpy(
        cls,
        frame: np.ndarray,
        timestamp: float = 0.0,
        frame_index: int = 0,
        source: Optional[str] = None,
    ) -> "FrameData":
        """Wrap a numpy frame; the array is marked read-only."""
        h, w = frame.shape[:2]
        view = frame.view()
        view.flags.writeable = False
        return cls(
            frame=view,
            width=w,
            height=h,
            timestamp=timestamp,
            frame_index=frame_index,
            source=source,
        )

    @property
    def size(self) -> Tuple[int, int]:
        """Return (width, height)."""
        return (self.width, self.height)
