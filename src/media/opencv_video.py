"""
OpenCV-based video surface for local video files.

Playback is driven by a monotonic clock: while playing, the position
advances in real time and read_frame() decodes forward to the frame that
should be on screen at that position.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Optional

import cv2
import numpy as np

from models.errors import PlaybackFailure, RegionSampleFailure
from models.frame import FrameData
from .base import ENDED, PAUSE, PLAY, VideoSurface


class OpenCVVideoSurface(VideoSurface):
    """
    Video surface backed by cv2.VideoCapture.

    Example:
        surface = OpenCVVideoSurface("clip.mp4")
        await surface.play()
        frame_data = surface.read_frame()
    """

    def __init__(
        self,
        path: str,
        source_id: Optional[str] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        super().__init__(source_id or path)
        self._path = path
        self._clock = clock
        self._cap: Optional[cv2.VideoCapture] = cv2.VideoCapture(path)
        if not self._cap.isOpened():
            self._cap.release()
            self._cap = None
            raise RuntimeError(f"Failed to open video {path}")

        self._fps = self._cap.get(cv2.CAP_PROP_FPS) or 30.0
        frame_count = int(self._cap.get(cv2.CAP_PROP_FRAME_COUNT) or 0)
        self._duration = frame_count / self._fps if frame_count > 0 else None
        self._width = int(self._cap.get(cv2.CAP_PROP_FRAME_WIDTH))
        self._height = int(self._cap.get(cv2.CAP_PROP_FRAME_HEIGHT))

        self._paused = True
        self._ended = False
        self._position = 0.0
        self._play_started: Optional[float] = None
        self._decoded_index = -1
        self._frame: Optional[np.ndarray] = None

        logging.info(
            f"Video opened: {path} ({self._width}x{self._height} @ {self._fps:.1f} fps, "
            f"duration={self._duration if self._duration is not None else 'unknown'})"
        )

    @property
    def current_time(self) -> float:
        if self._paused or self._play_started is None:
            return self._position
        position = self._position + (self._clock() - self._play_started)
        if self._duration is not None:
            position = min(position, self._duration)
        return position

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def ended(self) -> bool:
        if not self._ended and self._duration is not None and self.current_time >= self._duration:
            self._mark_ended()
        return self._ended

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    async def play(self) -> None:
        if self._cap is None:
            raise PlaybackFailure(f"Video {self._path} is closed")
        if self._ended:
            self._restart()
        if not self._paused:
            return
        self._paused = False
        self._play_started = self._clock()
        self._emit(PLAY)

    def pause(self) -> None:
        if self._paused:
            return
        self._position = self.current_time
        self._paused = True
        self._play_started = None
        self._emit(PAUSE)

    def read_frame(self) -> FrameData:
        if self._cap is None:
            raise RegionSampleFailure(f"Video {self._path} is closed")

        target_index = int(self.current_time * self._fps)
        while self._decoded_index < target_index or self._frame is None:
            ok = self._cap.grab()
            if not ok:
                self._mark_ended()
                break
            self._decoded_index += 1
            if self._decoded_index >= target_index:
                ok, frame = self._cap.retrieve()
                if ok and frame is not None:
                    self._frame = frame

        if self._frame is None:
            raise RegionSampleFailure(f"No frame available from {self._path}")

        return FrameData.from_numpy(
            self._frame,
            timestamp=self.current_time,
            frame_index=max(self._decoded_index, 0),
            source=self.source_id,
        )

    def close(self) -> None:
        if self._cap is not None:
            self._cap.release()
            self._cap = None
            logging.info(f"Video closed: {self._path}")
        super().close()

    def get_video_info(self) -> Dict[str, Any]:
        return {
            "width": self._width,
            "height": self._height,
            "fps": self._fps,
            "duration": self._duration,
        }

    def _mark_ended(self) -> None:
        if self._ended:
            return
        self._position = self.current_time
        self._ended = True
        self._paused = True
        self._play_started = None
        self._emit(ENDED)

    def _restart(self) -> None:
        self._cap.set(cv2.CAP_PROP_POS_FRAMES, 0)
        self._decoded_index = -1
        self._frame = None
        self._position = 0.0
        self._ended = False
