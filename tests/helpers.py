"""
Test doubles shared by the scheduler, controller and API tests.
"""

import asyncio
from typing import Callable, List, Optional

import numpy as np

from media.base import ENDED, PAUSE, PLAY, VideoSurface
from models.detection import BoundingBox, RawDetection
from models.errors import PlaybackFailure
from models.frame import FrameData


class ManualHandle:
    def __init__(self, clock: "ManualFrameClock", callback: Callable[[], None]):
        self._clock = clock
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True
        if self in self._clock.pending:
            self._clock.pending.remove(self)


class ManualFrameClock:
    """Frame clock advanced explicitly by the test."""

    def __init__(self):
        self.pending: List[ManualHandle] = []
        self.scheduled = 0

    def call_on_next_frame(self, callback: Callable[[], None]) -> ManualHandle:
        handle = ManualHandle(self, callback)
        self.pending.append(handle)
        self.scheduled += 1
        return handle

    def fire(self) -> int:
        """Run every callback pending at this moment; returns how many ran."""
        due, self.pending = self.pending, []
        for handle in due:
            handle.callback()
        return len(due)

    async def tick(self, scheduler=None) -> int:
        """Fire the pending callbacks and let the spawned iterations finish."""
        fired = self.fire()
        await asyncio.sleep(0)
        if scheduler is not None:
            await scheduler.wait_idle()
        return fired


class FakeVideoSurface(VideoSurface):
    """In-memory video surface presenting a fixed frame."""

    def __init__(self, frame: Optional[np.ndarray] = None, fail_play: bool = False):
        super().__init__("fake.mp4")
        self.frame = frame if frame is not None else np.full((120, 160, 3), 128, dtype=np.uint8)
        self.fail_play = fail_play
        self.position = 0.0
        self.frames_read = 0
        self.closed = False
        self._paused = True
        self._ended = False

    @property
    def current_time(self) -> float:
        return self.position

    @property
    def paused(self) -> bool:
        return self._paused

    @property
    def ended(self) -> bool:
        return self._ended

    @property
    def width(self) -> int:
        return self.frame.shape[1]

    @property
    def height(self) -> int:
        return self.frame.shape[0]

    async def play(self) -> None:
        if self.fail_play:
            raise PlaybackFailure("autoplay blocked")
        if self._paused:
            self._paused = False
            self._emit(PLAY)

    def pause(self) -> None:
        if not self._paused:
            self._paused = True
            self._emit(PAUSE)

    def end(self) -> None:
        self._ended = True
        self._paused = True
        self._emit(ENDED)

    def read_frame(self) -> FrameData:
        self.frames_read += 1
        return FrameData.from_numpy(self.frame, timestamp=self.position, source=self.source_id)

    def close(self) -> None:
        self.closed = True
        super().close()


class FakeDetector:
    """Synchronous detector returning canned predictions."""

    def __init__(self, predictions=None, error: Optional[Exception] = None):
        self.predictions = predictions if predictions is not None else []
        self.error = error
        self.calls: List[tuple] = []

    def detect(self, frame: np.ndarray):
        self.calls.append(frame.shape)
        if self.error is not None:
            raise self.error
        return list(self.predictions)


class AsyncFakeDetector(FakeDetector):
    """Detector returning an awaitable, optionally held open by an event."""

    def __init__(self, predictions=None, error: Optional[Exception] = None):
        super().__init__(predictions, error)
        self.release: Optional[asyncio.Event] = None

    async def detect(self, frame: np.ndarray):
        self.calls.append(frame.shape)
        if self.release is not None:
            await self.release.wait()
        if self.error is not None:
            raise self.error
        return list(self.predictions)


def car(x, y, w, h, score=0.9, class_name="car") -> RawDetection:
    return RawDetection(class_name=class_name, score=score, bbox=BoundingBox(x, y, w, h))
