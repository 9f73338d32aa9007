"""
Media surface interface.

A video surface presents frames of a video over time and exposes the
playback controls the continuous detector needs:
- current playback position
- paused / ended state
- play and pause requests
- play / pause / ended notifications
- native frame size and the currently presented frame
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Dict, List

from models.frame import FrameData

VIDEO_EXTENSIONS = (".mp4", ".webm", ".mov", ".avi", ".mkv")

PLAY = "play"
PAUSE = "pause"
ENDED = "ended"


class MediaKind(str, Enum):
    IMAGE = "image"
    VIDEO = "video"


def detect_media_kind(path: str) -> MediaKind:
    """A media reference is a video when it mentions a known video extension."""
    lowered = path.lower()
    if any(ext in lowered for ext in VIDEO_EXTENSIONS):
        return MediaKind.VIDEO
    return MediaKind.IMAGE


class VideoSurface(ABC):
    """
    Abstract base class for video playback surfaces.

    Lifecycle:
        1. Create the surface for a media reference
        2. Register listeners for play/pause/ended
        3. play()/pause() and read_frame() while presenting
        4. close() to release resources
    """

    def __init__(self, source_id: str = "video"):
        self._source_id = source_id
        self._listeners: Dict[str, List[Callable[[], None]]] = {PLAY: [], PAUSE: [], ENDED: []}

    @property
    def source_id(self) -> str:
        return self._source_id

    @property
    @abstractmethod
    def current_time(self) -> float:
        """Playback position in seconds."""

    @property
    @abstractmethod
    def paused(self) -> bool:
        """Whether playback is paused."""

    @property
    @abstractmethod
    def ended(self) -> bool:
        """Whether playback reached the end of the media."""

    @property
    @abstractmethod
    def width(self) -> int:
        """Native frame width in pixels."""

    @property
    @abstractmethod
    def height(self) -> int:
        """Native frame height in pixels."""

    @abstractmethod
    async def play(self) -> None:
        """
        Request playback.

        Raises:
            PlaybackFailure: If playback cannot start.
        """

    @abstractmethod
    def pause(self) -> None:
        """Pause playback."""

    @abstractmethod
    def read_frame(self) -> FrameData:
        """
        Return the currently presented frame at native resolution.

        Raises:
            RegionSampleFailure: If the frame pixels cannot be read.
        """

    def close(self) -> None:
        """Release resources. Safe to call multiple times."""
        for listeners in self._listeners.values():
            listeners.clear()

    def add_listener(self, event: str, callback: Callable[[], None]) -> None:
        self._listeners[event].append(callback)

    def remove_listener(self, event: str, callback: Callable[[], None]) -> None:
        try:
            self._listeners[event].remove(callback)
        except ValueError:
            pass

    def _emit(self, event: str) -> None:
        for callback in list(self._listeners[event]):
            try:
                callback()
            except Exception as e:
                logging.warning(f"Listener error on '{event}': {e}")
