"""
Detection session state machine for one media item.

States:
    IDLE      -> no media loaded
    READY     -> media loaded, no completed pass yet
    DETECTING -> a one-shot pass (or the first scheduled pass) is in flight
    ANALYZED  -> records from the last completed pass are available

All state lives in one immutable snapshot that is replaced wholesale on
every transition, so readers never observe a partially updated session.
Passes are tagged with the session generation they started in; results
that arrive after the media changed are discarded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from models.vehicle import VehicleRecord


class SessionState(str, Enum):
    IDLE = "idle"
    READY = "ready"
    DETECTING = "detecting"
    ANALYZED = "analyzed"


def format_video_time(seconds: float) -> str:
    """Format a playback position as MM:SS.cc, or HH:MM:SS.cc past one hour."""
    hours = int(seconds // 3600)
    minutes = int((seconds % 3600) // 60)
    secs = int(seconds % 60)
    centis = int((seconds % 1) * 100)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{secs:02d}.{centis:02d}"
    return f"{minutes:02d}:{secs:02d}.{centis:02d}"


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a detection session."""
    generation: int = 0
    state: SessionState = SessionState.IDLE
    media_url: Optional[str] = None
    is_video: bool = False
    records: Tuple[VehicleRecord, ...] = ()
    has_attempted_detection: bool = False
    last_timestamp: Optional[float] = None
    # State to return to when an in-flight pass fails.
    resume_state: SessionState = SessionState.IDLE

    @property
    def vehicle_count(self) -> int:
        return len(self.records)

    @property
    def last_timestamp_label(self) -> Optional[str]:
        if self.last_timestamp is None:
            return None
        return format_video_time(self.last_timestamp)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "generation": self.generation,
            "state": self.state.value,
            "media_url": self.media_url,
            "is_video": self.is_video,
            "records": [r.to_dict() for r in self.records],
            "vehicle_count": self.vehicle_count,
            "has_attempted_detection": self.has_attempted_detection,
            "last_timestamp": self.last_timestamp,
            "last_timestamp_label": self.last_timestamp_label,
        }


class DetectionSession:
    """
    Owns the detection state of the active media item.

    Example:
        session = DetectionSession()
        session.load_media("street.jpg", is_video=False)
        token = session.begin_pass()
        session.complete_pass(token, records)
    """

    def __init__(self) -> None:
        self._snapshot = SessionSnapshot()

    @property
    def generation(self) -> int:
        return self._snapshot.generation

    @property
    def state(self) -> SessionState:
        return self._snapshot.state

    @property
    def records(self) -> Tuple[VehicleRecord, ...]:
        return self._snapshot.records

    @property
    def has_attempted_detection(self) -> bool:
        return self._snapshot.has_attempted_detection

    @property
    def is_video(self) -> bool:
        return self._snapshot.is_video

    @property
    def last_timestamp(self) -> Optional[float]:
        return self._snapshot.last_timestamp

    def snapshot(self) -> SessionSnapshot:
        return self._snapshot

    def load_media(self, media_url: str, is_video: bool) -> int:
        """
        Switch to a new media item, discarding all prior results.

        Returns:
            The new session generation.
        """
        self._snapshot = SessionSnapshot(
            generation=self._snapshot.generation + 1,
            state=SessionState.READY,
            media_url=media_url,
            is_video=is_video,
        )
        logging.info(
            f"Session reset: generation={self._snapshot.generation}, "
            f"media={media_url}, video={is_video}"
        )
        return self._snapshot.generation

    def clear(self) -> None:
        """Unload the media item."""
        self._snapshot = SessionSnapshot(generation=self._snapshot.generation + 1)

    def begin_pass(self, scheduled: bool = False) -> int:
        """
        Enter DETECTING.

        A scheduled video pass over an analyzed session leaves the state at
        ANALYZED so the previous records stay presented while it runs.

        Returns:
            Generation token to hand back on completion or failure.

        Raises:
            RuntimeError: If no media is loaded.
        """
        current = self._snapshot
        if current.state is SessionState.IDLE:
            raise RuntimeError("No media loaded")
        if scheduled and current.state is SessionState.ANALYZED:
            return current.generation
        if current.state is not SessionState.DETECTING:
            self._snapshot = replace(
                current, state=SessionState.DETECTING, resume_state=current.state
            )
        return current.generation

    def complete_pass(
        self,
        token: int,
        records: Sequence[VehicleRecord],
        timestamp: Optional[float] = None,
    ) -> bool:
        """
        Replace the record set with the results of a finished pass.

        Returns:
            False if the pass belongs to an older generation and was discarded.
        """
        current = self._snapshot
        if token != current.generation:
            logging.debug(f"Discarding stale pass result (generation {token} != {current.generation})")
            return False
        self._snapshot = replace(
            current,
            state=SessionState.ANALYZED,
            records=tuple(records),
            has_attempted_detection=True,
            last_timestamp=timestamp if timestamp is not None else current.last_timestamp,
            resume_state=SessionState.ANALYZED,
        )
        return True

    def fail_pass(self, token: int) -> bool:
        """
        Leave DETECTING after a failed pass, keeping the previous records.

        Returns:
            False if the pass belongs to an older generation.
        """
        current = self._snapshot
        if token != current.generation:
            return False
        self._snapshot = replace(
            current,
            state=current.resume_state,
            has_attempted_detection=True,
        )
        return True
