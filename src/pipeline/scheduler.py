"""
Continuous detection scheduler for video playback.

Runs one detection pass per presented frame on the event loop. Each
iteration is posted to a frame clock and re-posted only after the
previous iteration finished, so at most one iteration is pending or
running at any time. The ``running`` flag lives in a state object shared
by the control methods and the iteration callback and is checked at the
top of every iteration.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Protocol

from media.base import PAUSE, PLAY, VideoSurface

PLAYBACK_FAILED_MESSAGE = (
    "Could not start video playback for auto-detection. "
    "Try playing the video manually first."
)


class FrameHandle(Protocol):
    def cancel(self) -> None:
        ...


class FrameClock(Protocol):
    """Execute-on-next-frame primitive."""

    def call_on_next_frame(self, callback: Callable[[], None]) -> FrameHandle:
        ...


class LoopFrameClock:
    """Frame clock backed by the running asyncio event loop."""

    def __init__(self, fps: float = 30.0):
        if fps <= 0:
            raise ValueError("fps must be positive")
        self.interval = 1.0 / fps

    def call_on_next_frame(self, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return asyncio.get_running_loop().call_later(self.interval, callback)


@dataclass
class SchedulerState:
    """
    Shared state of the continuous loop.

    Attributes:
        running: Continuous mode is on; the only authority for re-arming.
        frame_counter: Number of iterations that ran a detection pass.
        pending: Handle of the scheduled next iteration, if any.
        in_iteration: An iteration has been spawned and has not finished.
    """
    running: bool = False
    frame_counter: int = 0
    pending: Optional[Any] = None
    in_iteration: bool = False

    @property
    def armed(self) -> bool:
        return self.pending is not None or self.in_iteration


class ContinuousDetectionScheduler:
    """
    Drives detection passes while a video plays.

    Example:
        scheduler = ContinuousDetectionScheduler(surface, LoopFrameClock(30), run_pass)
        await scheduler.start()
        ...
        scheduler.stop()
    """

    def __init__(
        self,
        surface: VideoSurface,
        clock: FrameClock,
        run_pass: Callable[[], Awaitable[Any]],
        on_error: Optional[Callable[[str], None]] = None,
    ):
        """
        Args:
            surface: Video being presented.
            clock: Frame clock used to schedule iterations.
            run_pass: Coroutine function running one detection pass on the current frame.
            on_error: Receives user-facing error messages.
        """
        self._surface = surface
        self._clock = clock
        self._run_pass = run_pass
        self._on_error = on_error
        self.state = SchedulerState()
        self._task: Optional[asyncio.Future] = None
        self._closed = False

        surface.add_listener(PLAY, self._handle_play)
        surface.add_listener(PAUSE, self._handle_pause)

    @property
    def running(self) -> bool:
        return self.state.running

    async def start(self) -> bool:
        """
        Turn continuous mode on.

        Starts playback first when the video is paused. No-op if already running.

        Returns:
            False if playback could not be started.
        """
        state = self.state
        if state.running:
            return True
        if self._closed:
            raise RuntimeError("Scheduler is closed")

        state.running = True
        logging.info("Continuous detection started")

        if self._surface.paused:
            try:
                await self._surface.play()
            except Exception as e:
                state.running = False
                logging.error(f"Error playing video: {e}")
                self._report(PLAYBACK_FAILED_MESSAGE)
                return False
            if not state.running:
                return False

        self._arm()
        return True

    def stop(self) -> None:
        """Turn continuous mode off and cancel the pending iteration. Idempotent."""
        state = self.state
        was_running = state.running
        state.running = False
        self._cancel_pending()
        if was_running:
            logging.info(f"Continuous detection stopped after {state.frame_counter} frames")

    def close(self) -> None:
        """Stop and detach from the surface."""
        self.stop()
        self._surface.remove_listener(PLAY, self._handle_play)
        self._surface.remove_listener(PAUSE, self._handle_pause)
        self._closed = True

    async def wait_idle(self) -> None:
        """Wait for the iteration currently running (if any) to finish."""
        task = self._task
        if task is not None and not task.done():
            await asyncio.shield(task)

    def _arm(self) -> None:
        state = self.state
        if not state.running or state.armed:
            return
        state.pending = self._clock.call_on_next_frame(self._on_frame)

    def _cancel_pending(self) -> None:
        pending = self.state.pending
        self.state.pending = None
        if pending is not None:
            pending.cancel()

    def _on_frame(self) -> None:
        # The loop stays armed until the spawned iteration has finished.
        self.state.pending = None
        self.state.in_iteration = True
        self._task = asyncio.ensure_future(self._iterate())

    async def _iterate(self) -> None:
        state = self.state
        surface = self._surface
        try:
            if not await self._run_iteration():
                return
        finally:
            state.in_iteration = False

        if surface.ended:
            state.running = False
            logging.info("Video ended, continuous detection finished")
            return
        if state.running and not surface.paused:
            self._arm()

    async def _run_iteration(self) -> bool:
        """Run one detection pass; False when the loop must not re-arm."""
        state = self.state
        surface = self._surface

        if surface.ended:
            if state.running:
                logging.info("Video ended, continuous detection finished")
            state.running = False
            return False
        if not state.running or surface.paused:
            return False

        state.frame_counter += 1
        try:
            await self._run_pass()
        except Exception as e:
            logging.error(f"Error during continuous video detection: {e}")
        return True

    def _handle_play(self) -> None:
        if self.state.running:
            self._arm()

    def _handle_pause(self) -> None:
        # Pausing suspends the loop; continuous mode stays on.
        self._cancel_pending()

    def _report(self, message: str) -> None:
        if self._on_error is not None:
            self._on_error(message)
