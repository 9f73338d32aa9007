"""
Tests for the continuous detection scheduler.
"""

import asyncio

import pytest

from pipeline.scheduler import (
    PLAYBACK_FAILED_MESSAGE,
    ContinuousDetectionScheduler,
    LoopFrameClock,
)

from helpers import FakeVideoSurface, ManualFrameClock


class PassRecorder:
    """run_pass stand-in counting calls, optionally failing or blocking."""

    def __init__(self, fail_first: bool = False):
        self.calls = 0
        self.fail_first = fail_first
        self.gate = None

    async def __call__(self):
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_first and self.calls == 1:
            raise RuntimeError("detector exploded")


def _scheduler(surface=None, run_pass=None):
    surface = surface or FakeVideoSurface()
    clock = ManualFrameClock()
    run_pass = run_pass or PassRecorder()
    errors = []
    scheduler = ContinuousDetectionScheduler(surface, clock, run_pass, on_error=errors.append)
    return scheduler, surface, clock, run_pass, errors


class TestContinuousDetectionScheduler:

    def test_start_plays_and_arms_once(self):
        async def scenario():
            scheduler, surface, clock, _, _ = _scheduler()
            assert await scheduler.start() is True
            assert surface.paused is False
            assert len(clock.pending) == 1
            assert scheduler.state.armed

        asyncio.run(scenario())

    def test_start_then_immediate_stop_runs_nothing(self):
        async def scenario():
            scheduler, _, clock, run_pass, _ = _scheduler()
            await scheduler.start()
            scheduler.stop()
            await clock.tick(scheduler)
            assert run_pass.calls == 0
            assert clock.pending == []
            assert scheduler.running is False

        asyncio.run(scenario())

    def test_one_pass_per_frame(self):
        async def scenario():
            scheduler, _, clock, run_pass, _ = _scheduler()
            await scheduler.start()
            for _ in range(3):
                assert await clock.tick(scheduler) == 1
            assert run_pass.calls == 3
            assert scheduler.state.frame_counter == 3
            assert len(clock.pending) == 1

        asyncio.run(scenario())

    def test_start_twice_keeps_single_loop(self):
        async def scenario():
            scheduler, _, clock, _, _ = _scheduler()
            await scheduler.start()
            await scheduler.start()
            assert len(clock.pending) == 1

        asyncio.run(scenario())

    def test_pause_suspends_and_play_resumes_single_loop(self):
        async def scenario():
            scheduler, surface, clock, run_pass, _ = _scheduler()
            await scheduler.start()
            await clock.tick(scheduler)

            surface.pause()
            assert clock.pending == []
            assert scheduler.running is True
            assert await clock.tick(scheduler) == 0

            await surface.play()
            scheduler._handle_play()  # duplicate notification
            assert len(clock.pending) == 1

            await clock.tick(scheduler)
            assert run_pass.calls == 2

        asyncio.run(scenario())

    def test_pause_and_play_before_iteration_runs_keeps_single_loop(self):
        async def scenario():
            scheduler, surface, clock, run_pass, _ = _scheduler()
            run_pass.gate = asyncio.Event()
            await scheduler.start()

            clock.fire()
            surface.pause()
            await surface.play()
            assert clock.pending == []
            assert scheduler.state.armed

            await asyncio.sleep(0)
            assert run_pass.calls == 1
            assert clock.fire() == 0

            run_pass.gate.set()
            await scheduler.wait_idle()
            assert run_pass.calls == 1
            assert scheduler.state.frame_counter == 1
            assert len(clock.pending) == 1

        asyncio.run(scenario())

    def test_skipped_iteration_disarms(self):
        async def scenario():
            scheduler, surface, clock, run_pass, _ = _scheduler()
            await scheduler.start()
            clock.fire()
            surface.pause()
            await scheduler.wait_idle()

            assert run_pass.calls == 0
            assert scheduler.state.armed is False
            await surface.play()
            assert len(clock.pending) == 1

        asyncio.run(scenario())

    def test_paused_iteration_does_not_rearm(self):
        async def scenario():
            scheduler, surface, clock, run_pass, _ = _scheduler()
            await scheduler.start()
            surface._paused = True  # paused without notification
            await clock.tick(scheduler)
            assert run_pass.calls == 0
            assert clock.pending == []

        asyncio.run(scenario())

    def test_video_end_stops_loop(self):
        async def scenario():
            scheduler, surface, clock, run_pass, _ = _scheduler()
            await scheduler.start()
            await clock.tick(scheduler)
            surface.end()
            await clock.tick(scheduler)

            assert run_pass.calls == 1
            assert scheduler.running is False
            assert clock.pending == []

        asyncio.run(scenario())

    def test_pass_error_does_not_stop_loop(self):
        async def scenario():
            scheduler, _, clock, run_pass, _ = _scheduler(run_pass=PassRecorder(fail_first=True))
            await scheduler.start()
            await clock.tick(scheduler)
            await clock.tick(scheduler)
            assert run_pass.calls == 2
            assert scheduler.running is True

        asyncio.run(scenario())

    def test_playback_failure_reports_and_resets(self):
        async def scenario():
            scheduler, _, clock, run_pass, errors = _scheduler(FakeVideoSurface(fail_play=True))
            assert await scheduler.start() is False
            assert scheduler.running is False
            assert errors == [PLAYBACK_FAILED_MESSAGE]
            assert clock.pending == []

        asyncio.run(scenario())

    def test_stop_during_pass_prevents_rearm(self):
        async def scenario():
            scheduler, _, clock, run_pass, _ = _scheduler()
            run_pass.gate = asyncio.Event()
            await scheduler.start()

            clock.fire()
            await asyncio.sleep(0)
            assert scheduler.state.in_iteration is True

            scheduler.stop()
            run_pass.gate.set()
            await scheduler.wait_idle()

            assert run_pass.calls == 1
            assert clock.pending == []
            assert scheduler.state.armed is False

        asyncio.run(scenario())

    def test_stop_then_start_runs_single_loop(self):
        async def scenario():
            scheduler, _, clock, run_pass, _ = _scheduler()
            await scheduler.start()
            scheduler.stop()
            await scheduler.start()
            await clock.tick(scheduler)
            assert run_pass.calls == 1
            assert len(clock.pending) == 1

        asyncio.run(scenario())

    def test_close_detaches_listeners(self):
        async def scenario():
            scheduler, surface, clock, _, _ = _scheduler()
            await scheduler.start()
            scheduler.close()
            surface.pause()
            await surface.play()
            assert clock.pending == []

        asyncio.run(scenario())


class TestLoopFrameClock:
    def test_rejects_non_positive_fps(self):
        with pytest.raises(ValueError):
            LoopFrameClock(fps=0)

    def test_runs_on_event_loop(self):
        async def scenario():
            clock = LoopFrameClock(fps=200)
            fired = asyncio.Event()
            clock.call_on_next_frame(fired.set)
            await asyncio.wait_for(fired.wait(), timeout=1.0)

        asyncio.run(scenario())
