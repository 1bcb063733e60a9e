"""
Frame Scheduling

Ticks run cooperatively: each tick schedules the next one and returns,
yielding to the host loop in between. There is no worker thread.
"""

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

FrameCallback = Callable[[], None]


def wall_clock_ms() -> float:
    """Current wall-clock time in milliseconds"""
    return time.time() * 1000.0


class FrameScheduler(ABC):
    """Host animation scheduler (requestAnimationFrame equivalent)"""

    @abstractmethod
    def request_frame(self, callback: FrameCallback) -> Any:
        """Run `callback` on the next frame; returns a cancellable handle"""

    @abstractmethod
    def cancel_frame(self, handle: Any):
        """Cancel a pending frame; unknown or already-run handles are ignored"""


class AsyncioFrameScheduler(FrameScheduler):
    """
    Frame scheduler on the asyncio event loop

    Frames are spaced `1 / frame_rate` seconds apart via `loop.call_later`.
    """

    def __init__(self, frame_rate: float = 60.0, loop: Optional[asyncio.AbstractEventLoop] = None):
        if frame_rate <= 0:
            raise ValueError(f"Frame rate must be > 0, got {frame_rate}")
        self.frame_rate = frame_rate
        self.frame_interval = 1.0 / frame_rate
        self._loop = loop

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def request_frame(self, callback: FrameCallback) -> asyncio.TimerHandle:
        return self._get_loop().call_later(self.frame_interval, callback)

    def cancel_frame(self, handle: Any):
        if handle is not None:
            handle.cancel()


class ManualFrameScheduler(FrameScheduler):
    """
    Scheduler driven by hand, one frame per `step()`

    Usage:
        clock = ManualClock()
        scheduler = ManualFrameScheduler(clock=clock, frame_ms=16)
        simulation = RouteSimulation(path, scheduler=scheduler, clock=clock)
        simulation.start()
        scheduler.run_until_idle()
    """

    def __init__(self, clock: Optional["ManualClock"] = None, frame_ms: float = 0.0):
        self.clock = clock
        self.frame_ms = frame_ms
        self.frames_run = 0
        self._next_handle = 0
        self._pending: Dict[int, FrameCallback] = {}

    def request_frame(self, callback: FrameCallback) -> int:
        self._next_handle += 1
        self._pending[self._next_handle] = callback
        return self._next_handle

    def cancel_frame(self, handle: Any):
        self._pending.pop(handle, None)

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def peek(self) -> Optional[FrameCallback]:
        """Oldest pending callback without running it"""
        if not self._pending:
            return None
        return self._pending[min(self._pending)]

    def step(self) -> int:
        """
        Advance the clock by one frame and run the callbacks queued so far

        Callbacks requested while stepping run on the following step.
        """
        if self.clock is not None and self.frame_ms:
            self.clock.advance(self.frame_ms)

        due = sorted(self._pending.items())
        self._pending.clear()
        for _, callback in due:
            callback()

        self.frames_run += 1
        return len(due)

    def run_until_idle(self, max_frames: int = 100000) -> int:
        """Step until nothing is pending; returns frames run"""
        frames = 0
        while self._pending and frames < max_frames:
            self.step()
            frames += 1
        return frames


class ManualClock:
    """Millisecond clock advanced by hand"""

    def __init__(self, start_ms: float = 0.0):
        self.now_ms = start_ms

    def __call__(self) -> float:
        return self.now_ms

    def advance(self, ms: float) -> float:
        self.now_ms += ms
        return self.now_ms

    def set(self, ms: float):
        self.now_ms = ms
