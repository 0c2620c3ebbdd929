"""
clock.py: Time sources and the per-frame delta used by the physics.

All times are milliseconds. Physics steps are measured in "ticks": elapsed
time divided by the nominal frame period, so a 60 Hz host produces dt ~ 1.0.
"""

import time
from typing import Callable, Optional, Tuple

from .constants import FRAME_PERIOD_MS, MAX_DT_TICKS


class MonotonicClock:
    """Monotonic milliseconds for the game loop and spawn timing."""

    def now(self) -> float:
        return time.monotonic() * 1000.0


class WallClock:
    """Epoch milliseconds, for timestamps that must survive restarts."""

    def now(self) -> float:
        return time.time() * 1000.0


class FrameClock:
    """
    Produces (now, dt_ticks) once per frame.
    The first frame has dt 0; later deltas are clamped to [0, max_dt_ticks].
    """

    def __init__(
        self,
        time_source: Optional[Callable[[], float]] = None,
        frame_period_ms: float = FRAME_PERIOD_MS,
        max_dt_ticks: float = MAX_DT_TICKS,
    ):
        if frame_period_ms <= 0:
            raise ValueError("frame_period_ms must be > 0")
        self._time_source = time_source or MonotonicClock().now
        self.frame_period_ms = frame_period_ms
        self.max_dt_ticks = max_dt_ticks
        self._last_ms: Optional[float] = None

    def now(self) -> float:
        return self._time_source()

    def tick(self) -> Tuple[float, float]:
        """Advance the clock and return the frame time and its scaled delta."""
        now = self._time_source()
        if self._last_ms is None:
            dt_ticks = 0.0
        else:
            elapsed = max(0.0, now - self._last_ms)
            dt_ticks = min(elapsed / self.frame_period_ms, self.max_dt_ticks)
        self._last_ms = now
        return now, dt_ticks
