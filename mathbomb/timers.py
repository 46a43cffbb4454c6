"""Logical clocks of a quiz session.

Five clocks drive a session: the one-second main tick, the fuse and pulse
animations, and the one-shot flash timeout with its fade steps. Clocks are not
threads. Each one is a ``ScheduledTimer`` returned by the session; the
``TimerQueue`` turns armed timers into ``TimerFired`` events in due-time
order, so the session sees a single serialized stream.

Time comes from an injected ``Clock``. Tests use a fake clock and never sleep.
"""

from __future__ import annotations

import heapq
import itertools
import time
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from .quiz_core import ColorOverride


class Clock(Protocol):
    """Monotonic clock abstraction.

    Core logic depends on this interface rather than calling real time directly.
    """

    def now(self) -> float:
        """Return monotonic seconds."""


class RealClock:
    """Production clock backed by time.monotonic()."""

    def now(self) -> float:
        return time.monotonic()


class TimerKind(str, Enum):
    TICK = "tick"
    FUSE = "fuse"
    PULSE = "pulse"
    FLASH_DONE = "flash_done"
    FLASH_FADE = "flash_fade"


TIMER_PERIODS_S: dict[TimerKind, float] = {
    TimerKind.TICK: 1.0,
    TimerKind.FUSE: 0.15,
    TimerKind.PULSE: 0.15,
    TimerKind.FLASH_DONE: 1.0,
    TimerKind.FLASH_FADE: 0.3,
}

# Clocks that keep firing for the whole program once armed.
ANIMATION_TIMERS = (TimerKind.FUSE, TimerKind.PULSE)


@dataclass(frozen=True, slots=True)
class ScheduledTimer:
    kind: TimerKind
    delay_s: float
    token: int = 0  # answer serial for flash timers


@dataclass(frozen=True, slots=True)
class TimerFired:
    kind: TimerKind
    token: int = 0


def schedule(kind: TimerKind, *, token: int = 0) -> ScheduledTimer:
    return ScheduledTimer(kind=kind, delay_s=TIMER_PERIODS_S[kind], token=token)


class TimerQueue:
    """Merges armed timers into one due-time ordered event stream.

    Timers due at the same instant fire in the order they were armed.
    """

    def __init__(self, clock: Clock) -> None:
        self._clock = clock
        self._heap: list[tuple[float, int, TimerFired]] = []
        self._seq = itertools.count()

    def __len__(self) -> int:
        return len(self._heap)

    def arm(self, timer: ScheduledTimer) -> None:
        if timer.delay_s < 0:
            raise ValueError("delay_s must be >= 0")
        due = self._clock.now() + float(timer.delay_s)
        heapq.heappush(self._heap, (due, next(self._seq), TimerFired(timer.kind, timer.token)))

    def time_until_next(self) -> float | None:
        """Seconds until the earliest timer is due (0.0 if overdue), None if idle."""
        if not self._heap:
            return None
        return max(0.0, self._heap[0][0] - self._clock.now())

    def pop_due(self) -> TimerFired | None:
        if not self._heap or self._heap[0][0] > self._clock.now():
            return None
        _, _, fired = heapq.heappop(self._heap)
        return fired


def next_remaining(remaining_s: int, *, suspended: bool) -> int:
    """Main tick: one second off the budget unless flash feedback is showing."""
    return remaining_s if suspended else remaining_s - 1


def next_fuse_frame(frame_index: int, frame_count: int) -> int:
    return (frame_index + 1) % frame_count


def next_pulse_override(
    remaining_s: int, override: ColorOverride, *, threshold_s: int
) -> ColorOverride:
    """Blink the bar red during the final seconds; otherwise leave it alone."""
    if remaining_s > threshold_s:
        return override
    if override is ColorOverride.NONE:
        return ColorOverride.BRIGHT_NEGATIVE
    return ColorOverride.NONE


def next_fade_step(steps_left: int) -> tuple[int, bool]:
    """Return (steps_left, keep_fading).

    The color override is cleared once steps_left reaches zero.
    """
    if steps_left <= 0:
        return 0, False
    steps_left -= 1
    return steps_left, steps_left > 0
