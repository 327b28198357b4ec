"""Elapsed-time helpers: the frame Clock and the countdown Timer.

Every countdown in the game (damage pause, invincibility, shoot cooldown,
stomp and break animations) is a Timer owned by exactly one object and
ticked once per frame by that object's update step.
"""

from dataclasses import dataclass
from typing import Optional


class Clock:
    """Turns successive frame timestamps into a bounded delta.

    The first tick after construction or reset() yields 0, so time spent
    outside the loop (menus, game over screen) never leaks into a step.
    """

    def __init__(self, max_delta: float = 0.1):
        self.max_delta = max_delta
        self._last: Optional[float] = None

    def tick(self, now: float) -> float:
        """Return seconds since the previous tick, clamped to [0, max_delta].

        Args:
            now: Current timestamp in seconds (monotonic).
        """
        if self._last is None:
            delta = 0.0
        else:
            delta = min(max(now - self._last, 0.0), self.max_delta)
        self._last = now
        return delta

    def reset(self) -> None:
        """Forget the previous timestamp (call when the loop resumes)."""
        self._last = None


@dataclass
class Timer:
    """Countdown over elapsed seconds."""

    duration: float
    remaining: float = 0.0

    def start(self, duration: Optional[float] = None) -> None:
        """(Re)start the countdown, optionally with a new duration."""
        if duration is not None:
            self.duration = duration
        self.remaining = self.duration

    def clear(self) -> None:
        self.remaining = 0.0

    def tick(self, dt: float) -> bool:
        """Advance by dt. Returns True only on the tick the timer runs out."""
        if self.remaining <= 0.0:
            return False
        self.remaining = max(self.remaining - dt, 0.0)
        return self.remaining == 0.0

    @property
    def active(self) -> bool:
        return self.remaining > 0.0

    @property
    def expired(self) -> bool:
        return not self.active

    @property
    def progress(self) -> float:
        """Fraction of the countdown still remaining (1.0 right after start)."""
        if self.duration <= 0.0:
            return 0.0
        return self.remaining / self.duration
