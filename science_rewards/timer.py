"""One-shot re-armable timer driven by an external tick.

The timer never schedules anything itself. The host calls ``tick()`` from
its periodic update and the timer decides whether the countdown has run
out. Calling ``start()`` while armed restarts the countdown, so a burst of
starts collapses into a single fire timed from the last one.

State machine:
    UNARMED --start()--> ARMED
    ARMED --start()--> ARMED (countdown restarted, no fire)
    ARMED --tick() after interval--> fires, UNARMED
"""

from __future__ import annotations

import time
from collections.abc import Callable
from enum import Enum


class TimerState(str, Enum):
    """Arm state of a OneShotTimer."""

    UNARMED = "unarmed"
    ARMED = "armed"


class OneShotTimer:
    """Single-fire countdown that is re-armed by the caller.

    Args:
        on_fire: Callback invoked once per expired arm cycle
        interval: Countdown length in seconds (must be > 0)
        clock: Time source returning seconds; defaults to time.monotonic
    """

    def __init__(
        self,
        on_fire: Callable[[], None],
        interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")
        self.on_fire = on_fire
        self.interval = interval
        self.clock = clock
        self.state = TimerState.UNARMED
        self.armed_at: float | None = None

    @property
    def armed(self) -> bool:
        return self.state is TimerState.ARMED

    @property
    def deadline(self) -> float | None:
        """Absolute time after which the timer fires, or None when unarmed."""
        if self.armed_at is None:
            return None
        return self.armed_at + self.interval

    def start(self) -> None:
        """Arm the timer, restarting the countdown if already armed."""
        self.armed_at = self.clock()
        self.state = TimerState.ARMED

    def tick(self, now: float | None = None) -> bool:
        """Advance the timer and fire if the countdown has expired.

        Args:
            now: Current time; read from the clock when omitted

        Returns:
            True if the timer fired on this tick
        """
        if self.state is not TimerState.ARMED:
            return False

        if now is None:
            now = self.clock()

        if now - self.armed_at <= self.interval:
            return False

        # Disarm before the callback so it may re-arm
        self.state = TimerState.UNARMED
        self.armed_at = None
        self.on_fire()
        return True
