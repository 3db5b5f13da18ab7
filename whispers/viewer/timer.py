"""
Auto-Rotation Timer

Advances the viewer automatically while a whisper is open and drives the
circular countdown shown under it.

The timer is a two-state machine:
- IDLE: nothing scheduled
- RUNNING: a tick fires every TICK_MS milliseconds

Each tick adds TICK_MS / dwell_ms * 100 percent of progress. When the elapsed
time reaches the dwell time the progress rolls over to 0 and `on_expire`
fires (the controller wires it to a random navigation).

Scheduling goes through any object with
`call_later(delay_seconds, callback) -> handle` whose handle has `cancel()`.
The running asyncio event loop is such an object and is used by default.
"""

import asyncio
import logging
from enum import Enum
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


# Interval between progress updates
TICK_MS = 50


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def call_later(self, delay: float, callback: Callable[..., object], *args) -> Cancellable: ...


def default_scheduler() -> Scheduler:
    # Only valid from inside a running event loop (e.g. a FastAPI handler)
    return asyncio.get_running_loop()


class TimerState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"


class AutoRotationTimer:
    """
    Repeating countdown with rollover.

    Args:
        scheduler: Where ticks are scheduled
        dwell_ms: How long a whisper stays before the timer expires
        on_tick: Called with the new progress (0-100) after every tick
        on_expire: Called once per rollover, after progress went back to 0

    Raises:
        ValueError: If dwell_ms is not positive
    """

    def __init__(
        self,
        scheduler: Scheduler,
        dwell_ms: int,
        on_tick: Callable[[float], None] | None = None,
        on_expire: Callable[[], None] | None = None,
    ):
        if dwell_ms <= 0:
            raise ValueError("dwell_ms must be positive")

        self.dwell_ms = dwell_ms
        self._scheduler = scheduler
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._handle = None
        # Integer milliseconds, so rollover lands on an exact tick count
        self._elapsed_ms = 0

    @property
    def state(self) -> TimerState:
        return TimerState.RUNNING if self._handle is not None else TimerState.IDLE

    @property
    def is_running(self) -> bool:
        return self._handle is not None

    @property
    def progress(self) -> float:
        return self._elapsed_ms * 100 / self.dwell_ms

    @property
    def step(self) -> float:
        """Progress added by a single tick."""
        return TICK_MS * 100 / self.dwell_ms

    def start(self) -> None:
        """IDLE -> RUNNING. Starting a running timer changes nothing."""
        if self._handle is not None:
            return
        self._elapsed_ms = 0
        self._schedule()

    def stop(self) -> None:
        """RUNNING -> IDLE. No callback fires after this returns."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._elapsed_ms = 0

    def reset(self) -> None:
        """Restart the countdown from zero, keeping the tick interval alive."""
        self._elapsed_ms = 0

    def _schedule(self) -> None:
        self._handle = self._scheduler.call_later(TICK_MS / 1000, self._tick)

    def _tick(self) -> None:
        # Reschedule first so a callback calling stop() cancels the next tick
        self._schedule()

        self._elapsed_ms += TICK_MS
        if self._elapsed_ms >= self.dwell_ms:
            self._elapsed_ms = 0
            logger.debug(f"Dwell time of {self.dwell_ms}ms elapsed, rotating")
            if self._on_tick:
                self._on_tick(0.0)
            if self._on_expire:
                self._on_expire()
            return

        if self._on_tick:
            self._on_tick(self.progress)
