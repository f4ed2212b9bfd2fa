"""Timer abstraction for the debounce and rate-limit logic.

Components never call ``asyncio`` timers directly; they receive a ``Timers``
instance so a session owns its own clock and tests can drive a fake one.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Protocol


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


class Timers(Protocol):
    def now_ms(self) -> float: ...

    def epoch_ms(self) -> float: ...

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> TimerHandle: ...


class LoopTimers:
    """Timers backed by the running asyncio event loop.

    ``now_ms`` reads the loop's monotonic clock, the same one ``call_later``
    schedules against. ``epoch_ms`` is wall-clock time for timestamps only.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now_ms(self) -> float:
        return self.loop.time() * 1000.0

    def epoch_ms(self) -> float:
        return time.time() * 1000.0

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
        return self.loop.call_later(max(0.0, delay_ms) / 1000.0, callback)


class ScheduledTask:
    """A single cancellable scheduled callback.

    Re-arming cancels the previous handle first, so at most one callback is
    ever pending per task.
    """

    def __init__(self, timers: Timers) -> None:
        self._timers = timers
        self._handle: TimerHandle | None = None

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def arm(self, delay_ms: float, callback: Callable[[], None]) -> None:
        self.cancel()

        def _fire() -> None:
            self._handle = None
            callback()

        self._handle = self._timers.call_later(delay_ms, _fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
