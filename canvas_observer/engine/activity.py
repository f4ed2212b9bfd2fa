"""ActivityMonitor — Idle/Active state machine with a debounce timeout.

IDLE --event--> ACTIVE (notify True, arm timeout)
ACTIVE --event--> ACTIVE (re-arm timeout)
ACTIVE --timeout--> IDLE (notify False, then fire on_idle)
"""

from __future__ import annotations

import logging

from canvas_observer.engine.entities import ActivityPhase
from canvas_observer.engine.events import Channel
from canvas_observer.engine.timers import ScheduledTask, Timers

logger = logging.getLogger(__name__)


class ActivityMonitor:
    def __init__(self, timers: Timers, timeout_ms: float = 2000.0) -> None:
        self._timers = timers
        self._timeout_ms = timeout_ms
        self._timeout = ScheduledTask(timers)
        self.phase = ActivityPhase.IDLE
        self.last_activity_ms: float | None = None
        # True on Idle -> Active, False on Active -> Idle
        self.changes: Channel[bool] = Channel("activity")
        # Fired once per Active -> Idle transition, after `changes`
        self.idle: Channel[float] = Channel("idle")

    @property
    def is_active(self) -> bool:
        return self.phase == ActivityPhase.ACTIVE

    @property
    def timer_pending(self) -> bool:
        return self._timeout.pending

    def record_activity(self) -> None:
        self.last_activity_ms = self._timers.now_ms()
        if self.phase == ActivityPhase.IDLE:
            self.phase = ActivityPhase.ACTIVE
            logger.debug("Student started drawing")
            self.changes.emit(True)
        self._timeout.arm(self._timeout_ms, self._on_timeout)

    def _on_timeout(self) -> None:
        self.phase = ActivityPhase.IDLE
        logger.debug("Student stopped drawing for %.0fms", self._timeout_ms)
        self.changes.emit(False)
        self.idle.emit(self._timers.now_ms())

    def reset(self) -> None:
        """Cancel the timeout and return to IDLE without firing on_idle."""
        self._timeout.cancel()
        if self.phase == ActivityPhase.ACTIVE:
            self.phase = ActivityPhase.IDLE
            self.changes.emit(False)

    def dispose(self) -> None:
        self._timeout.cancel()
        self.changes.clear()
        self.idle.clear()
