"""UpdateScheduler — decides when, and at what fidelity, a canvas snapshot goes out.

Per event:
  CLEAR / PAUSE        -> cancel any pending emission, emit now at high fidelity
  elapsed >= interval  -> emit now (active or idle fidelity)
  nothing pending      -> arm one delayed emission for the remaining interval
  already pending      -> drop the event; the pending emission sends the latest image

Only one delayed emission can exist at a time (``ScheduledTask``), so two
rate-limited emissions are never closer than ``min_update_interval_ms``.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from canvas_observer.engine.config import ObserverConfig
from canvas_observer.engine.entities import CanvasEventKind, VisionUpdate
from canvas_observer.engine.timers import ScheduledTask, Timers

logger = logging.getLogger(__name__)

# (image, quality 0-1) -> encoded image
Encoder = Callable[[str, float], str]

_HIGH_FIDELITY = {CanvasEventKind.CLEAR, CanvasEventKind.PAUSE}


def context_label(kind: CanvasEventKind, detail: str | None = None, *, delayed: bool = False) -> str:
    """Machine-readable label describing what triggered an emission."""
    if kind == CanvasEventKind.STROKE_END:
        return "stroke_drawing" if delayed else "stroke_completed"
    if kind == CanvasEventKind.TOOL_CHANGE:
        return f"switched_to_{detail or 'unknown'}"
    if kind == CanvasEventKind.MANIPULATIVE_MOVE:
        return f"moved_{detail}" if detail else "moved_manipulative"
    if kind == CanvasEventKind.CLEAR:
        return "canvas_cleared"
    return "detailed_analysis"


class UpdateScheduler:
    def __init__(
        self,
        timers: Timers,
        encoder: Encoder,
        on_emit: Callable[[VisionUpdate], None],
        is_active: Callable[[], bool],
        problem_image: str = "",
        config: ObserverConfig | None = None,
    ) -> None:
        self.config = config or ObserverConfig()
        self._timers = timers
        self._encoder = encoder
        self._on_emit = on_emit
        self._is_active = is_active
        self.problem_image = problem_image

        self._delayed = ScheduledTask(timers)
        self.last_sent_ms: float | None = None
        # Latest (image, context) seen while an emission is pending
        self._pending_image = ""
        self._pending_context = ""
        self.emitted = 0
        self.dropped = 0

    @property
    def pending(self) -> bool:
        return self._delayed.pending

    def on_canvas_event(self, kind: CanvasEventKind, canvas_image: str, detail: str | None = None) -> None:
        if kind in _HIGH_FIDELITY:
            self._delayed.cancel()
            self._emit(canvas_image, context_label(kind, detail), self.config.high_quality)
            return

        now = self._timers.now_ms()
        interval = self.config.min_update_interval_ms
        elapsed = interval if self.last_sent_ms is None else now - self.last_sent_ms

        if elapsed >= interval:
            self._emit(canvas_image, context_label(kind, detail), self._current_quality())
        elif not self._delayed.pending:
            self._pending_image = canvas_image
            self._pending_context = context_label(kind, detail, delayed=True)
            self._delayed.arm(interval - elapsed, self._fire_delayed)
            logger.debug("Rate limited %s, delaying %.0fms", kind.value, interval - elapsed)
        else:
            # Coalesced into the pending emission
            self._pending_image = canvas_image
            self._pending_context = context_label(kind, detail, delayed=True)
            self.dropped += 1
            logger.debug("Dropped %s, emission already pending", kind.value)

    def force_update(self, canvas_image: str) -> None:
        """Emit immediately at high fidelity, bypassing the rate limit."""
        self._delayed.cancel()
        self._emit(canvas_image, "forced_update", self.config.high_quality)

    def update_problem_image(self, problem_image: str) -> bool:
        """Replace the problem image. An image the encoder rejects keeps the previous one."""
        if not isinstance(problem_image, str):
            logger.warning("Ignoring problem image of type %s", type(problem_image).__name__)
            return False
        if problem_image:
            try:
                self._encoder(problem_image, self.config.high_quality)
            except Exception as e:
                logger.warning("Ignoring undecodable problem image: %s", e)
                return False
        self.problem_image = problem_image
        logger.info("Problem image updated (%d chars)", len(problem_image))
        return True

    def cancel(self) -> None:
        self._delayed.cancel()

    def _current_quality(self) -> float:
        return self.config.active_quality if self._is_active() else self.config.idle_quality

    def _fire_delayed(self) -> None:
        self._emit(self._pending_image, self._pending_context, self._current_quality())

    def _encode_problem(self, quality: float) -> str:
        if not self.problem_image:
            return ""
        try:
            return self._encoder(self.problem_image, quality)
        except Exception as e:
            # Canvas still goes out without the problem
            logger.warning("Failed to encode problem image, sending canvas only: %s", e)
            return ""

    def _emit(self, canvas_image: str, context: str, quality: float) -> None:
        self.last_sent_ms = self._timers.now_ms()
        try:
            encoded_canvas = self._encoder(canvas_image, quality)
        except Exception as e:
            logger.warning("Failed to encode vision update %s: %s", context, e)
            return
        update = VisionUpdate(
            problem_image=self._encode_problem(quality),
            canvas_image=encoded_canvas,
            timestamp_ms=self._timers.epoch_ms(),
            context=context,
            quality=quality,
        )
        self.emitted += 1
        logger.info("Vision update: %s (quality %.1f)", context, quality)
        self._on_emit(update)
