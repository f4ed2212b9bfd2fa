"""CanvasSession — one observation pipeline per canvas, with an explicit lifecycle.

    stroke/tool/manipulative/clear
        │
        ├── ShapeClassifier ──────────────► shapes
        ├── ActivityMonitor ──idle──► PAUSE ┐
        └── UpdateScheduler ◄───────────────┘
                │ VisionUpdate
        SnapshotDeduper
                │
        ObservationQueue ──analyzer──────► observations

All state lives on the instance; ``dispose()`` cancels both timers and the
queue worker so no callback touches a torn-down session.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable
from functools import partial
from typing import Any

from canvas_observer.engine.activity import ActivityMonitor
from canvas_observer.engine.config import ObserverConfig
from canvas_observer.engine.dedupe import SnapshotDeduper
from canvas_observer.engine.drawing_analysis import analyze_drawing
from canvas_observer.engine.entities import CanvasEventKind, DetectedShape, DrawingAnalysis, Stroke, VisionUpdate
from canvas_observer.engine.events import Channel
from canvas_observer.engine.observation_queue import Analyzer, ObservationQueue
from canvas_observer.engine.shape_classifier import classify
from canvas_observer.engine.timers import LoopTimers, Timers
from canvas_observer.engine.update_scheduler import Encoder, UpdateScheduler
from canvas_observer.models.analysis import Observation
from canvas_observer.utils.imaging import compress_image

logger = logging.getLogger(__name__)


def default_encoder(config: ObserverConfig) -> Encoder:
    return partial(
        compress_image,
        low_quality_cutoff=config.low_quality_cutoff,
        active_max_width=config.active_max_width,
        idle_max_width=config.idle_max_width,
    )


class CanvasSession:
    def __init__(
        self,
        analyzer: Analyzer,
        problem_image: str = "",
        *,
        timers: Timers | None = None,
        encoder: Encoder | None = None,
        config: ObserverConfig | None = None,
        session_id: str = "",
    ) -> None:
        self.config = config or ObserverConfig()
        self.session_id = session_id
        self._timers = timers or LoopTimers()
        self._latest_canvas = ""
        self._disposed = False
        self.strokes: list[Stroke] = []

        self.shapes: Channel[DetectedShape] = Channel("shapes")
        self.activity = ActivityMonitor(self._timers, self.config.activity_timeout_ms)
        self.deduper = SnapshotDeduper(self.config.dedupe_byte_threshold)
        self.queue = ObservationQueue(analyzer)
        self.scheduler = UpdateScheduler(
            timers=self._timers,
            encoder=encoder or default_encoder(self.config),
            on_emit=self._forward,
            is_active=lambda: self.activity.is_active,
            problem_image=problem_image,
            config=self.config,
        )
        self.activity.idle.subscribe(self._on_idle)
        logger.info("Canvas session %s started", session_id or "(anonymous)")

    # ── Listener registration ────────────────────────────────

    def on_result(self, callback: Callable[[Observation], Any]) -> Callable[[], None]:
        return self.queue.on_result(callback)

    def on_activity_change(self, callback: Callable[[bool], Any]) -> Callable[[], None]:
        return self.activity.changes.subscribe(callback)

    def on_shape(self, callback: Callable[[DetectedShape], Any]) -> Callable[[], None]:
        return self.shapes.subscribe(callback)

    # ── Canvas inputs ────────────────────────────────────────

    def stroke_end(self, stroke: Stroke, canvas_image: str) -> DetectedShape | None:
        if self._disposed:
            return None
        self.strokes.append(stroke)
        shape = classify(stroke, self.config)
        if shape is not None:
            self.shapes.emit(shape)
        self._handle(CanvasEventKind.STROKE_END, canvas_image)
        return shape

    def tool_change(self, tool_id: str, canvas_image: str) -> None:
        if self._disposed:
            return
        self._handle(CanvasEventKind.TOOL_CHANGE, canvas_image, tool_id)

    def manipulative_move(self, manipulative_id: str, x: float, y: float, manipulative_type: str, canvas_image: str) -> None:
        if self._disposed:
            return
        if not (math.isfinite(x) and math.isfinite(y)):
            raise ValueError(f"Manipulative position must be finite, got ({x}, {y})")
        logger.debug("Manipulative %s (%s) moved to %s,%s", manipulative_id, manipulative_type, x, y)
        self._handle(
            CanvasEventKind.MANIPULATIVE_MOVE,
            canvas_image,
            f"{manipulative_type}_to_{round(x)}_{round(y)}",
        )

    def clear(self, canvas_image: str = "") -> None:
        if self._disposed:
            return
        self.strokes.clear()
        self.activity.reset()
        self.deduper.reset()
        self._latest_canvas = canvas_image
        self.scheduler.on_canvas_event(CanvasEventKind.CLEAR, canvas_image)

    def force_update(self, canvas_image: str) -> None:
        if self._disposed:
            return
        self._latest_canvas = canvas_image
        self.scheduler.force_update(canvas_image)

    def update_problem_image(self, problem_image: str) -> bool:
        if self._disposed:
            return False
        return self.scheduler.update_problem_image(problem_image)

    def analyze_drawing(self) -> DrawingAnalysis:
        return analyze_drawing(self.strokes, self.config)

    # ── Lifecycle ────────────────────────────────────────────

    async def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self.scheduler.cancel()
        self.activity.dispose()
        self.shapes.clear()
        await self.queue.close()
        logger.info("Canvas session %s disposed", self.session_id or "(anonymous)")

    # ── Internals ────────────────────────────────────────────

    def _handle(self, kind: CanvasEventKind, canvas_image: str, detail: str | None = None) -> None:
        self._latest_canvas = canvas_image
        self.activity.record_activity()
        self.scheduler.on_canvas_event(kind, canvas_image, detail)

    def _on_idle(self, _now_ms: float) -> None:
        if self._disposed:
            return
        self.scheduler.on_canvas_event(CanvasEventKind.PAUSE, self._latest_canvas)

    def _forward(self, update: VisionUpdate) -> None:
        if not self.deduper.admit(update.canvas_image):
            return
        self.queue.submit(update)
