"""ObservationQueue — single-slot, latest-wins feed for the vision analyzer.

``submit`` overwrites whatever has not been picked up yet; an asyncio worker
takes the slot, awaits the analyzer and fans the result out to listeners.
When the analyzer is slower than the event rate, intermediate updates are
dropped rather than buffered.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from canvas_observer.engine.entities import VisionUpdate
from canvas_observer.engine.events import Channel
from canvas_observer.models.analysis import AnalysisResult, Observation

logger = logging.getLogger(__name__)

Analyzer = Callable[[VisionUpdate], Awaitable[AnalysisResult]]


class ObservationQueue:
    def __init__(self, analyzer: Analyzer) -> None:
        self._analyzer = analyzer
        self._slot: VisionUpdate | None = None
        self._wakeup = asyncio.Event()
        self._idle = asyncio.Event()
        self._idle.set()
        self._worker: asyncio.Task | None = None
        self._closed = False
        self.results: Channel[Observation] = Channel("observations")
        self.submitted = 0
        self.replaced = 0
        self.processed = 0
        self.failed = 0

    def on_result(self, callback: Callable[[Observation], Any]) -> Callable[[], None]:
        return self.results.subscribe(callback)

    @property
    def has_pending(self) -> bool:
        return self._slot is not None

    def submit(self, update: VisionUpdate) -> None:
        """Fire-and-forget. Must be called from the event loop thread."""
        if self._closed:
            logger.debug("Queue closed, discarding %s", update.context)
            return
        if self._slot is not None:
            self.replaced += 1
            logger.debug("Replacing unconsumed update %s with %s", self._slot.context, update.context)
        self._slot = update
        self.submitted += 1
        self._idle.clear()
        self._wakeup.set()
        self._ensure_worker()

    async def join(self) -> None:
        """Wait until the slot is empty and no analysis is running."""
        await self._idle.wait()

    async def close(self) -> None:
        self._closed = True
        self._slot = None
        if self._worker is not None and not self._worker.done():
            self._worker.cancel()
            try:
                await self._worker
            except asyncio.CancelledError:
                pass
        self._worker = None
        self._idle.set()
        self.results.clear()

    def _ensure_worker(self) -> None:
        if self._worker is None or self._worker.done():
            self._worker = asyncio.get_running_loop().create_task(self._run())

    async def _run(self) -> None:
        while True:
            await self._wakeup.wait()
            self._wakeup.clear()

            update, self._slot = self._slot, None
            if update is None:
                self._idle.set()
                continue

            await self._process(update)

            if self._slot is None:
                self._idle.set()

    async def _process(self, update: VisionUpdate) -> None:
        try:
            result = await self._analyzer(update)
        except asyncio.CancelledError:
            raise
        except Exception:
            self.failed += 1
            logger.exception("Vision analysis failed for %s", update.context)
            return

        self.processed += 1
        observation = Observation(
            analysis=result.analysis,
            text=result.text,
            context=update.context,
            timestamp=update.timestamp_ms,
        )
        await self.results.aemit(observation)
