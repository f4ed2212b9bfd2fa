"""Shared test fixtures."""

from __future__ import annotations

import base64
import io
import math
from collections.abc import Callable

import pytest
from PIL import Image

from canvas_observer.engine.entities import Point, Stroke, Tool


class _FakeHandle:
    def __init__(self, due: float, callback: Callable[[], None]) -> None:
        self.due = due
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeTimers:
    """Deterministic clock. ``advance()`` fires due callbacks in time order.

    ``epoch_ms`` runs ``epoch_offset_ms`` ahead of ``now_ms``.
    """

    def __init__(self, start_ms: float = 1000.0, epoch_offset_ms: float = 0.0) -> None:
        self._now = start_ms
        self._epoch_offset = epoch_offset_ms
        self._handles: list[_FakeHandle] = []

    def now_ms(self) -> float:
        return self._now

    def epoch_ms(self) -> float:
        return self._now + self._epoch_offset

    def call_later(self, delay_ms: float, callback: Callable[[], None]) -> _FakeHandle:
        handle = _FakeHandle(self._now + max(0.0, delay_ms), callback)
        self._handles.append(handle)
        return handle

    @property
    def scheduled(self) -> int:
        return sum(1 for h in self._handles if not h.cancelled)

    def advance(self, ms: float) -> None:
        target = self._now + ms
        while True:
            due = [h for h in self._handles if not h.cancelled and h.due <= target]
            if not due:
                break
            handle = min(due, key=lambda h: h.due)
            self._handles.remove(handle)
            self._now = handle.due
            handle.callback()
        self._now = target


def circle_points(radius: float, n: int, cx: float = 200.0, cy: float = 200.0, closed: bool = True) -> list[Point]:
    """n points evenly around a circle; ``closed`` repeats the first point at the end."""
    points = [
        Point(cx + radius * math.cos(2 * math.pi * i / n), cy + radius * math.sin(2 * math.pi * i / n))
        for i in range(n)
    ]
    if closed:
        points.append(points[0])
    return points


def line_points(start: tuple[float, float], end: tuple[float, float], n: int) -> list[Point]:
    (x1, y1), (x2, y2) = start, end
    return [Point(x1 + (x2 - x1) * i / (n - 1), y1 + (y2 - y1) * i / (n - 1)) for i in range(n)]


def make_stroke(points: list[Point], tool: Tool = Tool.PEN, stroke_id: str = "s1") -> Stroke:
    return Stroke(id=stroke_id, points=tuple(points), tool=tool)


def sized_encoder(image: str, quality: float) -> str:
    """Stand-in for JPEG encoding: higher quality means a larger payload."""
    return image + "#" * int(quality * 1000)


def png_b64(width: int = 320, height: int = 240, mode: str = "RGBA", color=(30, 60, 200, 255)) -> str:
    img = Image.new(mode, (width, height), color)
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return "data:image/png;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


@pytest.fixture
def timers() -> FakeTimers:
    return FakeTimers()


@pytest.fixture
def circle_stroke() -> Stroke:
    return make_stroke(circle_points(50, 16))


@pytest.fixture
def line_stroke() -> Stroke:
    return make_stroke(line_points((0, 0), (90, 45), 10))
