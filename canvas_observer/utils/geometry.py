"""Leaf-node geometry helpers. No engine imports beyond value types."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.typing import NDArray

from canvas_observer.engine.entities import Bounds, Point


def as_array(points: Sequence[Point]) -> NDArray[np.float64]:
    """Pack points into an Nx2 array of (x, y)."""
    if len(points) == 0:
        return np.empty((0, 2))
    return np.array([(p.x, p.y) for p in points], dtype=np.float64)


def distance(p1: Sequence[float], p2: Sequence[float]) -> float:
    """Euclidean distance between two (x, y) pairs."""
    return float(np.hypot(p2[0] - p1[0], p2[1] - p1[1]))


def centroid(points: NDArray[np.float64]) -> tuple[float, float]:
    """Compute centroid of a point set."""
    if len(points) == 0:
        return (0.0, 0.0)
    return (float(np.mean(points[:, 0])), float(np.mean(points[:, 1])))


def distances_to(points: NDArray[np.float64], center: tuple[float, float]) -> NDArray[np.float64]:
    """Distance from ``center`` to each point."""
    cx, cy = center
    return np.sqrt((points[:, 0] - cx) ** 2 + (points[:, 1] - cy) ** 2)


def bounds(points: NDArray[np.float64]) -> Bounds | None:
    """Axis-aligned bounding box, or None for an empty point set."""
    if len(points) == 0:
        return None
    min_x = float(np.min(points[:, 0]))
    max_x = float(np.max(points[:, 0]))
    min_y = float(np.min(points[:, 1]))
    max_y = float(np.max(points[:, 1]))
    return Bounds(
        min_x=min_x,
        max_x=max_x,
        min_y=min_y,
        max_y=max_y,
        width=max_x - min_x,
        height=max_y - min_y,
    )


def line_distances(
    points: NDArray[np.float64],
    start: tuple[float, float],
    end: tuple[float, float],
) -> NDArray[np.float64]:
    """Perpendicular distance of each point to the infinite line through start and end.

    Line in general form: A·x + B·y + C = 0 with
    A = y2 - y1, B = x1 - x2, C = x2·y1 - x1·y2.
    """
    x1, y1 = start
    x2, y2 = end
    a = y2 - y1
    b = x1 - x2
    c = x2 * y1 - x1 * y2
    norm = float(np.hypot(a, b))
    if norm < 1e-12:
        return distances_to(points, start)
    return np.abs(a * points[:, 0] + b * points[:, 1] + c) / norm
