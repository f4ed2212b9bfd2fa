"""Stroke classifier — decides whether one finished freehand stroke is a circle or a line.

Circle is tested first: a tight, nearly closed loop can also pass the loose
line test, so the line test only runs when the circle test rejects. The two
outcomes are exclusive.

Malformed or short strokes never raise; they yield None, which callers treat
as "no shape".
"""

from __future__ import annotations

import logging

import numpy as np
from numpy.typing import NDArray

from canvas_observer.engine.config import ObserverConfig
from canvas_observer.engine.entities import DetectedShape, ShapeType, Stroke, Tool
from canvas_observer.utils.geometry import (
    as_array,
    bounds,
    centroid,
    distance,
    distances_to,
    line_distances,
)

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = ObserverConfig()


def classify(stroke: Stroke, config: ObserverConfig | None = None) -> DetectedShape | None:
    """Classify a completed stroke as a circle or line, or None."""
    cfg = config or _DEFAULT_CONFIG
    if stroke.tool == Tool.ERASER or len(stroke.points) < cfg.min_points:
        return None

    points = as_array(stroke.points)
    if not np.all(np.isfinite(points)):
        logger.debug("Stroke %s has non-finite coordinates, skipping", stroke.id)
        return None

    circle = _detect_circle(points, cfg)
    if circle is not None and circle.confidence > cfg.circle_min_confidence:
        logger.debug("Stroke %s: circle (confidence %.2f)", stroke.id, circle.confidence)
        return DetectedShape(
            type=ShapeType.CIRCLE,
            confidence=circle.confidence,
            bounds=circle.bounds,
            stroke_id=stroke.id,
        )

    line = _detect_line(points, cfg)
    if line is not None and line.confidence > cfg.line_min_confidence:
        logger.debug("Stroke %s: line (confidence %.2f)", stroke.id, line.confidence)
        return DetectedShape(
            type=ShapeType.LINE,
            confidence=line.confidence,
            bounds=line.bounds,
            stroke_id=stroke.id,
        )

    logger.debug("Stroke %s: no shape (%d points)", stroke.id, len(stroke.points))
    return None


def _detect_circle(points: NDArray[np.float64], cfg: ObserverConfig) -> DetectedShape | None:
    if len(points) < cfg.circle_min_points:
        return None

    center = centroid(points)
    radii = distances_to(points, center)
    avg_radius = float(np.mean(radii))
    if avg_radius <= cfg.circle_min_radius or avg_radius < 1e-10:
        return None

    variation_ratio = float(np.max(np.abs(radii - avg_radius))) / avg_radius
    closure = distance(points[0], points[-1])

    if variation_ratio >= cfg.circle_max_variation:
        return None
    if closure >= cfg.circle_closure_factor * avg_radius:
        return None

    return DetectedShape(
        type=ShapeType.CIRCLE,
        confidence=max(0.0, 1.0 - variation_ratio),
        bounds=bounds(points),
    )


def _detect_line(points: NDArray[np.float64], cfg: ObserverConfig) -> DetectedShape | None:
    if len(points) < cfg.line_min_points:
        return None

    start = (float(points[0, 0]), float(points[0, 1]))
    end = (float(points[-1, 0]), float(points[-1, 1]))
    length = distance(start, end)
    if length < cfg.line_min_length or length < 1e-10:
        return None

    deviation_ratio = float(np.max(line_distances(points, start, end))) / length
    if deviation_ratio >= cfg.line_max_deviation:
        return None

    return DetectedShape(
        type=ShapeType.LINE,
        confidence=max(0.0, 1.0 - deviation_ratio * cfg.line_confidence_scale),
        bounds=bounds(points),
    )
