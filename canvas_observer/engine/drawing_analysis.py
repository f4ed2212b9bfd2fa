"""Whole-drawing analysis — shape counts, patterns and manipulative suggestions."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from canvas_observer.engine.config import ObserverConfig
from canvas_observer.engine.entities import DrawingAnalysis, ShapeType, SmartSuggestion, Stroke
from canvas_observer.engine.shape_classifier import classify

logger = logging.getLogger(__name__)


def analyze_drawing(strokes: Iterable[Stroke], config: ObserverConfig | None = None) -> DrawingAnalysis:
    """Classify every stroke and derive tutoring suggestions from the shape mix."""
    strokes = list(strokes)
    shapes = [s for s in (classify(stroke, config) for stroke in strokes) if s is not None]
    result = DrawingAnalysis(shapes=shapes)

    circles = [s for s in shapes if s.type == ShapeType.CIRCLE]
    lines = [s for s in shapes if s.type == ShapeType.LINE]

    if circles:
        plural = "s" if len(circles) > 1 else ""
        result.patterns.append(f"{len(circles)} circle{plural} detected")
        result.suggestions.append("Explore radius and diameter")
        if len(circles) == 1:
            result.smart_suggestions.append(SmartSuggestion(
                message="Perfect circle! Let's explore fractions with pie slices",
                manipulative="fraction-bar",
                action="add-tool",
                educational_context="Circles are great for understanding fractions as parts of a whole",
                grade_level="elementary",
            ))
        else:
            result.smart_suggestions.append(SmartSuggestion(
                message="Multiple circles! Compare their sizes and relationships",
                manipulative="graph-paper",
                action="add-tool",
                educational_context="Compare circle properties and ratios",
                grade_level="middle",
            ))

    if len(lines) > 1:
        result.patterns.append(f"{len(lines)} lines detected")
        result.suggestions.append("Try creating angles and geometric shapes")
        result.smart_suggestions.append(SmartSuggestion(
            message="I see lines! Perfect for number line activities",
            manipulative="number-line",
            action="add-tool",
            educational_context="Use number lines to understand position, distance, and operations",
            grade_level="elementary",
        ))

    if len(lines) == 2:
        result.smart_suggestions.append(SmartSuggestion(
            message="Two lines create angles! Let's build shapes",
            manipulative="triangle",
            action="add-tool",
            educational_context="Two lines can form angles - explore triangles and geometric relationships",
            grade_level="elementary",
        ))

    if circles and lines:
        result.patterns.append("Mix of circles and lines - geometric exploration!")
        result.suggestions.append("Great for geometry exploration!")
        result.smart_suggestions.append(SmartSuggestion(
            message="Circles + lines = awesome geometry! Try graphing",
            manipulative="graph-paper",
            action="add-tool",
            educational_context="Combine shapes to explore coordinate geometry and spatial relationships",
            grade_level="middle",
        ))

    if len(shapes) > 2:
        result.smart_suggestions.append(SmartSuggestion(
            message="Lots of shapes! Time for some counting and calculating",
            manipulative="calculator",
            action="add-tool",
            educational_context="Count shapes, calculate areas, and explore mathematical relationships",
            grade_level="elementary",
        ))

    if strokes and not shapes:
        result.smart_suggestions.append(SmartSuggestion(
            message="Creative drawing! Add some math tools to explore patterns",
            manipulative="fraction-bar",
            action="add-tool",
            educational_context="Turn creative drawings into mathematical exploration opportunities",
            grade_level="elementary",
        ))

    logger.info(
        "Drawing analysis: %d strokes, %d shapes, %d suggestions",
        len(strokes),
        len(shapes),
        len(result.smart_suggestions),
    )
    return result
