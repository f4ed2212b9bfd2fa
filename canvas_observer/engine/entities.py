"""Engine value types — strokes, detected shapes, canvas events and vision updates.

Everything here is immutable once constructed. Strokes are frozen the moment
the pointer is released and handed over by value.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class Tool(str, enum.Enum):
    PEN = "pen"
    ERASER = "eraser"


class ShapeType(str, enum.Enum):
    CIRCLE = "circle"
    LINE = "line"
    UNKNOWN = "unknown"


class ActivityPhase(str, enum.Enum):
    IDLE = "idle"
    ACTIVE = "active"


class CanvasEventKind(str, enum.Enum):
    STROKE_END = "stroke_end"
    TOOL_CHANGE = "tool_change"
    MANIPULATIVE_MOVE = "manipulative_move"
    CLEAR = "clear"
    PAUSE = "pause"


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Stroke:
    id: str
    points: tuple[Point, ...]
    tool: Tool = Tool.PEN
    color: str = "#000000"
    width: float = 2.0


@dataclass(frozen=True)
class Bounds:
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    width: float
    height: float


@dataclass(frozen=True)
class DetectedShape:
    type: ShapeType
    confidence: float
    bounds: Bounds | None = None
    stroke_id: str = ""


@dataclass(frozen=True)
class VisionUpdate:
    """One canvas snapshot ready for the vision model. Consumed exactly once."""

    problem_image: str
    canvas_image: str
    timestamp_ms: float
    context: str
    quality: float = 0.9


@dataclass
class SmartSuggestion:
    message: str
    manipulative: str | None = None
    action: str | None = None
    educational_context: str | None = None
    grade_level: str | None = None


@dataclass
class DrawingAnalysis:
    shapes: list[DetectedShape] = field(default_factory=list)
    patterns: list[str] = field(default_factory=list)
    suggestions: list[str] = field(default_factory=list)
    smart_suggestions: list[SmartSuggestion] = field(default_factory=list)
