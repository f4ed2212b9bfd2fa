"""API response models."""

from __future__ import annotations

from dataclasses import asdict

from pydantic import BaseModel, Field

from canvas_observer.engine.entities import DetectedShape, DrawingAnalysis, ShapeType


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    active_sessions: int = 0


class BoundsModel(BaseModel):
    min_x: float
    max_x: float
    min_y: float
    max_y: float
    width: float
    height: float


class ShapeModel(BaseModel):
    type: ShapeType
    confidence: float
    bounds: BoundsModel | None = None
    stroke_id: str = ""

    @classmethod
    def from_shape(cls, shape: DetectedShape) -> ShapeModel:
        return cls(
            type=shape.type,
            confidence=round(shape.confidence, 4),
            bounds=BoundsModel(**asdict(shape.bounds)) if shape.bounds else None,
            stroke_id=shape.stroke_id,
        )


class ClassifyResponse(BaseModel):
    shape: ShapeModel | None = None


class SmartSuggestionModel(BaseModel):
    message: str
    manipulative: str | None = None
    action: str | None = None
    educational_context: str | None = None
    grade_level: str | None = None


class DrawingAnalysisResponse(BaseModel):
    shapes: list[ShapeModel] = Field(default_factory=list)
    patterns: list[str] = Field(default_factory=list)
    suggestions: list[str] = Field(default_factory=list)
    smart_suggestions: list[SmartSuggestionModel] = Field(default_factory=list)

    @classmethod
    def from_analysis(cls, analysis: DrawingAnalysis) -> DrawingAnalysisResponse:
        return cls(
            shapes=[ShapeModel.from_shape(s) for s in analysis.shapes],
            patterns=analysis.patterns,
            suggestions=analysis.suggestions,
            smart_suggestions=[SmartSuggestionModel(**asdict(s)) for s in analysis.smart_suggestions],
        )
