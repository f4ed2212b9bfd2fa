"""API request models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from canvas_observer.engine.entities import Point, Stroke, Tool


class PointModel(BaseModel):
    x: float
    y: float


class StrokeModel(BaseModel):
    id: str = Field(..., description="Stroke identifier assigned by the canvas")
    points: list[PointModel] = Field(..., min_length=1)
    tool: Tool = Tool.PEN
    color: str = "#000000"
    width: float = 2.0

    def to_stroke(self) -> Stroke:
        return Stroke(
            id=self.id,
            points=tuple(Point(p.x, p.y) for p in self.points),
            tool=self.tool,
            color=self.color,
            width=self.width,
        )


class ClassifyRequest(BaseModel):
    stroke: StrokeModel


class DrawingAnalyzeRequest(BaseModel):
    strokes: list[StrokeModel] = Field(default_factory=list)
