"""Vision request/response models exchanged with the analysis service."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field


class VisionRequest(BaseModel):
    """Outgoing snapshot request. Field names match the wire format (camelCase)."""

    model_config = ConfigDict(populate_by_name=True)

    problem_image_base64: str = Field("", alias="problemImageBase64")
    canvas_image_base64: str = Field(..., alias="canvasImageBase64")
    quality_used: float = Field(..., alias="qualityUsed", ge=0.0, le=1.0)
    context: str = Field(..., description="Label of the event that triggered the snapshot")
    timestamp: float = Field(..., description="Epoch milliseconds")


class VisionAnalysis(BaseModel):
    """Structured reading of the student's canvas."""

    math_concepts: list[str] = Field(default_factory=list)
    student_actions: list[str] = Field(default_factory=list)
    drawing_description: str = ""
    problem_progress: Literal["not_started", "exploring", "working", "stuck", "complete"] = "exploring"
    suggestions: list[str] = Field(default_factory=list)
    off_task_detected: bool = False
    confidence: float = Field(0.0, ge=0.0, le=1.0)


class AnalysisResult(BaseModel):
    """Opaque payload returned by the analysis service, passed through unmodified."""

    analysis: dict[str, Any] = Field(default_factory=dict)
    text: str | None = None


class Observation(BaseModel):
    """What listeners receive: the analysis plus the update's context and timestamp."""

    analysis: dict[str, Any] = Field(default_factory=dict)
    text: str | None = None
    context: str = ""
    timestamp: float = 0.0
