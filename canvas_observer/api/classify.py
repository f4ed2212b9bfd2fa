"""POST /api/classify — classify one finished stroke."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from canvas_observer.dependencies import get_observer_config
from canvas_observer.engine.config import ObserverConfig
from canvas_observer.engine.shape_classifier import classify as classify_stroke
from canvas_observer.models.requests import ClassifyRequest
from canvas_observer.models.responses import ClassifyResponse, ShapeModel

router = APIRouter()


@router.post("/classify", response_model=ClassifyResponse)
async def classify(req: ClassifyRequest, config: ObserverConfig = Depends(get_observer_config)) -> ClassifyResponse:
    shape = classify_stroke(req.stroke.to_stroke(), config)
    return ClassifyResponse(shape=ShapeModel.from_shape(shape) if shape else None)
