"""POST /api/drawing/analyze — shape mix and manipulative suggestions for a whole drawing."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from canvas_observer.dependencies import get_observer_config
from canvas_observer.engine.config import ObserverConfig
from canvas_observer.engine.drawing_analysis import analyze_drawing
from canvas_observer.models.requests import DrawingAnalyzeRequest
from canvas_observer.models.responses import DrawingAnalysisResponse

router = APIRouter()


@router.post("/drawing/analyze", response_model=DrawingAnalysisResponse)
async def analyze(
    req: DrawingAnalyzeRequest,
    config: ObserverConfig = Depends(get_observer_config),
) -> DrawingAnalysisResponse:
    analysis = analyze_drawing((s.to_stroke() for s in req.strokes), config)
    return DrawingAnalysisResponse.from_analysis(analysis)
