"""Health check."""

from __future__ import annotations

from fastapi import APIRouter, Request

from canvas_observer import __version__
from canvas_observer.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(request: Request) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        active_sessions=len(request.app.state.sessions),
    )
