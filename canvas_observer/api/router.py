"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from canvas_observer.api import classify, drawing, health, sessions

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(classify.router)
api_router.include_router(drawing.router)
api_router.include_router(sessions.router)
