"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from canvas_observer import __version__
from canvas_observer.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.observer_log_level.upper(), logging.DEBUG),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="canvas-observer",
        description="Stroke classification and rate-limited vision observation for a tutoring canvas",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # session_id -> CanvasSession, one per open WebSocket
    app.state.sessions = {}

    from canvas_observer.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
