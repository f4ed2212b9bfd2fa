"""FastAPI dependency injection."""

from __future__ import annotations

from canvas_observer.engine.config import ObserverConfig


def get_observer_config() -> ObserverConfig:
    return ObserverConfig()


def get_analyzer():
    from canvas_observer.llm.client import analyze_update

    return analyze_update
