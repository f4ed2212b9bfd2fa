"""Snapshot fidelity → model selection. Low-fidelity mid-drawing snapshots use the fast model."""

from __future__ import annotations

from canvas_observer.config import settings

_FAST_QUALITY_CUTOFF = 0.7


def get_model_for_quality(quality: float) -> str:
    if quality < _FAST_QUALITY_CUTOFF:
        return settings.model_vision_fast
    return settings.model_vision
