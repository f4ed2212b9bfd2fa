"""Observer configuration — rate limits, fidelity levels and classifier thresholds."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ObserverConfig:
    """Tunable constants for one canvas session. Defaults, not environment-driven."""

    # Update scheduling
    min_update_interval_ms: float = 200.0
    activity_timeout_ms: float = 2000.0

    # Snapshot fidelity (lossy JPEG quality, 0-1)
    active_quality: float = 0.6
    idle_quality: float = 0.9
    high_quality: float = 0.9

    # Adaptive resize: narrower snapshots while the student is drawing
    low_quality_cutoff: float = 0.7
    active_max_width: int = 800
    idle_max_width: int = 1200

    # Near-duplicate suppression on encoded payload length
    dedupe_byte_threshold: int = 200

    # Stroke classification
    min_points: int = 3

    circle_min_points: int = 6
    circle_max_variation: float = 0.8
    circle_closure_factor: float = 0.7  # closure must be under this × avg radius
    circle_min_radius: float = 10.0  # pixels
    circle_min_confidence: float = 0.3

    line_min_points: int = 4
    line_min_length: float = 20.0  # pixels, end to end
    line_max_deviation: float = 0.15
    line_confidence_scale: float = 6.67
    line_min_confidence: float = 0.5
