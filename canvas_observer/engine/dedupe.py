"""Near-duplicate snapshot suppression by encoded payload length.

Not pixel-accurate: two snapshots whose encoded sizes differ by fewer than
``threshold`` bytes are treated as visually unchanged.
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def is_near_duplicate(new_payload: str | bytes, previous_payload: str | bytes | None, threshold: int = 200) -> bool:
    if previous_payload is None:
        return False
    return abs(len(new_payload) - len(previous_payload)) < threshold


class SnapshotDeduper:
    """Stateful gate in front of the observation queue."""

    def __init__(self, threshold: int = 200) -> None:
        self.threshold = threshold
        self._last_forwarded: str | bytes | None = None
        self.suppressed = 0

    def admit(self, payload: str | bytes) -> bool:
        """True if ``payload`` should be forwarded; remembers it when it is."""
        if is_near_duplicate(payload, self._last_forwarded, self.threshold):
            self.suppressed += 1
            logger.debug(
                "Suppressed near-duplicate snapshot (%d vs %d bytes)",
                len(payload),
                len(self._last_forwarded),
            )
            return False
        self._last_forwarded = payload
        return True

    def reset(self) -> None:
        self._last_forwarded = None
