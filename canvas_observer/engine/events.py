"""Channel — explicit pub/sub between pipeline components.

Each component owns the channels it publishes on and hands them out by
reference. Listener failures are logged and never reach the publisher.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import Any, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Listener = Callable[[T], Any]


class Channel(Generic[T]):
    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def clear(self) -> None:
        self._listeners.clear()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(self, value: T) -> None:
        """Call every listener synchronously. Coroutine results are closed, not awaited."""
        for listener in list(self._listeners):
            try:
                result = listener(value)
            except Exception:
                logger.exception("Listener on %s failed", self.name)
                continue
            if inspect.iscoroutine(result):
                logger.warning("Async listener on %s called via emit(); use aemit()", self.name)
                result.close()

    async def aemit(self, value: T) -> None:
        """Call every listener, awaiting the ones that return awaitables."""
        for listener in list(self._listeners):
            try:
                result = listener(value)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Listener on %s failed", self.name)
