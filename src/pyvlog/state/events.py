"""Loader event types and a per-instance callback registry."""

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum
from typing import Any

_logger = logging.getLogger(__name__)

EventCallback = Callable[[str, Any], Any]


class EventType(StrEnum):
    READY = "ready"
    UPDATE = "update"
    FINISH = "finish"
    ERROR = "error"


class EventEmitter:
    """Ordered, synchronous callback lists keyed by event type.

    Callbacks for one event type run in registration order as
    ``callback(event_type, payload)``. A failing callback is logged and
    does not stop the remaining callbacks.
    """

    def __init__(self) -> None:
        self._callbacks: dict[str, list[EventCallback]] = {}

    def on(self, event_type: str, callback: EventCallback) -> None:
        self._callbacks.setdefault(str(event_type), []).append(callback)

    def off(self, event_type: str, callback: EventCallback) -> None:
        callbacks = self._callbacks.get(str(event_type))
        if callbacks and callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event_type: str, payload: Any = None) -> None:
        name = str(event_type)
        for callback in tuple(self._callbacks.get(name, ())):
            try:
                callback(name, payload)
            except Exception:
                _logger.debug("%s callback failed", name, exc_info=True)
