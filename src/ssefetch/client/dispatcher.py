"""Listener registry keyed by event type.

Several listeners may share a type; they run in registration order.
Removing a type without naming a handler drops all of its listeners.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import structlog

from .events import SSEvent

log = structlog.get_logger()

Listener = Callable[[Any], object]


class EventDispatcher:
    """Publishes events to the listeners registered for their type."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def add(self, event_type: str, listener: Listener) -> None:
        listeners = self._listeners.setdefault(event_type, [])
        if listener not in listeners:
            listeners.append(listener)
        log.debug("listener_added", event_type=event_type, total=len(listeners))

    def remove(self, event_type: str, listener: Listener | None = None) -> None:
        if listener is None:
            self._listeners.pop(event_type, None)
            return
        listeners = self._listeners.get(event_type)
        if not listeners or listener not in listeners:
            return
        listeners.remove(listener)
        if not listeners:
            del self._listeners[event_type]
        log.debug("listener_removed", event_type=event_type, total=len(listeners))

    def listeners(self, event_type: str) -> list[Listener]:
        return list(self._listeners.get(event_type, ()))

    def dispatch(self, event: SSEvent) -> int:
        """Call each listener for ``event.type``; return how many were called.

        A failing listener is logged and does not prevent the others from
        running.
        """
        listeners = self.listeners(event.type)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                log.exception("listener_failed", event_type=event.type)
        return len(listeners)
