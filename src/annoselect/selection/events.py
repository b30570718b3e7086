"""Synchronous publish/subscribe for coordinator events."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

Listener = Callable[[Any], None]


class EventEmitter:
    """Named-event listener registry.

    Listeners run synchronously, in registration order, inside ``emit``.
    An exception raised by a listener propagates to the caller of ``emit``;
    listeners registered after it are not invoked for that emission.
    """

    def __init__(self) -> None:
        self._listeners: dict[str, list[tuple[Listener, bool]]] = {}

    def on(self, event: str, listener: Listener) -> Callable[[], None]:
        """Register *listener* for *event*; returns an unsubscribe callable."""
        self._listeners.setdefault(event, []).append((listener, False))
        return lambda: self.off(event, listener)

    def once(self, event: str, listener: Listener) -> Callable[[], None]:
        """Register *listener* for the next emission of *event* only."""
        self._listeners.setdefault(event, []).append((listener, True))
        return lambda: self.off(event, listener)

    def off(self, event: str, listener: Listener | None = None) -> None:
        """Remove *listener* (or every listener when None) from *event*."""
        if listener is None:
            self._listeners.pop(event, None)
            return
        remaining = [
            entry for entry in self._listeners.get(event, []) if entry[0] != listener
        ]
        if remaining:
            self._listeners[event] = remaining
        else:
            self._listeners.pop(event, None)

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def emit(self, event: str, payload: Any = None) -> None:
        entries = list(self._listeners.get(event, []))
        if not entries:
            return
        if any(once for _, once in entries):
            self._listeners[event] = [e for e in self._listeners[event] if not e[1]]
        logger.debug("Emitting %r to %d listener(s)", event, len(entries))
        for listener, _ in entries:
            listener(payload)
