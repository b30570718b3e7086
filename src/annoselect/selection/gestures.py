"""Gesture normalisation for pointer and touch input.

Raw input arrives as DOM-style event names (``mousedown``, ``mouseup``,
``touchstart``, ``touchend``).  ``GestureSource`` folds them into the two
notifications the coordinator understands, press and release, so the
coordinator never branches on the input device.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Literal

from annoselect.dom.nodes import Node

logger = logging.getLogger(__name__)

GestureKind = Literal["press", "release"]
PointerType = Literal["mouse", "touch"]

PRIMARY_BUTTON = 0

# Raw event name -> (gesture kind, pointer type)
_RAW_EVENTS: dict[str, tuple[GestureKind, PointerType]] = {
    "mousedown": ("press", "mouse"),
    "mouseup": ("release", "mouse"),
    "touchstart": ("press", "touch"),
    "touchend": ("release", "touch"),
}

GestureHandler = Callable[["GestureEvent"], None]


@dataclass(frozen=True)
class Capabilities:
    """Platform capabilities, resolved once and injected.

    Attributes:
        touch: Whether touch input is routed to the coordinator.
    """

    touch: bool = False


@dataclass(frozen=True)
class GestureEvent:
    """A normalised press or release.

    Attributes:
        kind: ``"press"`` or ``"release"``.
        target: Node the pointer was over.
        button: Mouse button index; touch input reports the primary button.
        pointer: Input device that produced the gesture.
    """

    kind: GestureKind
    target: Node
    button: int = PRIMARY_BUTTON
    pointer: PointerType = "mouse"

    @property
    def is_primary(self) -> bool:
        return self.button == PRIMARY_BUTTON


class GestureSource:
    """Dispatches raw input events as press/release gestures."""

    def __init__(self, capabilities: Capabilities | None = None) -> None:
        self.capabilities = capabilities or Capabilities()
        self._handlers: dict[GestureKind, list[GestureHandler]] = {
            "press": [],
            "release": [],
        }

    def subscribe(
        self, on_press: GestureHandler, on_release: GestureHandler
    ) -> None:
        self._handlers["press"].append(on_press)
        self._handlers["release"].append(on_release)

    def unsubscribe(
        self, on_press: GestureHandler, on_release: GestureHandler
    ) -> None:
        self._handlers["press"] = [h for h in self._handlers["press"] if h != on_press]
        self._handlers["release"] = [
            h for h in self._handlers["release"] if h != on_release
        ]

    def dispatch(
        self, raw_event: str, target: Node, button: int = PRIMARY_BUTTON
    ) -> bool:
        """Normalise and deliver one raw input event.

        Returns:
            True if the event was delivered, False if it was ignored (unknown
            event name, or touch input without touch capability).
        """
        mapped = _RAW_EVENTS.get(raw_event)
        if mapped is None:
            logger.debug("Ignoring unsupported input event %r", raw_event)
            return False
        kind, pointer = mapped
        if pointer == "touch":
            if not self.capabilities.touch:
                return False
            button = PRIMARY_BUTTON

        gesture = GestureEvent(
            kind=kind, target=target, button=button, pointer=pointer
        )
        for handler in list(self._handlers[kind]):
            handler(gesture)
        return True

    def press(self, target: Node, button: int = PRIMARY_BUTTON) -> bool:
        return self.dispatch("mousedown", target, button)

    def release(self, target: Node, button: int = PRIMARY_BUTTON) -> bool:
        return self.dispatch("mouseup", target, button)
