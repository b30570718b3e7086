"""Selection handling: normalisation, overlap resolution and lifecycle."""

from annoselect.selection.coordinator import SELECT, SelectionCoordinator
from annoselect.selection.events import EventEmitter
from annoselect.selection.gestures import (
    Capabilities,
    GestureEvent,
    GestureSource,
)
from annoselect.selection.models import Annotation, SelectEvent, SelectionStub
from annoselect.selection.normalizer import range_to_selection, trim_range
from annoselect.selection.overlaps import get_exact_overlaps

__all__ = [
    "SELECT",
    "Annotation",
    "Capabilities",
    "EventEmitter",
    "GestureEvent",
    "GestureSource",
    "SelectEvent",
    "SelectionCoordinator",
    "SelectionStub",
    "get_exact_overlaps",
    "range_to_selection",
    "trim_range",
]
