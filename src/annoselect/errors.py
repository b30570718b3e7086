"""Exception hierarchy for selection handling.

``OutOfBoundsError`` and ``DegenerateRangeError`` describe expected gesture
outcomes (a drag leaving the document surface, a whitespace-only selection)
and are absorbed by the coordinator.  ``HighlighterError`` reports a markup
mutation that could not be completed; it always reaches the caller.
"""

from __future__ import annotations


class SelectionError(Exception):
    """Base class for annoselect errors."""


class OutOfBoundsError(SelectionError, ValueError):
    """A range boundary or text position lies outside the container."""


class DegenerateRangeError(SelectionError, ValueError):
    """A range has no selectable text once trimmed."""


class HighlighterError(SelectionError):
    """Wrapping or unwrapping highlight markup failed.

    The document is rolled back to its state before the failed operation.
    """
