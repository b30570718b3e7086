"""Platform selection source.

``SelectionSource`` is the contract the coordinator consumes; any engine
that can report its active range and clear it satisfies it.
``NativeSelection`` is the in-process implementation used by the CLI and
the tests.  Like browser selections it holds at most one range.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from annoselect.dom.range import Range

if TYPE_CHECKING:
    from annoselect.dom.nodes import Node


class SelectionSource(Protocol):
    """Protocol for the platform's native text selection."""

    @property
    def range_count(self) -> int:
        """Number of active ranges (0 or 1)."""
        ...

    @property
    def is_collapsed(self) -> bool:
        """True when nothing or only a caret position is selected."""
        ...

    def get_range_at(self, index: int) -> Range:
        """Return the active range at *index*."""
        ...

    def remove_all_ranges(self) -> None:
        """Clear the native selection."""
        ...


class NativeSelection:
    """Single-range selection state."""

    def __init__(self) -> None:
        self._range: Range | None = None

    @property
    def range_count(self) -> int:
        return 0 if self._range is None else 1

    @property
    def is_collapsed(self) -> bool:
        return self._range is None or self._range.collapsed

    def get_range_at(self, index: int) -> Range:
        if self._range is None or index != 0:
            msg = f"No selection range at index {index}"
            raise IndexError(msg)
        return self._range

    def add_range(self, range_: Range) -> None:
        """Make *range_* the active range, replacing any previous one."""
        self._range = range_

    def collapse(self, node: Node, offset: int = 0) -> None:
        """Place a caret (collapsed range) at ``(node, offset)``."""
        self._range = Range(node, offset)

    def select_offsets(self, root: Node, start: int, end: int) -> Range:
        """Select characters ``[start, end)`` of *root*, as a drag would."""
        self._range = Range.from_offsets(root, start, end)
        return self._range

    def remove_all_ranges(self) -> None:
        self._range = None

    def to_string(self) -> str:
        return "" if self._range is None else self._range.to_string()
