"""Range normalisation: whitespace trimming and selection stubs.

Pure functions.  Neither mutates its input range; both compute boundaries
from the flattened text of the tree, so intervening inline markup never
shifts an offset.
"""

# Pattern: Functional Core (pure functions over ranges)

from __future__ import annotations

from typing import TYPE_CHECKING

from annoselect.dom.range import Range, boundary_at
from annoselect.errors import DegenerateRangeError, OutOfBoundsError
from annoselect.selection.models import SelectionStub

if TYPE_CHECKING:
    from annoselect.dom.nodes import Node


def trim_range(range_: Range) -> Range:
    """Return a copy of *range_* without leading or trailing whitespace.

    The start boundary moves forward past a whitespace-only prefix and is
    re-anchored on the text node holding the first remaining character; the
    end boundary moves back past a whitespace-only suffix onto the text node
    holding the last one.  Which non-whitespace characters are covered never
    changes.  Anchoring on those text nodes also tightens the common ancestor
    to the smallest container enclosing the visible text.

    A range that holds only whitespace (or nothing) yields a collapsed range
    at its start, which callers treat as "no selection".
    """
    root = range_.root
    start, end = range_.offsets(root)
    text = root.text_content[start:end]

    stripped = text.lstrip()
    new_start = start + (len(text) - len(stripped))
    new_end = new_start + len(stripped.rstrip())

    if new_start >= new_end:
        container, offset = boundary_at(root, start, forward=True)
        return Range(container, offset)

    start_container, start_offset = boundary_at(root, new_start, forward=True)
    end_container, end_offset = boundary_at(root, new_end, forward=False)
    return Range(start_container, start_offset, end_container, end_offset)


def range_to_selection(range_: Range, container: Node) -> SelectionStub:
    """Convert a trimmed, non-empty range into a stub relative to *container*.

    ``start`` counts the text characters preceding the range's start boundary
    inside *container*; ``quote`` is the range text and ``end`` follows from
    its length.

    Raises:
        OutOfBoundsError: If the range's common ancestor is not inside
            *container*.  Callers are expected to check containment first.
        DegenerateRangeError: If the range covers no text.
    """
    ancestor = range_.common_ancestor_container
    if not container.contains(ancestor):
        msg = f"Range ancestor {ancestor!r} is outside container {container!r}"
        raise OutOfBoundsError(msg)

    start, end = range_.offsets(container)
    if start >= end:
        msg = f"Range covers no text at position {start}"
        raise DegenerateRangeError(msg)

    quote = container.text_content[start:end]
    return SelectionStub(start=start, end=end, quote=quote)
