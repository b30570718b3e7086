"""Boundary-point ranges over the node tree.

A :class:`Range` follows DOM semantics: each boundary is a
``(container, offset)`` pair where the offset counts characters inside a
:class:`~annoselect.dom.nodes.Text` container and children inside an
:class:`~annoselect.dom.nodes.Element` container.

The module also provides the two mappings the selection layer is built on:

- ``text_offset``: boundary point -> number of characters preceding it in the
  flattened text of a root node.
- ``boundary_at``: character position -> boundary point anchored on the text
  node holding that position.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass

from annoselect.dom.nodes import Element, Node, Text
from annoselect.errors import OutOfBoundsError


@dataclass(frozen=True)
class TextSegment:
    """The part ``[start, end)`` of a text node covered by a range."""

    node: Text
    start: int
    end: int


# ---------------------------------------------------------------------------
# Offset mapping
# ---------------------------------------------------------------------------


def _text_nodes(root: Node) -> list[Text]:
    if isinstance(root, Text):
        return [root]
    if isinstance(root, Element):
        return list(root.iter_text_nodes())
    return []


def _node_length(node: Node) -> int:
    if isinstance(node, Text):
        return len(node.data)
    if isinstance(node, Element):
        return len(node.children)
    return 0


def _chars_before(root: Node, node: Node) -> int:
    """Count text characters preceding *node* in document order within *root*."""
    if node is root or not isinstance(root, Element):
        return 0
    count = 0
    for descendant in root.iter_descendants():
        if descendant is node:
            return count
        if isinstance(descendant, Text):
            count += len(descendant.data)
    msg = f"{node!r} is not inside {root!r}"
    raise OutOfBoundsError(msg)


def text_offset(root: Node, container: Node, offset: int) -> int:
    """Characters of *root*'s flattened text strictly preceding a boundary.

    Inline markup between *root* and the boundary is walked through but not
    counted.

    Raises:
        OutOfBoundsError: If *container* is not *root* or inside it.
    """
    if not root.contains(container):
        msg = f"Boundary container {container!r} is not inside {root!r}"
        raise OutOfBoundsError(msg)
    if isinstance(container, Text):
        return _chars_before(root, container) + offset
    if isinstance(container, Element):
        if offset < len(container.children):
            return _chars_before(root, container.children[offset])
        return _chars_before(root, container) + len(container.text_content)
    msg = f"Unsupported boundary container {container!r}"
    raise TypeError(msg)


def boundary_at(root: Node, position: int, *, forward: bool) -> tuple[Node, int]:
    """Map a character *position* in *root* to a boundary point.

    With ``forward=True`` the boundary is anchored on the text node holding
    the character *at* ``position`` (suitable for range starts); otherwise on
    the text node holding the character *before* it (suitable for range ends).
    Positions at the very start or end of the text fall back to the first or
    last text node.

    Raises:
        OutOfBoundsError: If *position* is outside ``[0, len(text)]``.
    """
    texts = _text_nodes(root)
    total = sum(len(t.data) for t in texts)
    if not 0 <= position <= total:
        msg = f"Text position {position} outside [0, {total}]"
        raise OutOfBoundsError(msg)
    if not texts:
        return root, 0

    pos = 0
    for text in texts:
        end = pos + len(text.data)
        if forward and pos <= position < end:
            return text, position - pos
        if not forward and pos < position <= end:
            return text, position - pos
        pos = end

    if position == 0:
        return texts[0], 0
    return texts[-1], len(texts[-1].data)


# ---------------------------------------------------------------------------
# Range
# ---------------------------------------------------------------------------


class Range:
    """A contiguous span of the tree between two boundary points."""

    __slots__ = ("end_container", "end_offset", "start_container", "start_offset")

    def __init__(
        self,
        start_container: Node,
        start_offset: int = 0,
        end_container: Node | None = None,
        end_offset: int | None = None,
    ) -> None:
        if end_container is None:
            end_container = start_container
            if end_offset is None:
                end_offset = start_offset
        if end_offset is None:
            end_offset = 0
        self.start_container = start_container
        self.start_offset = start_offset
        self.end_container = end_container
        self.end_offset = end_offset
        self._check(start_container, start_offset)
        self._check(end_container, end_offset)

    @staticmethod
    def _check(container: Node, offset: int) -> None:
        if not 0 <= offset <= _node_length(container):
            msg = f"Offset {offset} is not valid in {container!r}"
            raise IndexError(msg)

    @classmethod
    def from_offsets(cls, root: Node, start: int, end: int) -> Range:
        """Build a range covering characters ``[start, end)`` of *root*."""
        if start > end:
            msg = f"Range start {start} is after end {end}"
            raise ValueError(msg)
        start_container, start_offset = boundary_at(root, start, forward=True)
        if start == end:
            return cls(start_container, start_offset)
        end_container, end_offset = boundary_at(root, end, forward=False)
        return cls(start_container, start_offset, end_container, end_offset)

    @classmethod
    def spanning(cls, nodes: Iterable[Node]) -> Range:
        """Build a range from before the first to after the last of *nodes*."""
        items = list(nodes)
        if not items:
            msg = "Cannot span an empty node list"
            raise ValueError(msg)
        first, last = items[0], items[-1]
        if first.parent is None or last.parent is None:
            msg = "Spanned nodes must be attached"
            raise ValueError(msg)
        return cls(first.parent, first.index, last.parent, last.index + 1)

    def __repr__(self) -> str:
        return (
            f"Range({self.start_container!r}, {self.start_offset}, "
            f"{self.end_container!r}, {self.end_offset})"
        )

    # -- boundaries ---------------------------------------------------------

    def set_start(self, container: Node, offset: int) -> None:
        self._check(container, offset)
        self.start_container = container
        self.start_offset = offset

    def clone(self) -> Range:
        return Range(
            self.start_container,
            self.start_offset,
            self.end_container,
            self.end_offset,
        )

    @property
    def collapsed(self) -> bool:
        return (
            self.start_container is self.end_container
            and self.start_offset == self.end_offset
        )

    @property
    def root(self) -> Node:
        return self.start_container.root

    @property
    def common_ancestor_container(self) -> Node:
        """Deepest node containing both boundary containers."""
        node: Node | None = self.start_container
        while node is not None:
            if node.contains(self.end_container):
                return node
            node = node.parent
        msg = "Range boundaries belong to different trees"
        raise OutOfBoundsError(msg)

    # -- text ---------------------------------------------------------------

    def offsets(self, root: Node | None = None) -> tuple[int, int]:
        """Start and end character positions relative to *root*."""
        root = self.root if root is None else root
        start = text_offset(root, self.start_container, self.start_offset)
        end = text_offset(root, self.end_container, self.end_offset)
        if end < start:
            msg = f"Range end {end} precedes start {start}"
            raise ValueError(msg)
        return start, end

    def to_string(self) -> str:
        """The flattened text between the two boundaries."""
        start, end = self.offsets()
        return self.root.text_content[start:end]

    def text_segments(self) -> list[TextSegment]:
        """Covered parts of each text node in document order.

        Text nodes the range only touches at a boundary are omitted.
        """
        root = self.root
        start, end = self.offsets(root)
        segments: list[TextSegment] = []
        pos = 0
        for text in _text_nodes(root):
            node_start, node_end = pos, pos + len(text.data)
            pos = node_end
            lo, hi = max(start, node_start), min(end, node_end)
            if lo < hi:
                segments.append(TextSegment(text, lo - node_start, hi - node_start))
            if node_start >= end:
                break
        return segments
