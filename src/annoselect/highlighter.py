"""Highlight markup: wrapping text ranges in spans and unwrapping them.

The Highlighter owns every mutation of the document tree.  Committed
annotations are rendered as ``<span class="r6o-annotation" data-id="...">``
elements; the selection coordinator asks it for transient spans carrying
the selection class instead.

Architecture:
    A range is wrapped text-node by text-node: each covered segment is split
    out of its text node and moved into a fresh span, so a range crossing
    markup boundaries yields several spans (document order).  Nested
    annotations therefore appear as nested spans, innermost = rendered last.
    Every wrap is all-or-nothing: the children of each touched parent are
    snapshotted first and restored verbatim if any step fails.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from annoselect.config import SelectionConfig, get_settings
from annoselect.dom.nodes import Element, Node, Text
from annoselect.dom.range import Range
from annoselect.errors import HighlighterError, OutOfBoundsError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from annoselect.selection.models import Annotation

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Snapshot / rollback
# ---------------------------------------------------------------------------


class _Snapshot:
    """Children lists and text data of the parents touched by a mutation."""

    __slots__ = ("_children", "_texts")

    def __init__(self) -> None:
        self._children: dict[int, tuple[Element, list[Node]]] = {}
        self._texts: dict[int, tuple[Text, str]] = {}

    def record(self, parent: Element) -> None:
        if id(parent) in self._children:
            return
        self._children[id(parent)] = (parent, list(parent.children))
        for child in parent.children:
            if isinstance(child, Text):
                self._texts[id(child)] = (child, child.data)

    def restore(self) -> None:
        for parent, children in self._children.values():
            for child in parent.children:
                child.parent = None
            parent.children = list(children)
            for child in children:
                if child.parent is not None and child.parent is not parent:
                    child.parent.children = [
                        c for c in child.parent.children if c is not child
                    ]
                child.parent = parent
        for text, data in self._texts.values():
            text.data = data


# ---------------------------------------------------------------------------
# Highlighter
# ---------------------------------------------------------------------------


class Highlighter:
    """Renders annotation spans into a container element.

    Args:
        element: The container whose text the annotations are anchored in.
        config: Markup conventions; defaults to ``get_settings().selection``.
    """

    def __init__(self, element: Element, config: SelectionConfig | None = None):
        self.el = element
        self.config = config if config is not None else get_settings().selection
        self._annotations: dict[str, Annotation] = {}

    # -- committed annotations ---------------------------------------------

    def init(self, annotations: Iterable[Annotation]) -> None:
        """Render *annotations*, longest span first so shorter ones nest."""
        ordered = sorted(annotations, key=lambda a: a.end - a.start, reverse=True)
        for annotation in ordered:
            self.add_annotation(annotation)
        logger.debug("Rendered %d annotations", len(ordered))

    def add_annotation(self, annotation: Annotation) -> list[Element]:
        """Render one committed annotation.

        An annotation without a quote takes the document text it is anchored
        on, so exact-overlap and specificity checks see its real extent.

        Raises:
            HighlighterError: If the annotation's offsets do not fit the
                container text or its quote does not match that text.
        """
        try:
            range_ = Range.from_offsets(self.el, annotation.start, annotation.end)
        except (OutOfBoundsError, ValueError) as exc:
            msg = f"Cannot anchor annotation {annotation.id!r}: {exc}"
            raise HighlighterError(msg) from exc

        found = range_.to_string()
        if annotation.quote and found != annotation.quote:
            msg = (
                f"Annotation {annotation.id!r} quote {annotation.quote!r} "
                f"does not match document text {found!r}"
            )
            raise HighlighterError(msg)

        spans = self.wrap_range(range_)
        if not annotation.quote:
            annotation.quote = found
        for span in spans:
            span.attributes[self.config.id_attribute] = annotation.id
        self._annotations[annotation.id] = annotation
        return spans

    def remove_annotation(self, annotation: Annotation | str) -> None:
        """Unwrap every span rendered for *annotation*."""
        annotation_id = annotation if isinstance(annotation, str) else annotation.id
        spans = [
            span
            for span in self.el.find_all_by_class(self.config.annotation_class)
            if span.get(self.config.id_attribute) == annotation_id
        ]
        self._unwrap_preserving_markup(spans)
        self._annotations.pop(annotation_id, None)

    def get_annotation(self, annotation_id: str) -> Annotation | None:
        return self._annotations.get(annotation_id)

    @property
    def annotations(self) -> list[Annotation]:
        return list(self._annotations.values())

    def annotation_for_span(self, span: Element) -> Annotation | None:
        annotation_id = span.get(self.config.id_attribute)
        if annotation_id is None:
            return None
        return self._annotations.get(annotation_id)

    def find_annotation_span(self, annotation_id: str) -> Element | None:
        """First rendered span of the annotation, in document order."""
        cls = self.config.annotation_class
        attr = self.config.id_attribute
        return self.el.find_first(
            lambda el: el.has_class(cls) and el.get(attr) == annotation_id
        )

    def get_annotations_at(self, element: Element) -> list[Annotation]:
        """Annotations rendered by *element* and its enclosing annotation spans.

        Sorted by quote length, shortest (most specific) first; ties keep
        innermost-first order.
        """
        found: list[Annotation] = []
        cls = self.config.annotation_class
        node = element.closest(cls)
        while node is not None and self.el.contains(node):
            annotation = self.annotation_for_span(node)
            if annotation is not None and all(a.id != annotation.id for a in found):
                found.append(annotation)
            node = node.parent.closest(cls) if node.parent is not None else None
        return sorted(found, key=lambda a: len(a.quote))

    # -- wrapping -------------------------------------------------------------

    def wrap_range(self, range_: Range, css_class: str | None = None) -> list[Element]:
        """Wrap every text segment covered by *range_* in its own span.

        Args:
            range_: Non-empty range inside the container.
            css_class: Class of the new spans (annotation class by default).

        Returns:
            The new spans in document order.

        Raises:
            HighlighterError: If the range cannot be wrapped.  The tree is
                left exactly as it was before the call.
        """
        css_class = css_class or self.config.annotation_class
        snapshot = _Snapshot()
        spans: list[Element] = []
        try:
            segments = range_.text_segments()
            for segment in segments:
                text = segment.node
                parent = text.parent
                if parent is None or not self.el.contains(parent):
                    msg = f"Text node {text!r} is outside the highlight container"
                    raise HighlighterError(msg)
                snapshot.record(parent)
                span = self._wrap_segment(text, segment.start, segment.end, css_class)
                spans.append(span)
        except HighlighterError:
            snapshot.restore()
            raise
        except (ValueError, IndexError) as exc:
            snapshot.restore()
            msg = f"Failed to wrap {range_!r}: {exc}"
            raise HighlighterError(msg) from exc

        if not spans:
            msg = f"Range {range_!r} covers no text"
            raise HighlighterError(msg)
        return spans

    @staticmethod
    def _wrap_segment(text: Text, start: int, end: int, css_class: str) -> Element:
        """Split ``text[start:end]`` into its own node and wrap it."""
        target = text
        if start > 0:
            target = target.split(start)
        if end - start < len(target.data):
            target.split(end - start)
        span = Element("span", {"class": css_class})
        parent = target.parent
        if parent is None:
            msg = "Cannot wrap a detached text node"
            raise ValueError(msg)
        parent.replace_child(span, target)
        span.append_child(target)
        return span

    # -- unwrapping -----------------------------------------------------------

    def unwrap_spans(self, spans: Iterable[Element]) -> None:
        """Replace each span with a text node of its text, then normalise.

        Raises:
            HighlighterError: If a span is detached; nothing is changed then.
        """
        items = list(spans)
        for span in items:
            if span.parent is None:
                msg = f"Cannot unwrap detached span {span!r}"
                raise HighlighterError(msg)
        for span in items:
            parent = span.parent
            if parent is not None:
                parent.replace_child(Text(span.text_content), span)
        self.el.normalize()

    def _unwrap_preserving_markup(self, spans: list[Element]) -> None:
        """Move each span's children up into its parent, then normalise."""
        for span in spans:
            parent = span.parent
            if parent is None:
                continue
            for child in list(span.children):
                parent.insert_before(child, span)
            parent.remove_child(span)
        self.el.normalize()
