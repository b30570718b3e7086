"""Selection lifecycle: from a finished gesture to a ``select`` event.

The coordinator reacts to press/release gestures on a document surface.

- A primary press clears any transient selection, so every drag starts
  from a clean slate and at most one transient highlight exists.
- A release with a collapsed native selection is a click: it surfaces the
  annotation under the pointer, or signals that nothing is selected.
- A release after a drag trims the range, converts it to a
  :class:`~annoselect.selection.models.SelectionStub`, renders transient
  highlight spans and checks them against committed annotations.  An exact
  match re-surfaces the existing annotation instead of stacking a second
  highlight on the same text; otherwise the stub is the candidate for a new
  annotation and its highlight stays until the next clear.

Everything runs synchronously inside the gesture handler.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from annoselect.config import SelectionConfig, get_settings
from annoselect.dom.range import Range
from annoselect.errors import HighlighterError
from annoselect.selection.events import EventEmitter
from annoselect.selection.models import SelectEvent
from annoselect.selection.normalizer import range_to_selection, trim_range
from annoselect.selection.overlaps import get_exact_overlaps

if TYPE_CHECKING:
    from annoselect.dom.nodes import Element
    from annoselect.dom.selection import SelectionSource
    from annoselect.highlighter import Highlighter
    from annoselect.selection.gestures import GestureEvent, GestureSource
    from annoselect.selection.models import SelectionStub

logger = logging.getLogger(__name__)

SELECT = "select"


class SelectionCoordinator(EventEmitter):
    """Turns gestures on *element* into ``select`` events.

    Args:
        element: The annotatable surface; selections escaping it are ignored.
        highlighter: Renders and queries highlight spans inside *element*.
        selection: The platform's native selection.
        read_only: Ignore drag selections (clicks on annotations still work).
            Defaults to ``config.read_only``.
        config: Markup conventions; defaults to ``get_settings().selection``.
    """

    def __init__(
        self,
        element: Element,
        highlighter: Highlighter,
        selection: SelectionSource,
        *,
        read_only: bool | None = None,
        config: SelectionConfig | None = None,
    ) -> None:
        super().__init__()
        self.el = element
        self.highlighter = highlighter
        self.selection = selection
        self.config = config if config is not None else get_settings().selection
        self.read_only = self.config.read_only if read_only is None else read_only

        self._enabled = True
        self._current: SelectionStub | None = None
        self._gestures: GestureSource | None = None

    # -- state ----------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, enabled: bool) -> None:
        # Gates future gestures only; an in-progress selection is kept.
        self._enabled = enabled

    @property
    def current(self) -> SelectionStub | None:
        """The uncommitted candidate selection, if any."""
        return self._current

    # -- wiring ---------------------------------------------------------------

    def attach(self, gestures: GestureSource) -> None:
        """Receive press/release gestures from *gestures*."""
        self.detach()
        gestures.subscribe(self.handle_press, self.handle_release)
        self._gestures = gestures

    def detach(self) -> None:
        if self._gestures is not None:
            self._gestures.unsubscribe(self.handle_press, self.handle_release)
            self._gestures = None

    # -- gesture handlers -----------------------------------------------------

    def handle_press(self, event: GestureEvent) -> None:
        if event.is_primary:
            self.clear_selection()

    def handle_release(self, event: GestureEvent) -> None:
        if not self._enabled:
            return

        if self.selection.is_collapsed:
            self._handle_click(event)
        elif not self.read_only:
            self._reconcile(self.selection.get_range_at(0))

    def _handle_click(self, event: GestureEvent) -> None:
        span = event.target.closest(self.config.annotation_class)
        if span is None:
            self.emit(SELECT, SelectEvent())
            return

        annotations = self.highlighter.get_annotations_at(span)
        if not annotations:
            # Span not registered with the highlighter; nothing to surface
            self.emit(SELECT, SelectEvent())
            return
        self.emit(SELECT, SelectEvent(selection=annotations[0], element=span))

    def _reconcile(self, native_range: Range) -> None:
        trimmed = trim_range(native_range)
        if trimmed.collapsed:
            logger.debug("Selection is whitespace only; ignoring")
            return

        if not self.el.contains(trimmed.common_ancestor_container):
            logger.debug("Selection escapes the document surface; ignoring")
            return

        stub = range_to_selection(trimmed, self.el)

        try:
            spans = self.highlighter.wrap_range(
                trimmed, css_class=self.config.selection_class
            )
        except HighlighterError:
            logger.exception("Could not highlight selection %r", stub)
            raise

        self._hide_native_selection()

        exact_overlaps = get_exact_overlaps(stub, spans, self.highlighter)
        if exact_overlaps:
            # Re-surface the topmost existing annotation instead of layering
            top = exact_overlaps[0]
            self.clear_selection()
            logger.debug(
                "Selection %r matches %d annotation(s); using %r",
                stub,
                len(exact_overlaps),
                top.id,
            )
            self.emit(
                SELECT,
                SelectEvent(
                    selection=top,
                    element=self.highlighter.find_annotation_span(top.id),
                ),
            )
            return

        self._current = stub
        self.emit(SELECT, SelectEvent(selection=stub, element=Range.spanning(spans)))

    # -- clearing -------------------------------------------------------------

    def _hide_native_selection(self) -> None:
        self.el.add_class(self.config.hide_selection_class)

    def clear_selection(self) -> None:
        """Drop the transient selection and its highlight.  Idempotent."""
        if not self._enabled:
            return

        self._current = None
        self.selection.remove_all_ranges()
        self.el.remove_class(self.config.hide_selection_class)

        spans = self.el.find_all_by_class(self.config.selection_class)
        if spans:
            self.highlighter.unwrap_spans(spans)
        else:
            self.el.normalize()
