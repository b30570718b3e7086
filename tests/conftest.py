"""Shared pytest fixtures for annoselect tests."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field

import pytest

from annoselect.config import SelectionConfig, get_settings
from annoselect.dom.nodes import Element, Node
from annoselect.dom.parser import parse_html
from annoselect.dom.selection import NativeSelection
from annoselect.highlighter import Highlighter
from annoselect.selection.coordinator import SELECT, SelectionCoordinator
from annoselect.selection.gestures import GestureSource
from annoselect.selection.models import Annotation, SelectEvent

SENTENCE = "The quick brown fox"


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Iterator[None]:
    """Each test sees freshly resolved settings."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def selection_config() -> SelectionConfig:
    return SelectionConfig()


@dataclass
class Surface:
    """A parsed document wired to a coordinator, plus captured events."""

    body: Element
    doc: Element
    highlighter: Highlighter
    selection: NativeSelection
    coordinator: SelectionCoordinator
    gestures: GestureSource
    events: list[SelectEvent] = field(default_factory=list)

    def drag(self, start: int, end: int, root: Node | None = None) -> None:
        """Press, select ``[start, end)`` of *root* (default: doc), release."""
        root = self.doc if root is None else root
        self.gestures.press(self.doc)
        self.selection.select_offsets(root, start, end)
        self.gestures.release(self.doc)

    def click(self, target: Node) -> None:
        """Press and release on *target* without dragging."""
        self.gestures.press(target)
        self.selection.collapse(target)
        self.gestures.release(target)

    def transient_spans(self) -> list[Element]:
        return self.doc.find_all_by_class(self.coordinator.config.selection_class)

    def annotation_span(self, annotation_id: str) -> Element:
        span = self.highlighter.find_annotation_span(annotation_id)
        assert span is not None
        return span


@pytest.fixture
def make_surface(
    selection_config: SelectionConfig,
) -> Callable[..., Surface]:
    """Factory building a Surface from HTML with a ``#doc`` container."""

    def _make(
        html: str = f'<p id="doc">{SENTENCE}</p>',
        annotations: Sequence[Annotation] = (),
        *,
        read_only: bool = False,
        container_id: str = "doc",
    ) -> Surface:
        body = parse_html(html)
        doc = body.get_element_by_id(container_id)
        assert doc is not None
        highlighter = Highlighter(doc, selection_config)
        highlighter.init(annotations)
        selection = NativeSelection()
        coordinator = SelectionCoordinator(
            doc, highlighter, selection, read_only=read_only, config=selection_config
        )
        gestures = GestureSource()
        coordinator.attach(gestures)
        surface = Surface(body, doc, highlighter, selection, coordinator, gestures)
        coordinator.on(SELECT, surface.events.append)
        return surface

    return _make


@pytest.fixture
def quick_annotation() -> Annotation:
    return Annotation(id="ann-1", start=4, end=9, quote="quick")
