"""Tests for SelectionStub, Annotation and SelectEvent."""

from __future__ import annotations

import pytest

from annoselect.selection.models import Annotation, SelectEvent, SelectionStub


class TestSelectionStub:
    def test_valid_stub(self) -> None:
        stub = SelectionStub(start=4, end=9, quote="quick")
        assert stub.to_dict() == {"start": 4, "end": 9, "quote": "quick"}

    @pytest.mark.parametrize(
        ("start", "end", "quote"),
        [
            (-1, 4, "abcde"),
            (4, 4, ""),
            (9, 4, "quick"),
            (4, 9, "quic"),
        ],
    )
    def test_rejects_inconsistent_fields(
        self, start: int, end: int, quote: str
    ) -> None:
        with pytest.raises(ValueError):
            SelectionStub(start=start, end=end, quote=quote)

    def test_is_immutable(self) -> None:
        stub = SelectionStub(4, 9, "quick")
        with pytest.raises(AttributeError):
            stub.start = 0  # type: ignore[misc]

    def test_selectors(self) -> None:
        stub = SelectionStub(4, 9, "quick")
        assert stub.to_selectors() == [
            {"type": "TextQuoteSelector", "exact": "quick"},
            {"type": "TextPositionSelector", "start": 4, "end": 9},
        ]
        assert SelectionStub.from_selectors(stub.to_selectors()) == stub

    def test_from_selectors_requires_both(self) -> None:
        with pytest.raises(ValueError, match="required"):
            SelectionStub.from_selectors(
                [{"type": "TextQuoteSelector", "exact": "quick"}]
            )


class TestAnnotation:
    def test_from_stub(self) -> None:
        stub = SelectionStub(4, 9, "quick")
        annotation = Annotation.from_stub("ann-1", stub, body={"comment": "hi"})

        assert annotation.id == "ann-1"
        assert annotation.matches(stub)
        assert annotation.body == {"comment": "hi"}

    def test_from_dict_accepts_char_keys(self) -> None:
        annotation = Annotation.from_dict(
            {"id": 7, "start_char": 4, "end_char": 9, "text": "quick"}
        )
        assert annotation == Annotation(id="7", start=4, end=9, quote="quick")

    def test_from_dict_requires_id(self) -> None:
        with pytest.raises(KeyError):
            Annotation.from_dict({"start": 0, "end": 1, "quote": "x"})

    @pytest.mark.parametrize(
        "stub",
        [
            SelectionStub(4, 8, "quic"),
            SelectionStub(5, 10, "uick "),
        ],
    )
    def test_matches_requires_identical_span(self, stub: SelectionStub) -> None:
        annotation = Annotation(id="a", start=4, end=9, quote="quick")
        assert not annotation.matches(stub)

    def test_matches_requires_identical_quote(self) -> None:
        annotation = Annotation(id="a", start=4, end=9, quote="QUICK")
        assert not annotation.matches(SelectionStub(4, 9, "quick"))


class TestSelectEvent:
    def test_empty(self) -> None:
        event = SelectEvent()
        assert event.is_empty
        assert not event.is_existing
        assert not event.is_new

    def test_shapes(self) -> None:
        assert SelectEvent(selection=SelectionStub(0, 1, "x")).is_new
        assert SelectEvent(selection=Annotation("a", 0, 1, "x")).is_existing
