"""Tests for Range and the text offset mappings."""

from __future__ import annotations

import pytest

from annoselect.dom.nodes import Element, Text
from annoselect.dom.parser import parse_html
from annoselect.dom.range import Range, boundary_at, text_offset
from annoselect.dom.selection import NativeSelection
from annoselect.errors import OutOfBoundsError


def _doc() -> Element:
    body = parse_html('<p id="doc">The <em>quick</em> brown fox</p>')
    doc = body.get_element_by_id("doc")
    assert doc is not None
    return doc


def _em(doc: Element) -> Element:
    em = doc.find_first(lambda el: el.tag == "em")
    assert em is not None
    return em


class TestTextOffset:
    def test_offset_in_text_node(self) -> None:
        doc = _doc()
        em_text = _em(doc).children[0]
        assert text_offset(doc, em_text, 2) == 6

    def test_offset_as_child_index(self) -> None:
        doc = _doc()
        assert text_offset(doc, doc, 0) == 0
        assert text_offset(doc, doc, 1) == 4
        assert text_offset(doc, doc, 2) == 9
        assert text_offset(doc, doc, 3) == 19

    def test_container_outside_root(self) -> None:
        doc = _doc()
        with pytest.raises(OutOfBoundsError):
            text_offset(doc, Text("elsewhere"), 0)


class TestBoundaryAt:
    def test_forward_anchors_on_following_node(self) -> None:
        doc = _doc()
        node, offset = boundary_at(doc, 4, forward=True)
        assert node is _em(doc).children[0]
        assert offset == 0

    def test_backward_anchors_on_preceding_node(self) -> None:
        doc = _doc()
        node, offset = boundary_at(doc, 4, forward=False)
        assert node is doc.children[0]
        assert offset == 4

    def test_document_edges(self) -> None:
        doc = _doc()
        assert boundary_at(doc, 0, forward=False) == (doc.children[0], 0)
        assert boundary_at(doc, 19, forward=True) == (doc.children[-1], 10)

    def test_out_of_range_position(self) -> None:
        with pytest.raises(OutOfBoundsError):
            boundary_at(_doc(), 20, forward=True)


class TestRange:
    def test_to_string_crosses_markup(self) -> None:
        doc = _doc()
        assert Range.from_offsets(doc, 4, 15).to_string() == "quick brown"

    def test_collapsed(self) -> None:
        doc = _doc()
        assert Range.from_offsets(doc, 3, 3).collapsed
        assert not Range.from_offsets(doc, 3, 4).collapsed

    def test_common_ancestor_single_text_node(self) -> None:
        doc = _doc()
        em_text = _em(doc).children[0]
        assert Range.from_offsets(doc, 5, 8).common_ancestor_container is em_text

    def test_common_ancestor_across_siblings(self) -> None:
        doc = _doc()
        assert Range.from_offsets(doc, 2, 12).common_ancestor_container is doc

    def test_invalid_offset_rejected(self) -> None:
        with pytest.raises(IndexError):
            Range(Text("abc"), 5)

    def test_start_after_end_rejected(self) -> None:
        with pytest.raises(ValueError, match="after end"):
            Range.from_offsets(_doc(), 9, 4)

    def test_set_start_and_clone(self) -> None:
        doc = _doc()
        range_ = Range.from_offsets(doc, 4, 9)
        copy = range_.clone()
        range_.set_start(doc.children[0], 0)

        assert range_.to_string() == "The quick"
        assert copy.to_string() == "quick"

    def test_text_segments(self) -> None:
        doc = _doc()
        segments = Range.from_offsets(doc, 2, 12).text_segments()

        assert [s.node.data[s.start : s.end] for s in segments] == [
            "e ",
            "quick",
            " br",
        ]

    def test_spanning(self) -> None:
        doc = _doc()
        range_ = Range.spanning([_em(doc)])
        assert range_.to_string() == "quick"


class TestNativeSelection:
    def test_empty_selection_is_collapsed(self) -> None:
        selection = NativeSelection()
        assert selection.is_collapsed
        assert selection.range_count == 0
        with pytest.raises(IndexError):
            selection.get_range_at(0)

    def test_select_offsets(self) -> None:
        doc = _doc()
        selection = NativeSelection()
        selection.select_offsets(doc, 4, 9)

        assert not selection.is_collapsed
        assert selection.to_string() == "quick"

        selection.remove_all_ranges()
        assert selection.range_count == 0

    def test_caret_is_collapsed(self) -> None:
        doc = _doc()
        selection = NativeSelection()
        selection.collapse(doc, 1)

        assert selection.range_count == 1
        assert selection.is_collapsed
