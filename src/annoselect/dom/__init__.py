"""Text model: node tree, HTML conversion, ranges and native selection."""

from annoselect.dom.nodes import Element, Node, Text, to_html
from annoselect.dom.parser import parse_html
from annoselect.dom.range import Range, TextSegment, boundary_at, text_offset
from annoselect.dom.selection import NativeSelection, SelectionSource

__all__ = [
    "Element",
    "NativeSelection",
    "Node",
    "Range",
    "SelectionSource",
    "Text",
    "TextSegment",
    "boundary_at",
    "parse_html",
    "text_offset",
    "to_html",
]
