"""HTML to node-tree conversion.

Walks the selectolax DOM via child/next iteration (which exposes text nodes)
and mirrors it into :mod:`annoselect.dom.nodes`, so that the selection layer
can split and wrap text runs freely without round-tripping through HTML.
"""

from __future__ import annotations

import logging
from typing import Any

from selectolax.lexbor import LexborHTMLParser

from annoselect.dom.nodes import Element, Node, Text, to_html

__all__ = ["parse_html", "to_html"]

logger = logging.getLogger(__name__)

# Non-content tags, dropped together with their subtree
_STRIP_TAGS = frozenset(("script", "style", "noscript", "template"))


def _convert(node: Any) -> Node | None:
    """Convert one selectolax node (and its subtree) to a tree node."""
    tag = node.tag

    # selectolax reports text nodes with the "-text" tag
    if tag == "-text":
        text = node.text_content
        return Text(text) if text else None

    # Comments, doctype and other pseudo-nodes
    if not tag or tag[0] in "-_!" or tag in _STRIP_TAGS:
        return None

    element = Element(tag, dict(node.attributes))
    child = node.child
    while child is not None:
        converted = _convert(child)
        if converted is not None:
            element.append_child(converted)
        child = child.next
    return element


def parse_html(html: str) -> Element:
    """Parse *html* into a node tree rooted at a ``body`` element.

    Fragments are accepted; the parser supplies the implicit document
    structure and only the body content is kept.

    Args:
        html: HTML document or fragment.

    Returns:
        The ``body`` element holding the converted content.
    """
    body = Element("body")
    if not html:
        return body

    tree = LexborHTMLParser(html)
    source = tree.body
    if source is None:
        logger.debug("No body produced for %d chars of HTML", len(html))
        return body

    body.attributes.update(dict(source.attributes))
    child = source.child
    while child is not None:
        converted = _convert(child)
        if converted is not None:
            body.append_child(converted)
        child = child.next
    body.normalize()
    return body
