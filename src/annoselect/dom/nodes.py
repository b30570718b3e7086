"""In-memory node tree for annotatable document surfaces.

A deliberately small subset of the DOM: elements with attributes and ordered
children, mutable text nodes, and the handful of tree operations the
selection and highlight layers need (containment, ``closest`` lookup by class,
insertion/removal, and text-run normalisation).

Text offsets everywhere in annoselect are measured against
``Element.text_content``, i.e. the concatenation of every descendant text
node in document order, independent of the markup in between.
"""

# Pattern: Functional Core (plain tree data structure, no I/O)

from __future__ import annotations

from collections.abc import Callable, Iterator
from html import escape

# Elements serialised without a closing tag
VOID_ELEMENTS = frozenset(
    (
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "source",
        "track",
        "wbr",
    )
)


class Node:
    """Base class for tree nodes."""

    __slots__ = ("parent",)

    def __init__(self) -> None:
        self.parent: Element | None = None

    # -- navigation ---------------------------------------------------------

    @property
    def root(self) -> Node:
        """Topmost ancestor (the node itself when detached)."""
        node: Node = self
        while node.parent is not None:
            node = node.parent
        return node

    @property
    def index(self) -> int:
        """Position of this node among its parent's children."""
        if self.parent is None:
            msg = "Detached node has no index"
            raise ValueError(msg)
        for i, child in enumerate(self.parent.children):
            if child is self:
                return i
        msg = "Node is not among its parent's children"
        raise ValueError(msg)

    @property
    def next_sibling(self) -> Node | None:
        if self.parent is None:
            return None
        i = self.index + 1
        return self.parent.children[i] if i < len(self.parent.children) else None

    @property
    def previous_sibling(self) -> Node | None:
        if self.parent is None:
            return None
        i = self.index - 1
        return self.parent.children[i] if i >= 0 else None

    def contains(self, other: Node | None) -> bool:
        """Return True if *other* is this node or one of its descendants."""
        node = other
        while node is not None:
            if node is self:
                return True
            node = node.parent
        return False

    def closest(self, class_name: str) -> Element | None:
        """Nearest inclusive ancestor element carrying *class_name*."""
        node: Node | None = self
        while node is not None:
            if isinstance(node, Element) and node.has_class(class_name):
                return node
            node = node.parent
        return None

    @property
    def text_content(self) -> str:
        raise NotImplementedError

    def detach(self) -> None:
        """Remove this node from its parent, if any."""
        if self.parent is not None:
            self.parent.remove_child(self)


class Text(Node):
    """A run of character data."""

    __slots__ = ("data",)

    def __init__(self, data: str = "") -> None:
        super().__init__()
        self.data = data

    def __len__(self) -> int:
        return len(self.data)

    def __repr__(self) -> str:
        return f"Text({self.data!r})"

    @property
    def text_content(self) -> str:
        return self.data

    def split(self, offset: int) -> Text:
        """Split at *offset*; this node keeps the head, the tail is returned.

        The tail is inserted as the next sibling when the node is attached.
        """
        if not 0 <= offset <= len(self.data):
            msg = f"Split offset {offset} outside text of length {len(self.data)}"
            raise IndexError(msg)
        tail = Text(self.data[offset:])
        self.data = self.data[:offset]
        if self.parent is not None:
            self.parent.insert_before(tail, self.next_sibling)
        return tail


class Element(Node):
    """An element node with a tag, attributes and ordered children."""

    __slots__ = ("attributes", "children", "tag")

    def __init__(
        self,
        tag: str,
        attributes: dict[str, str | None] | None = None,
        children: list[Node] | None = None,
    ) -> None:
        super().__init__()
        self.tag = tag.lower()
        self.attributes: dict[str, str | None] = dict(attributes or {})
        self.children: list[Node] = []
        for child in children or []:
            self.append_child(child)

    def __repr__(self) -> str:
        attrs = "".join(f" {k}={v!r}" for k, v in self.attributes.items())
        return f"<Element {self.tag}{attrs}>"

    # -- attributes ---------------------------------------------------------

    def get(self, name: str, default: str | None = None) -> str | None:
        return self.attributes.get(name, default)

    @property
    def class_list(self) -> list[str]:
        return (self.attributes.get("class") or "").split()

    def has_class(self, class_name: str) -> bool:
        return class_name in self.class_list

    def add_class(self, class_name: str) -> None:
        classes = self.class_list
        if class_name not in classes:
            classes.append(class_name)
            self.attributes["class"] = " ".join(classes)

    def remove_class(self, class_name: str) -> None:
        classes = [c for c in self.class_list if c != class_name]
        if classes:
            self.attributes["class"] = " ".join(classes)
        else:
            self.attributes.pop("class", None)

    # -- mutation -----------------------------------------------------------

    def _adopt(self, node: Node) -> None:
        if node is self or node.contains(self):
            msg = "Cannot insert a node into itself or its own descendant"
            raise ValueError(msg)
        node.detach()
        node.parent = self

    def append_child(self, node: Node) -> Node:
        self._adopt(node)
        self.children.append(node)
        return node

    def insert_before(self, node: Node, reference: Node | None) -> Node:
        """Insert *node* before *reference* (append when reference is None)."""
        if reference is None:
            return self.append_child(node)
        if reference.parent is not self:
            msg = "Reference node is not a child of this element"
            raise ValueError(msg)
        self._adopt(node)
        self.children.insert(reference.index, node)
        return node

    def remove_child(self, node: Node) -> Node:
        if node.parent is not self:
            msg = "Node is not a child of this element"
            raise ValueError(msg)
        del self.children[node.index]
        node.parent = None
        return node

    def replace_child(self, new: Node, old: Node) -> Node:
        self.insert_before(new, old)
        return self.remove_child(old)

    def normalize(self) -> None:
        """Merge adjacent text runs and drop empty ones, recursively.

        Idempotent: a normalised tree is left untouched.
        """
        merged: list[Node] = []
        for child in self.children:
            if isinstance(child, Text):
                if not child.data:
                    child.parent = None
                    continue
                if merged and isinstance(merged[-1], Text):
                    previous = merged[-1]
                    previous.data += child.data
                    child.parent = None
                    continue
            elif isinstance(child, Element):
                child.normalize()
            merged.append(child)
        self.children = merged

    # -- traversal ----------------------------------------------------------

    def iter_descendants(self) -> Iterator[Node]:
        """Yield every descendant in document (pre-)order."""
        for child in self.children:
            yield child
            if isinstance(child, Element):
                yield from child.iter_descendants()

    def iter_elements(self) -> Iterator[Element]:
        for node in self.iter_descendants():
            if isinstance(node, Element):
                yield node

    def iter_text_nodes(self) -> Iterator[Text]:
        for node in self.iter_descendants():
            if isinstance(node, Text):
                yield node

    def find_first(self, predicate: Callable[[Element], bool]) -> Element | None:
        for element in self.iter_elements():
            if predicate(element):
                return element
        return None

    def find_all_by_class(self, class_name: str) -> list[Element]:
        return [el for el in self.iter_elements() if el.has_class(class_name)]

    def get_element_by_id(self, element_id: str) -> Element | None:
        if self.get("id") == element_id:
            return self
        return self.find_first(lambda el: el.get("id") == element_id)

    @property
    def text_content(self) -> str:
        return "".join(t.data for t in self.iter_text_nodes())

    # -- serialisation ------------------------------------------------------

    @property
    def inner_html(self) -> str:
        return "".join(to_html(child) for child in self.children)


# ---------------------------------------------------------------------------
# Serialisation
# ---------------------------------------------------------------------------


def _format_attributes(attributes: dict[str, str | None]) -> str:
    parts = []
    for name, value in attributes.items():
        if value is None:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{escape(value, quote=True)}"')
    return "".join(parts)


def to_html(node: Node) -> str:
    """Serialise *node* (and its subtree) to an HTML string."""
    if isinstance(node, Text):
        return escape(node.data, quote=False)
    if not isinstance(node, Element):
        msg = f"Cannot serialise {type(node).__name__}"
        raise TypeError(msg)
    attrs = _format_attributes(node.attributes)
    if node.tag in VOID_ELEMENTS:
        return f"<{node.tag}{attrs}>"
    inner = "".join(to_html(child) for child in node.children)
    return f"<{node.tag}{attrs}>{inner}</{node.tag}>"
