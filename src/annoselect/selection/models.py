"""Data models for selections, annotations and emitted events.

These are plain dataclasses for in-memory use.  Persistence of annotations
belongs to the consumer of the ``select`` event.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from annoselect.dom.nodes import Element
    from annoselect.dom.range import Range

# W3C Web Annotation selector type names
TEXT_QUOTE_SELECTOR = "TextQuoteSelector"
TEXT_POSITION_SELECTOR = "TextPositionSelector"


@dataclass(frozen=True)
class SelectionStub:
    """Markup-independent description of a selected text span.

    Attributes:
        start: Characters preceding the selection in the container text.
        end: ``start`` plus the length of the selected text (exclusive).
        quote: The selected text itself.
    """

    start: int
    end: int
    quote: str

    def __post_init__(self) -> None:
        if self.start < 0:
            msg = f"Selection start must be non-negative, got {self.start}"
            raise ValueError(msg)
        if self.start >= self.end:
            msg = f"Selection start {self.start} must be before end {self.end}"
            raise ValueError(msg)
        if len(self.quote) != self.end - self.start:
            msg = (
                f"Quote of length {len(self.quote)} does not fit "
                f"[{self.start}, {self.end})"
            )
            raise ValueError(msg)

    def to_selectors(self) -> list[dict[str, Any]]:
        """Express the stub as W3C quote + position selectors."""
        return [
            {"type": TEXT_QUOTE_SELECTOR, "exact": self.quote},
            {"type": TEXT_POSITION_SELECTOR, "start": self.start, "end": self.end},
        ]

    @classmethod
    def from_selectors(cls, selectors: list[dict[str, Any]]) -> SelectionStub:
        """Rebuild a stub from a selector list produced by ``to_selectors``.

        Raises:
            ValueError: If either selector is missing.
        """
        by_type = {s.get("type"): s for s in selectors}
        quote = by_type.get(TEXT_QUOTE_SELECTOR)
        position = by_type.get(TEXT_POSITION_SELECTOR)
        if quote is None or position is None:
            msg = "Both TextQuoteSelector and TextPositionSelector are required"
            raise ValueError(msg)
        return cls(
            start=int(position["start"]),
            end=int(position["end"]),
            quote=str(quote["exact"]),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start, "end": self.end, "quote": self.quote}


@dataclass
class Annotation:
    """A committed annotation anchored on a text span.

    Attributes:
        id: Identifier rendered into the ``data-id`` attribute of its spans.
        start: Start character position (inclusive).
        end: End character position (exclusive).
        quote: The anchored text.
        body: Consumer-defined payload (comments, tags...); opaque here.
    """

    id: str
    start: int
    end: int
    quote: str
    body: Any = None

    @classmethod
    def from_stub(
        cls, annotation_id: str, stub: SelectionStub, body: Any = None
    ) -> Annotation:
        """Commit a selection stub as a new annotation."""
        return cls(
            id=annotation_id,
            start=stub.start,
            end=stub.end,
            quote=stub.quote,
            body=body,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Annotation:
        """Build an annotation from a plain mapping.

        Accepts ``start``/``end`` or ``start_char``/``end_char`` keys.
        """
        start = int(data.get("start", data.get("start_char", 0)))
        end = int(data.get("end", data.get("end_char", start)))
        return cls(
            id=str(data["id"]),
            start=start,
            end=end,
            quote=str(data.get("quote", data.get("text", ""))),
            body=data.get("body"),
        )

    def matches(self, stub: SelectionStub) -> bool:
        """True when the annotation covers exactly the stub's span."""
        return (
            self.start == stub.start
            and self.end == stub.end
            and self.quote == stub.quote
        )


@dataclass
class SelectEvent:
    """Payload of the ``select`` event.

    Exactly one of three shapes:

    - empty: nothing is selected (``selection`` and ``element`` are None)
    - existing annotation: ``selection`` is an :class:`Annotation`,
      ``element`` its rendered span
    - new candidate: ``selection`` is a :class:`SelectionStub`,
      ``element`` the trimmed :class:`~annoselect.dom.range.Range`
    """

    selection: Annotation | SelectionStub | None = None
    element: Element | Range | None = None

    @property
    def is_empty(self) -> bool:
        return self.selection is None

    @property
    def is_existing(self) -> bool:
        return isinstance(self.selection, Annotation)

    @property
    def is_new(self) -> bool:
        return isinstance(self.selection, SelectionStub)
