"""Exact-overlap detection between a new selection and committed annotations.

After the transient selection spans are rendered, any committed annotation
covering the very same text encloses them.  Collecting the annotations
around those spans and keeping the ones with identical boundaries tells the
coordinator whether the user re-selected an existing annotation.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable

    from annoselect.dom.nodes import Element
    from annoselect.highlighter import Highlighter
    from annoselect.selection.models import Annotation, SelectionStub


def get_exact_overlaps(
    stub: SelectionStub,
    spans: Iterable[Element],
    highlighter: Highlighter,
) -> list[Annotation]:
    """Committed annotations whose start, end and quote equal *stub*'s.

    Candidates are gathered span by span in document order, and for each
    span from the most specific enclosing annotation outwards; duplicates
    keep their first position.  The first entry is the topmost match.
    """
    existing: list[Annotation] = []
    seen: set[str] = set()
    for span in spans:
        enclosing = span.closest(highlighter.config.annotation_class)
        if enclosing is None:
            continue
        for annotation in highlighter.get_annotations_at(enclosing):
            if annotation.id not in seen:
                seen.add(annotation.id)
                existing.append(annotation)

    return [annotation for annotation in existing if annotation.matches(stub)]
