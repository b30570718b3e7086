"""Command-line front end for exercising selections against HTML files.

Usage:
    annoselect text doc.html                          # flattened text + offsets
    annoselect select doc.html --start 4 --end 9      # simulate a drag
    annoselect select doc.html --start 4 --end 9 --annotations anns.json
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, NoReturn

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from annoselect import _setup_logging
from annoselect.config import get_settings
from annoselect.dom.parser import parse_html
from annoselect.dom.selection import NativeSelection
from annoselect.errors import OutOfBoundsError, SelectionError
from annoselect.highlighter import Highlighter
from annoselect.selection.coordinator import SELECT, SelectionCoordinator
from annoselect.selection.gestures import GestureSource
from annoselect.selection.models import Annotation, SelectEvent, SelectionStub

if TYPE_CHECKING:
    from annoselect.dom.nodes import Element

console = Console()


def _build_parser() -> argparse.ArgumentParser:
    """Build argparse parser for annoselect subcommands."""
    parser = argparse.ArgumentParser(
        prog="annoselect",
        description="Reconcile text selections with existing annotations.",
    )
    parser.add_argument(
        "--log", action="store_true", help="Write logs to the configured log dir"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    # text
    text_p = sub.add_parser("text", help="Show the flattened text with offsets")
    text_p.add_argument("file", type=Path, help="HTML document")
    text_p.add_argument("--container", default=None, help="Id of the container")
    text_p.add_argument(
        "--width", type=int, default=40, help="Characters per row (default: 40)"
    )

    # select
    select_p = sub.add_parser("select", help="Simulate a drag selection")
    select_p.add_argument("file", type=Path, help="HTML document")
    select_p.add_argument("--start", type=int, required=True, help="Start offset")
    select_p.add_argument("--end", type=int, required=True, help="End offset")
    select_p.add_argument("--container", default=None, help="Id of the container")
    select_p.add_argument(
        "--annotations",
        type=Path,
        default=None,
        help="JSON list of committed annotations ({id, start, end, quote})",
    )
    select_p.add_argument(
        "--read-only", action="store_true", help="Ignore drag selections"
    )

    return parser


def _fail(message: str, con: Console) -> NoReturn:
    con.print(f"[red]Error:[/] {escape(message)}")
    sys.exit(1)


def _load_container(path: Path, container_id: str | None, con: Console) -> Element:
    """Parse *path* and return the container element, or exit with error."""
    if not path.is_file():
        _fail(f"file not found: {path}", con)
    body = parse_html(path.read_text(encoding="utf-8"))
    if container_id is None:
        return body
    container = body.get_element_by_id(container_id)
    if container is None:
        _fail(f"no element with id '{container_id}' in {path}", con)
    return container


def _load_annotations(path: Path | None, con: Console) -> list[Annotation]:
    """Read committed annotations from a JSON file, or exit with error."""
    if path is None:
        return []
    try:
        data: Any = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        _fail(f"cannot read annotations from {path}: {exc}", con)
    if not isinstance(data, list):
        _fail(f"{path} must contain a JSON list", con)
    try:
        return [Annotation.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError) as exc:
        _fail(f"malformed annotation in {path}: {exc}", con)


def _describe_event(event: SelectEvent) -> str:
    if event.is_empty:
        return "[dim]nothing selected[/]"
    if isinstance(event.selection, Annotation):
        a = event.selection
        return (
            f"[green]existing annotation[/] [bold]{a.id}[/] "
            f"[{a.start}, {a.end}) {escape(repr(a.quote))}"
        )
    stub = event.selection
    assert isinstance(stub, SelectionStub)
    return (
        f"[cyan]new selection[/] [{stub.start}, {stub.end}) "
        f"{escape(repr(stub.quote))}\n"
        f"selectors: {escape(json.dumps(stub.to_selectors()))}"
    )


def _cmd_text(
    path: Path,
    *,
    container_id: str | None = None,
    width: int = 40,
    console: Console | None = None,
) -> None:
    """Print the container text in rows labelled with their start offset."""
    con = console or globals()["console"]
    container = _load_container(path, container_id, con)
    text = container.text_content

    table = Table(title=f"{path.name} ({len(text)} chars)")
    table.add_column("Offset", justify="right", style="cyan")
    table.add_column("Text")
    for offset in range(0, len(text), max(width, 1)):
        table.add_row(str(offset), escape(repr(text[offset : offset + width])))
    con.print(table)


def _cmd_select(
    path: Path,
    start: int,
    end: int,
    *,
    container_id: str | None = None,
    annotations_path: Path | None = None,
    read_only: bool = False,
    console: Console | None = None,
) -> list[SelectEvent]:
    """Simulate press + drag + release over ``[start, end)`` and report events."""
    con = console or globals()["console"]
    container = _load_container(path, container_id, con)
    annotations = _load_annotations(annotations_path, con)

    settings = get_settings()
    highlighter = Highlighter(container, settings.selection)
    try:
        highlighter.init(annotations)
    except SelectionError as exc:
        _fail(str(exc), con)

    selection = NativeSelection()
    coordinator = SelectionCoordinator(
        container,
        highlighter,
        selection,
        read_only=read_only or settings.selection.read_only,
        config=settings.selection,
    )
    gestures = GestureSource()
    coordinator.attach(gestures)

    events: list[SelectEvent] = []
    coordinator.on(SELECT, events.append)

    gestures.press(container)
    try:
        selection.select_offsets(container, start, end)
    except OutOfBoundsError as exc:
        _fail(str(exc), con)
    gestures.release(container)

    if not events:
        con.print("[yellow]No event emitted[/] (empty, out-of-bounds or read-only)")
    for event in events:
        con.print(Panel(_describe_event(event), title="select", border_style="blue"))
    con.print(Panel(escape(container.inner_html), title="markup", border_style="dim"))
    return events


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for annoselect."""
    args = _build_parser().parse_args(argv)

    if args.log:
        _setup_logging()

    if args.command == "text":
        _cmd_text(args.file, container_id=args.container, width=args.width)
    elif args.command == "select":
        _cmd_select(
            args.file,
            args.start,
            args.end,
            container_id=args.container,
            annotations_path=args.annotations,
            read_only=args.read_only,
        )


if __name__ == "__main__":
    main()
