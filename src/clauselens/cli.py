"""Command-line utilities for clauselens.

``clauselens-render`` loads a document-analysis JSON payload, renders
the highlight overlay for one page and writes the markup, then reports
any annotations that could not be rendered.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from rich.console import Console
from rich.table import Table

from clauselens import _setup_logging
from clauselens.config import get_settings
from clauselens.errors import ClauseLensError, MalformedDocumentError
from clauselens.input_pipeline.analysis import load_document, parse_analysis
from clauselens.models.annotation import Annotation, confidence_level
from clauselens.models.catalog import clause_color, clause_display_name
from clauselens.overlay.diagnostics import CollectingDiagnosticSink
from clauselens.overlay.orchestrator import OverlayResult, apply_overlay

console = Console(stderr=True)


def _parse_user_annotation(value: str) -> Annotation:
    """Parse ``START:END:TEXT`` into a user annotation."""
    try:
        start_str, end_str, text = value.split(":", 2)
        start, end = int(start_str), int(end_str)
    except ValueError as exc:
        msg = f"expected START:END:TEXT, got {value!r}"
        raise argparse.ArgumentTypeError(msg) from exc
    return Annotation.from_selection(text, start, end)


def _build_render_parser() -> argparse.ArgumentParser:
    """Build argparse parser for the render command."""
    parser = argparse.ArgumentParser(
        prog="clauselens-render",
        description="Render clause highlights over an analysed document.",
    )
    parser.add_argument("analysis", type=Path, help="Document-analysis JSON file")
    parser.add_argument(
        "--page", type=int, default=1, help="1-based page to show (default: 1)"
    )
    parser.add_argument(
        "--filter",
        dest="types",
        action="append",
        metavar="TYPE",
        help="Enable only this clause type (repeatable; default: all)",
    )
    parser.add_argument(
        "--user-annotation",
        dest="user_annotations",
        action="append",
        type=_parse_user_annotation,
        metavar="START:END:TEXT",
        help="Add a review comment over START..END (repeatable)",
    )
    parser.add_argument(
        "-o", "--output", type=Path, help="Write markup here instead of stdout"
    )
    parser.add_argument(
        "--log", action="store_true", help="Also write a rotating log file"
    )
    return parser


def _confidence_label(annotation: Annotation) -> str:
    if annotation.is_user:
        return "-"
    return f"{confidence_level(annotation.confidence)} ({annotation.confidence:g})"


def _print_report(result: OverlayResult) -> None:
    console.print(
        f"[green]{len(result.highlights)} annotation(s) highlighted[/], "
        f"page {result.page} of {max(result.page_count, 1)}"
    )
    if not result.skipped:
        return

    table = Table(title="Skipped annotations")
    table.add_column("Type")
    table.add_column("Confidence")
    table.add_column("Reason")
    table.add_column("Detail")
    table.add_column("Text")
    for event in result.skipped:
        annotation = event.annotation
        colour = clause_color(annotation.type)
        table.add_row(
            f"[{colour}]{clause_display_name(annotation.type)}[/]",
            _confidence_label(annotation),
            event.reason.value,
            event.detail,
            annotation.selected_text[:50],
        )
    console.print(table)


def render_command(argv: list[str] | None = None) -> int:
    """Entry point for ``clauselens-render``."""
    args = _build_render_parser().parse_args(argv)
    settings = get_settings()
    if args.log:
        _setup_logging(settings.app.log_dir, settings.app.log_level)

    try:
        raw = args.analysis.read_bytes()
    except OSError as exc:
        console.print(f"[red]Cannot read {args.analysis}:[/] {exc}")
        return 1

    try:
        document = load_document(parse_analysis(raw))
    except ClauseLensError as exc:
        console.print(f"[red]{exc}[/]")
        return 1

    if document.content_type not in settings.overlay.structured_content_types:
        console.print(
            f"[yellow]Content type {document.content_type!r} is not structured; "
            "writing raw content[/]"
        )
        result = OverlayResult(markup=document.content)
    else:
        try:
            result = apply_overlay(
                document.content,
                [*document.clauses, *(args.user_annotations or [])],
                args.types,
                args.page,
                sink=CollectingDiagnosticSink(),
                settings=settings,
            )
        except MalformedDocumentError as exc:
            console.print(f"[yellow]{exc}; writing raw content[/]")
            result = OverlayResult(markup=document.content)

    if args.output:
        args.output.write_text(result.markup, encoding="utf-8")
        console.print(f"Wrote {args.output}")
    else:
        sys.stdout.write(result.markup)
        sys.stdout.write("\n")

    _print_report(result)
    return 0
