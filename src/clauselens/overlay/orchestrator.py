"""Overlay orchestrator: one full highlighting pass over a document.

Per pass:

1. Build the active set (AI-detected and user-authored annotations whose
   type is enabled in the active filter).
2. Stable-sort it by start offset.
3. For each annotation, rebuild the offset index from the *current*
   tree, resolve the interval and splice every intersection.
4. Show only the selected page container.
5. Serialize the body content.

Every pass parses the original markup afresh; nothing from a previous
pass is reused, so splits never compound across filter or page changes.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from clauselens.clause_types import to_hyphenated
from clauselens.config import get_settings
from clauselens.errors import MalformedDocumentError
from clauselens.models.annotation import annotation_identifier, annotation_key
from clauselens.models.catalog import DEFAULT_CLAUSE_CATALOG, lookup_clause
from clauselens.overlay.diagnostics import (
    CollectingDiagnosticSink,
    LoggingDiagnosticSink,
    SkippedAnnotation,
    SkipReason,
)
from clauselens.overlay.interval_resolver import resolve_interval
from clauselens.overlay.markup import (
    apply_page_visibility,
    count_pages,
    parse_document,
    serialize_children,
)
from clauselens.overlay.offset_index import build_offset_index
from clauselens.overlay.splicer import build_highlight_spec, splice_highlight

if TYPE_CHECKING:
    from lxml.html import HtmlElement

    from clauselens.config import Settings
    from clauselens.input_pipeline.analysis import StructuredDocument
    from clauselens.models.annotation import Annotation
    from clauselens.models.catalog import ClauseCatalog
    from clauselens.overlay.diagnostics import DiagnosticSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderedHighlight:
    """An annotation that produced at least one highlight span."""

    identifier: str
    key: str
    clause_type: str
    annotation: Annotation
    span_count: int


@dataclass
class OverlayResult:
    """Output of one overlay pass."""

    markup: str
    page: int = 1
    page_count: int = 0
    highlights: list[RenderedHighlight] = field(default_factory=list)
    skipped: list[SkippedAnnotation] = field(default_factory=list)


class _TeeSink:
    """Forward events to the caller's sink and keep a copy for the result."""

    def __init__(self, downstream: DiagnosticSink) -> None:
        self.downstream = downstream
        self.collected = CollectingDiagnosticSink()

    def on_skipped_annotation(
        self, reason: SkipReason, annotation: Annotation, detail: str = ""
    ) -> None:
        self.collected.on_skipped_annotation(reason, annotation, detail)
        self.downstream.on_skipped_annotation(reason, annotation, detail)


def _normalise_filter(
    active_filter: Iterable[str] | None, catalog: ClauseCatalog
) -> frozenset[str]:
    if active_filter is None:
        return frozenset(to_hyphenated(t) for t in catalog)
    return frozenset(to_hyphenated(t) for t in active_filter)


def active_annotations(
    annotations: Iterable[Annotation],
    active_filter: Iterable[str] | None,
    catalog: ClauseCatalog = DEFAULT_CLAUSE_CATALOG,
) -> list[Annotation]:
    """Filter by enabled type and stable-sort by start offset.

    Args:
        annotations: AI-detected followed by user-authored annotations.
        active_filter: Enabled clause types in either encoding; None
            enables every catalog type.
        catalog: Used only to expand a None filter.

    Returns:
        Annotations ordered by ``position.start``; ties keep arrival
        order. Annotations without a position sort first so they are
        reported before any splicing happens.
    """
    enabled = _normalise_filter(active_filter, catalog)
    selected = [a for a in annotations if to_hyphenated(a.type) in enabled]
    return sorted(selected, key=lambda a: a.position.start if a.position else -1)


def _overlay_one(
    body: HtmlElement,
    annotation: Annotation,
    catalog: ClauseCatalog,
    settings: Settings,
    sink: DiagnosticSink,
) -> RenderedHighlight | None:
    position = annotation.position
    if position is None:
        sink.on_skipped_annotation(
            SkipReason.MISSING_POSITION, annotation, "annotation has no position"
        )
        return None
    if position.start < 0 or position.end < 0:
        sink.on_skipped_annotation(
            SkipReason.INVALID_POSITION,
            annotation,
            f"negative offsets {position.start}..{position.end}",
        )
        return None

    clause = lookup_clause(catalog, annotation.type)
    if clause is None:
        sink.on_skipped_annotation(
            SkipReason.UNKNOWN_CLAUSE_TYPE,
            annotation,
            f"no catalog entry for {annotation.type!r}",
        )
        return None

    # Re-index on every annotation: earlier splices replaced leaf elements.
    index = build_offset_index(body)
    intersections = resolve_interval(position.start, position.end, index)
    if not intersections:
        if position.length <= 0:
            reason = SkipReason.EMPTY_RANGE
        else:
            reason = SkipReason.NO_MATCH
        sink.on_skipped_annotation(
            reason,
            annotation,
            f"no element contains text at positions {position.start}-{position.end}",
        )
        return None

    spec = build_highlight_spec(annotation, clause, settings.overlay)
    for intersection in intersections:
        logger.debug(
            "Highlighting %s %d..%d in leaf %d..%d (%s)",
            annotation.type,
            intersection.rel_start,
            intersection.rel_end,
            intersection.leaf.start,
            intersection.leaf.end,
            intersection.overlap.value,
        )
        splice_highlight(intersection, spec)

    return RenderedHighlight(
        identifier=annotation_identifier(annotation),
        key=annotation_key(annotation),
        clause_type=annotation.type,
        annotation=annotation,
        span_count=len(intersections),
    )


def apply_overlay(
    markup: str,
    annotations: Iterable[Annotation],
    active_filter: Iterable[str] | None = None,
    page: int | None = 1,
    *,
    catalog: ClauseCatalog = DEFAULT_CLAUSE_CATALOG,
    sink: DiagnosticSink | None = None,
    settings: Settings | None = None,
) -> OverlayResult:
    """Run one overlay pass over *markup*.

    Args:
        markup: Original structured-document markup.
        annotations: AI-detected followed by user-authored annotations.
        active_filter: Enabled clause types; None enables the catalog.
        page: 1-based page to show, or None to leave every page
            visible (the caller applies visibility separately).
        catalog: Display name and colour per clause type.
        sink: Receives one event per skipped annotation. Defaults to a
            logging sink.
        settings: Defaults to ``get_settings()``.

    Returns:
        The highlighted markup with rendered/skipped bookkeeping.

    Raises:
        MalformedDocumentError: If *markup* cannot be parsed.
    """
    settings = settings or get_settings()
    tee = _TeeSink(sink or LoggingDiagnosticSink())

    body = parse_document(markup)
    ordered = active_annotations(annotations, active_filter, catalog)
    logger.debug("Annotations to highlight: %d", len(ordered))

    highlights: list[RenderedHighlight] = []
    for annotation in ordered:
        rendered = _overlay_one(body, annotation, catalog, settings, tee)
        if rendered is not None:
            highlights.append(rendered)

    serialized = serialize_children(body)
    selector = settings.overlay.page_selector
    if page is None:
        shown, page_count = 0, count_pages(serialized, selector)
    else:
        serialized, shown, page_count = apply_page_visibility(
            serialized, page, selector
        )
    return OverlayResult(
        markup=serialized,
        page=shown,
        page_count=page_count,
        highlights=highlights,
        skipped=list(tee.collected.events),
    )


def render_overlay(
    document: StructuredDocument,
    annotations: Iterable[Annotation] = (),
    active_filter: Iterable[str] | None = None,
    page: int = 1,
    *,
    catalog: ClauseCatalog = DEFAULT_CLAUSE_CATALOG,
    sink: DiagnosticSink | None = None,
    settings: Settings | None = None,
) -> str:
    """Render *document* with every active annotation highlighted.

    Args:
        document: Markup plus its AI-detected clauses.
        annotations: User-authored annotations held by the session.
        active_filter: Enabled clause types; None enables the catalog.
        page: 1-based page to show.
        catalog: Display name and colour per clause type.
        sink: Diagnostic sink for skipped annotations.
        settings: Defaults to ``get_settings()``.

    Returns:
        Highlighted markup. Content that is not structured markup, or
        that cannot be parsed, is returned unchanged.
    """
    settings = settings or get_settings()
    if document.content_type not in settings.overlay.structured_content_types:
        return document.content

    try:
        result = apply_overlay(
            document.content,
            [*document.clauses, *annotations],
            active_filter,
            page,
            catalog=catalog,
            sink=sink,
            settings=settings,
        )
    except MalformedDocumentError:
        logger.exception(
            "Overlay pass failed for document %r; showing raw content",
            document.document_id,
        )
        return document.content
    return result.markup
