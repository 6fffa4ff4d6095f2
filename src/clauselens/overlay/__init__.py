"""Annotation overlay engine.

Reconciles character-offset annotations against an arbitrarily
segmented, offset-annotated HTML tree: index the text-bearing leaves,
resolve each interval to the leaves it touches, splice highlight spans
into replacement elements, and resolve clicks back to annotations.
"""

from clauselens.overlay.click import ClickTarget, resolve_click, resolve_click_target
from clauselens.overlay.diagnostics import (
    CollectingDiagnosticSink,
    DiagnosticSink,
    LoggingDiagnosticSink,
    SkippedAnnotation,
    SkipReason,
)
from clauselens.overlay.interval_resolver import (
    Intersection,
    Overlap,
    classify,
    resolve_interval,
)
from clauselens.overlay.markup import apply_page_visibility, count_pages
from clauselens.overlay.offset_index import LeafInfo, build_offset_index
from clauselens.overlay.orchestrator import (
    OverlayResult,
    RenderedHighlight,
    active_annotations,
    apply_overlay,
    render_overlay,
)
from clauselens.overlay.splicer import (
    HighlightSpec,
    build_highlight_spec,
    splice_highlight,
)

__all__ = [
    "ClickTarget",
    "CollectingDiagnosticSink",
    "DiagnosticSink",
    "HighlightSpec",
    "Intersection",
    "LeafInfo",
    "LoggingDiagnosticSink",
    "Overlap",
    "OverlayResult",
    "RenderedHighlight",
    "SkipReason",
    "SkippedAnnotation",
    "active_annotations",
    "apply_overlay",
    "apply_page_visibility",
    "build_highlight_spec",
    "build_offset_index",
    "classify",
    "count_pages",
    "render_overlay",
    "resolve_click",
    "resolve_click_target",
    "resolve_interval",
    "splice_highlight",
]
