"""Highlight splicer: rebuild a leaf with one range wrapped in a span.

The leaf is never edited in place. Its current content is read as a
flat list of runs (text plus the stack of inline elements enclosing it,
earlier highlights included), the requested range is wrapped by pushing
the new highlight onto the stacks of the runs it covers, and a fresh
element with the leaf's tag and attributes is built from the runs and
substituted at the leaf's position.

Because earlier highlights are carried as stack frames, a second
annotation covering part of an already-highlighted range yields nested
spans; an annotation crossing another's edge is split into several
spans sharing the same attributes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from itertools import count, pairwise
from typing import TYPE_CHECKING, TypeAlias

from clauselens.models.annotation import annotation_identifier, annotation_key
from clauselens.overlay.style import highlight_style

if TYPE_CHECKING:
    from lxml.html import HtmlElement

    from clauselens.config import OverlayConfig
    from clauselens.models.annotation import Annotation
    from clauselens.models.catalog import ClauseInfo
    from clauselens.overlay.interval_resolver import Intersection

logger = logging.getLogger(__name__)

CLAUSE_TYPE_ATTR = "data-clause-type"
ANNOTATION_ID_ATTR = "data-annotation-id"
ANNOTATION_KEY_ATTR = "data-annotation-key"
CONFIDENCE_ATTR = "data-confidence"


# ---------------------------------------------------------------------------
# Run model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class _Frame:
    """An enclosing inline element.

    ``origin`` tells apart separate source elements that share a tag and
    attributes; it is None for highlight spans.
    """

    tag: str
    attrib: tuple[tuple[str, str], ...]
    origin: int | None = None


_Run: TypeAlias = tuple[str, tuple[_Frame, ...]]


@dataclass(frozen=True)
class HighlightSpec:
    """Tag and attributes of the span injected for one annotation."""

    attrib: tuple[tuple[str, str], ...]
    tag: str = "span"

    @property
    def frame(self) -> _Frame:
        return _Frame(self.tag, self.attrib)

    def get(self, name: str) -> str | None:
        return dict(self.attrib).get(name)


def _format_confidence(confidence: float) -> str:
    return f"{confidence:g}"


def build_highlight_spec(
    annotation: Annotation,
    clause: ClauseInfo,
    config: OverlayConfig,
) -> HighlightSpec:
    """Derive span attributes from an annotation and its catalog entry.

    AI detections carry ``data-confidence``; user annotations carry the
    user class instead.
    """
    classes = config.highlight_class
    if annotation.is_user:
        classes = f"{classes} {config.user_class}"

    attrib: list[tuple[str, str]] = [
        ("class", classes),
        (
            "style",
            highlight_style(
                clause.color,
                user=annotation.is_user,
                fill_alpha=config.fill_alpha,
                shadow_alpha=config.shadow_alpha,
            ),
        ),
        (CLAUSE_TYPE_ATTR, annotation.type),
        (ANNOTATION_ID_ATTR, annotation_identifier(annotation)),
        (ANNOTATION_KEY_ATTR, annotation_key(annotation)),
    ]
    if annotation.is_user:
        attrib.append(("title", clause.name))
    else:
        attrib.append((CONFIDENCE_ATTR, _format_confidence(annotation.confidence)))
        attrib.append(
            ("title", f"{clause.name} ({round(annotation.confidence)}% confidence)")
        )
    return HighlightSpec(tuple(attrib))


def _read_runs(element: HtmlElement) -> list[_Run]:
    """Flatten *element*'s content into runs, outermost frame first.

    Elements contributing no text (``<br>``, ``<img>``, empty spans) are
    kept as zero-length runs so the rebuild recreates them.
    """
    runs: list[_Run] = []
    origins = count(1)

    def walk(node: HtmlElement, stack: tuple[_Frame, ...]) -> None:
        if node.text:
            runs.append((node.text, stack))
        for child in node:
            # Comments and processing instructions have a non-string tag;
            # only their tail is document text.
            if isinstance(child.tag, str):
                frame = _frame_for(child, next(origins))
                before = len(runs)
                walk(child, (*stack, frame))
                if len(runs) == before:
                    runs.append(("", (*stack, frame)))
            if child.tail:
                runs.append((child.tail, stack))

    walk(element, ())
    return runs


def _frame_for(element: HtmlElement, origin: int) -> _Frame:
    # Pieces of an earlier highlight regroup by their attributes; any
    # other element only with pieces of itself.
    attrib = tuple(element.attrib.items())
    if element.get(ANNOTATION_KEY_ATTR) is not None:
        return _Frame(element.tag, attrib)
    return _Frame(element.tag, attrib, origin)


def _wrap_runs(runs: list[_Run], start: int, end: int, frame: _Frame) -> list[_Run]:
    """Split runs at *start*/*end* and push *frame* onto the covered pieces."""
    wrapped: list[_Run] = []
    pos = 0
    for text, stack in runs:
        if not text:
            # Empty elements sitting strictly inside the range join it.
            if start < pos < end:
                stack = (*stack[:-1], frame, stack[-1])
            wrapped.append((text, stack))
            continue
        run_start, run_end = pos, pos + len(text)
        pos = run_end
        cuts = sorted(
            {run_start, run_end} | {p for p in (start, end) if run_start < p < run_end}
        )
        for a, b in pairwise(cuts):
            piece = text[a - run_start : b - run_start]
            if start <= a and b <= end:
                wrapped.append((piece, (*stack, frame)))
            else:
                wrapped.append((piece, stack))
    return wrapped


def _append_text(parent: HtmlElement, last: HtmlElement | None, text: str) -> None:
    if not text:
        return
    if last is None:
        parent.text = (parent.text or "") + text
    else:
        last.tail = (last.tail or "") + text


def _build_children(parent: HtmlElement, runs: list[_Run], depth: int) -> None:
    """Materialise runs as children of *parent*.

    Consecutive runs sharing the frame at *depth* become one element. A
    zero-length run materialises an element with no text.
    """
    last: HtmlElement | None = None
    i = 0
    while i < len(runs):
        text, stack = runs[i]
        if len(stack) == depth:
            _append_text(parent, last, text)
            i += 1
            continue

        frame = stack[depth]
        j = i + 1
        while j < len(runs) and len(runs[j][1]) > depth and runs[j][1][depth] == frame:
            j += 1

        child = parent.makeelement(frame.tag, dict(frame.attrib))
        _build_children(child, runs[i:j], depth + 1)
        parent.append(child)
        last = child
        i = j


def splice_highlight(intersection: Intersection, spec: HighlightSpec) -> HtmlElement:
    """Substitute the intersected leaf with a highlighted replacement.

    The replacement keeps the leaf's tag, attributes and tail. Text
    before and after the highlighted range is emitted only when
    non-empty, so a LEFT overlap has no post-text and a RIGHT overlap
    no pre-text.

    Returns:
        The replacement element, now in the tree.
    """
    leaf = intersection.leaf.element
    runs = _read_runs(leaf)
    runs = _wrap_runs(runs, intersection.rel_start, intersection.rel_end, spec.frame)

    replacement = leaf.makeelement(leaf.tag, dict(leaf.attrib))
    _build_children(replacement, runs, 0)
    replacement.tail = leaf.tail

    parent = leaf.getparent()
    if parent is None:
        logger.debug("Leaf <%s> has no parent; cannot substitute", leaf.tag)
        return leaf
    parent.replace(leaf, replacement)
    return replacement
