"""Interval resolver: which leaves an annotation touches, and how.

For one ``[start, end)`` interval and the current offset index, returns
each intersected leaf tagged with its overlap kind and the node-relative
range to highlight.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from clauselens.overlay.offset_index import LeafInfo

logger = logging.getLogger(__name__)


class Overlap(StrEnum):
    """How an annotation interval meets one leaf range.

    CONTAINED: the whole annotation lies inside the leaf.
    LEFT: the leaf holds the annotation's opening portion.
    RIGHT: the leaf holds the annotation's closing portion.
    SPANNING: the leaf lies strictly inside the annotation.
    """

    CONTAINED = "contained"
    LEFT = "left"
    RIGHT = "right"
    SPANNING = "spanning"


@dataclass(frozen=True)
class Intersection:
    """A leaf to splice and the leaf-relative range ``[rel_start, rel_end)``."""

    leaf: LeafInfo
    overlap: Overlap
    rel_start: int
    rel_end: int


def classify(start: int, end: int, el_start: int, el_end: int) -> Overlap | None:
    """Classify interval ``[start, end)`` against leaf ``[el_start, el_end)``.

    Checks run in the order Contained, Left, Right, Spanning; None means
    the ranges do not intersect.
    """
    if el_start <= start and end <= el_end:
        return Overlap.CONTAINED
    if el_start <= start < el_end <= end:
        return Overlap.LEFT
    if start <= el_start < end <= el_end:
        return Overlap.RIGHT
    if start < el_start and el_end < end:
        return Overlap.SPANNING
    return None


def _relative_range(
    overlap: Overlap, start: int, end: int, leaf: LeafInfo
) -> tuple[int, int]:
    length = len(leaf.text)
    match overlap:
        case Overlap.CONTAINED:
            rel_start, rel_end = start - leaf.start, end - leaf.start
        case Overlap.LEFT:
            rel_start, rel_end = start - leaf.start, length
        case Overlap.RIGHT:
            rel_start, rel_end = 0, end - leaf.start
        case Overlap.SPANNING:
            rel_start, rel_end = 0, length
    return rel_start, min(rel_end, length)


def resolve_interval(start: int, end: int, index: list[LeafInfo]) -> list[Intersection]:
    """Find every leaf intersecting ``[start, end)``, in document order.

    The first Contained leaf ends the scan: a single-leaf annotation is
    resolved once. Intersections whose relative range is empty, or that
    start beyond the leaf's text, are dropped and the scan advances.
    """
    found: list[Intersection] = []
    for leaf in index:
        overlap = classify(start, end, leaf.start, leaf.end)
        if overlap is None:
            continue

        rel_start, rel_end = _relative_range(overlap, start, end, leaf)
        if rel_end <= rel_start or rel_start >= len(leaf.text):
            logger.debug(
                "Invalid relative range %d..%d in leaf %d..%d (%d chars)",
                rel_start,
                rel_end,
                leaf.start,
                leaf.end,
                len(leaf.text),
            )
            continue

        found.append(Intersection(leaf, overlap, rel_start, rel_end))
        if overlap is Overlap.CONTAINED:
            break
    return found
