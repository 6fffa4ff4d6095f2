"""Click resolver: map a clicked highlight back to its annotation.

The rendering surface delivers the clicked element's attributes; the
lookup recomputes each candidate's identifier with the same function
used at splice time, so embedding and lookup cannot drift apart.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING

from clauselens.models.annotation import annotation_identifier, annotation_key
from clauselens.overlay.splicer import (
    ANNOTATION_ID_ATTR,
    ANNOTATION_KEY_ATTR,
    CLAUSE_TYPE_ATTR,
)

if TYPE_CHECKING:
    from clauselens.models.annotation import Annotation


@dataclass(frozen=True)
class ClickTarget:
    """Identity attributes read from a clicked highlight span."""

    clause_type: str
    identifier: str
    key: str | None = None

    @classmethod
    def from_attributes(cls, attrs: Mapping[str, str | None]) -> ClickTarget | None:
        """Build a target from element attributes; None if not a highlight."""
        clause_type = attrs.get(CLAUSE_TYPE_ATTR)
        identifier = attrs.get(ANNOTATION_ID_ATTR)
        if not clause_type or not identifier:
            return None
        return cls(clause_type, identifier, attrs.get(ANNOTATION_KEY_ATTR) or None)


def resolve_click(
    clause_type: str,
    identifier: str,
    annotations: Iterable[Annotation],
    key: str | None = None,
) -> Annotation | None:
    """Find the annotation a clicked highlight was rendered from.

    Args:
        clause_type: ``data-clause-type`` of the clicked span.
        identifier: ``data-annotation-id`` of the clicked span.
        annotations: AI-detected followed by user-authored annotations,
            regardless of the current filter.
        key: Optional ``data-annotation-key``; when several annotations
            share *identifier* it picks the exact one.

    Returns:
        The matching annotation, or None for a stale identifier. With no
        *key* (or no key match), the first identifier match wins.
    """
    first: Annotation | None = None
    for annotation in annotations:
        if annotation.type != clause_type:
            continue
        if annotation_identifier(annotation) != identifier:
            continue
        if key is None or annotation_key(annotation) == key:
            return annotation
        if first is None:
            first = annotation
    return first


def resolve_click_target(
    target: ClickTarget, annotations: Iterable[Annotation]
) -> Annotation | None:
    """``resolve_click`` for an already-parsed ``ClickTarget``."""
    return resolve_click(target.clause_type, target.identifier, annotations, target.key)
