"""Data models for annotations over a structured document.

These are plain frozen dataclasses. AI-detected annotations arrive with
the document analysis and are immutable for the session; user-authored
annotations are created from a resolved text selection and live only in
session memory.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

# User annotations carry fixed values where AI detections carry a score
# and a rationale.
USER_ANNOTATION_TYPE = "review-comments"
USER_CONFIDENCE = 100.0
USER_REASON = "User annotation"


class AnnotationSource(StrEnum):
    """Where an annotation came from."""

    AI = "ai"
    USER = "user"


class ConfidenceLevel(StrEnum):
    """Coarse confidence bands shown in the annotation detail view."""

    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"
    VERY_LOW = "Very Low"


@dataclass(frozen=True)
class Position:
    """Absolute character range ``[start, end)`` in the document text."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class Annotation:
    """A character-range claim over the document.

    Attributes:
        type: Clause type tag, in whichever encoding the producer used.
        selected_text: The exact substring the annotation claims to cover.
        position: Absolute offsets, or None when the producer could not
            locate the text. Annotations without a position are skipped.
        confidence: 0-100 detection confidence (fixed sentinel for users).
        reason: Detection rationale (fixed label for users).
        source: AI-detected or user-authored.
    """

    type: str
    selected_text: str
    position: Position | None = None
    confidence: float = 0.0
    reason: str = ""
    source: AnnotationSource = AnnotationSource.AI

    @property
    def is_user(self) -> bool:
        return self.source is AnnotationSource.USER

    @classmethod
    def from_selection(cls, text: str, start: int, end: int) -> Annotation:
        """Build a user annotation from a host-resolved selection.

        The rendering surface resolves the selection to ``(text, start,
        end)``; nothing here touches host selection state.
        """
        return cls(
            type=USER_ANNOTATION_TYPE,
            selected_text=text,
            position=Position(start, end),
            confidence=USER_CONFIDENCE,
            reason=USER_REASON,
            source=AnnotationSource.USER,
        )


def annotation_identifier(annotation: Annotation) -> str:
    """Derive the identifier embedded in a rendered highlight.

    ``type + "-" + start``. Two annotations of the same type starting at
    the same offset share an identifier; see ``annotation_key`` for the
    disambiguating companion. Notes are keyed by this value.
    """
    start = annotation.position.start if annotation.position else None
    return f"{annotation.type}-{start}"


def annotation_key(annotation: Annotation) -> str:
    """Derive ``type-start-end``, embedded next to the identifier."""
    if annotation.position is None:
        return f"{annotation.type}-None-None"
    pos = annotation.position
    return f"{annotation.type}-{pos.start}-{pos.end}"


def confidence_level(confidence: float) -> ConfidenceLevel:
    """Band a 0-100 confidence score."""
    if confidence >= 90:
        return ConfidenceLevel.HIGH
    if confidence >= 70:
        return ConfidenceLevel.MEDIUM
    if confidence >= 40:
        return ConfidenceLevel.LOW
    return ConfidenceLevel.VERY_LOW
