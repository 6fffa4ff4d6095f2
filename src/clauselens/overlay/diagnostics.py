"""Diagnostic sink for annotations an overlay pass could not render.

A skipped annotation is never an error for the pass as a whole: the
orchestrator reports it here and carries on with the rest. Callers
inject a sink; the default one writes to the module logger.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from clauselens.models.annotation import Annotation

logger = logging.getLogger(__name__)


class SkipReason(StrEnum):
    """Why an annotation produced no highlight."""

    MISSING_POSITION = "missing-position"
    INVALID_POSITION = "invalid-position"
    EMPTY_RANGE = "empty-range"
    UNKNOWN_CLAUSE_TYPE = "unknown-clause-type"
    NO_MATCH = "no-match"


@dataclass(frozen=True)
class SkippedAnnotation:
    """One diagnostic event."""

    reason: SkipReason
    annotation: Annotation
    detail: str = ""


class DiagnosticSink(Protocol):
    """Receives one event per annotation skipped during an overlay pass."""

    def on_skipped_annotation(
        self,
        reason: SkipReason,
        annotation: Annotation,
        detail: str = "",
    ) -> None:
        """Record that *annotation* was not rendered.

        Args:
            reason: Category of the failure.
            annotation: The annotation that was skipped.
            detail: Human-readable context (offsets, type).
        """
        ...


class LoggingDiagnosticSink:
    """Default sink: one WARNING per skipped annotation."""

    def on_skipped_annotation(
        self,
        reason: SkipReason,
        annotation: Annotation,
        detail: str = "",
    ) -> None:
        logger.warning(
            "Skipped %s annotation (%s): %s [%.50s]",
            annotation.type,
            reason.value,
            detail,
            annotation.selected_text,
        )


class CollectingDiagnosticSink:
    """Sink that keeps every event, for tests and reporting."""

    def __init__(self) -> None:
        self.events: list[SkippedAnnotation] = []

    def on_skipped_annotation(
        self,
        reason: SkipReason,
        annotation: Annotation,
        detail: str = "",
    ) -> None:
        self.events.append(SkippedAnnotation(reason, annotation, detail))

    @property
    def reasons(self) -> list[SkipReason]:
        return [event.reason for event in self.events]
