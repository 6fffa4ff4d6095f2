"""Document-analysis payload: validation and flattening into annotations.

The analysis service returns the converted document markup together with
its clause detections grouped by type. This module validates that
payload with pydantic and flattens it into the ``StructuredDocument``
shape the overlay engine consumes.
"""

# Pattern: Functional Core (pure validation and flattening)

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from clauselens.errors import (
    AnalysisFailedError,
    AnalysisNotReadyError,
    InvalidAnalysisError,
)
from clauselens.models.annotation import Annotation, AnnotationSource, Position

logger = logging.getLogger(__name__)

MISSING_CONTENT = "No content available"


class AnalysisStatus(StrEnum):
    """Processing state reported by the analysis service."""

    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class ClausePosition(BaseModel):
    """Absolute ``[start, end)`` offsets of a detection."""

    start: int
    end: int


class ClauseResult(BaseModel):
    """One clause detection as reported by the service."""

    model_config = ConfigDict(extra="ignore")

    selected_text: str
    reason: str = ""
    confidence: float = Field(default=0.0, ge=0, le=100)
    position: ClausePosition | None = None


class DocumentAnalysis(BaseModel):
    """Full analysis response for one document."""

    model_config = ConfigDict(extra="ignore")

    document_id: str
    status: AnalysisStatus
    timestamp: str = ""
    results: dict[str, list[ClauseResult]] = Field(default_factory=dict)
    content: str | None = None
    content_type: str | None = None


@dataclass
class StructuredDocument:
    """Document markup plus its AI-detected annotations."""

    content: str
    content_type: str | None = "html"
    clauses: list[Annotation] = field(default_factory=list)
    document_id: str = ""


def parse_analysis(raw: str | bytes | dict[str, Any]) -> DocumentAnalysis:
    """Validate a raw analysis payload.

    Args:
        raw: JSON text/bytes or an already-decoded mapping.

    Returns:
        The validated ``DocumentAnalysis``.

    Raises:
        InvalidAnalysisError: If the payload is not JSON or fails
            validation.
    """
    try:
        if isinstance(raw, dict):
            return DocumentAnalysis.model_validate(raw)
        return DocumentAnalysis.model_validate_json(raw)
    except ValidationError as exc:
        msg = f"Invalid document analysis: {exc.error_count()} validation error(s)"
        raise InvalidAnalysisError(msg) from exc


def _to_annotation(clause_type: str, result: ClauseResult) -> Annotation:
    position = (
        Position(result.position.start, result.position.end)
        if result.position is not None
        else None
    )
    return Annotation(
        type=clause_type,
        selected_text=result.selected_text,
        position=position,
        confidence=result.confidence,
        reason=result.reason,
        source=AnnotationSource.AI,
    )


def load_document(analysis: DocumentAnalysis) -> StructuredDocument:
    """Flatten a completed analysis into a ``StructuredDocument``.

    Arrival order of the resulting annotations is the order of the
    ``results`` mapping, then list order within each type.

    Raises:
        AnalysisNotReadyError: Status is ``processing``.
        AnalysisFailedError: Status is ``failed``.
    """
    if analysis.status is AnalysisStatus.PROCESSING:
        raise AnalysisNotReadyError(analysis.document_id)
    if analysis.status is AnalysisStatus.FAILED:
        raise AnalysisFailedError(analysis.document_id)

    clauses = [
        _to_annotation(clause_type, result)
        for clause_type, results in analysis.results.items()
        for result in results
    ]
    logger.debug(
        "Loaded document %s with %d clause(s)", analysis.document_id, len(clauses)
    )
    return StructuredDocument(
        document_id=analysis.document_id,
        content=analysis.content or MISSING_CONTENT,
        content_type=analysis.content_type,
        clauses=clauses,
    )
