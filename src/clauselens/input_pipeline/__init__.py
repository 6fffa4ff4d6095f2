"""Input pipeline: validate analysis payloads into structured documents."""

from clauselens.input_pipeline.analysis import (
    AnalysisStatus,
    ClausePosition,
    ClauseResult,
    DocumentAnalysis,
    StructuredDocument,
    load_document,
    parse_analysis,
)

__all__ = [
    "AnalysisStatus",
    "ClausePosition",
    "ClauseResult",
    "DocumentAnalysis",
    "StructuredDocument",
    "load_document",
    "parse_analysis",
]
