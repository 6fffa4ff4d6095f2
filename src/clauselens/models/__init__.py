"""Data models for annotations and the clause catalog."""

from clauselens.models.annotation import (
    USER_ANNOTATION_TYPE,
    USER_CONFIDENCE,
    USER_REASON,
    Annotation,
    AnnotationSource,
    ConfidenceLevel,
    Position,
    annotation_identifier,
    annotation_key,
    confidence_level,
)
from clauselens.models.catalog import (
    DEFAULT_CLAUSE_CATALOG,
    DEFAULT_CLAUSE_COLOR,
    ClauseCatalog,
    ClauseInfo,
    clause_color,
    clause_display_name,
    lookup_clause,
)

__all__ = [
    "DEFAULT_CLAUSE_CATALOG",
    "DEFAULT_CLAUSE_COLOR",
    "USER_ANNOTATION_TYPE",
    "USER_CONFIDENCE",
    "USER_REASON",
    "Annotation",
    "AnnotationSource",
    "ClauseCatalog",
    "ClauseInfo",
    "ConfidenceLevel",
    "Position",
    "annotation_identifier",
    "annotation_key",
    "clause_color",
    "clause_display_name",
    "confidence_level",
    "lookup_clause",
]
