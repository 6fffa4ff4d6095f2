"""Clause catalog: display name and highlight colour per clause type.

The catalog is keyed by the hyphenated type encoding. It is supplied by
the caller; ``DEFAULT_CLAUSE_CATALOG`` covers the types the analysis
service currently detects plus user review comments.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TypeAlias

from clauselens.clause_types import to_hyphenated, to_underscored
from clauselens.models.annotation import USER_ANNOTATION_TYPE

DEFAULT_CLAUSE_COLOR = "#64748B"  # slate


@dataclass(frozen=True)
class ClauseInfo:
    """Display metadata for one clause type."""

    name: str
    color: str


ClauseCatalog: TypeAlias = Mapping[str, ClauseInfo]

DEFAULT_CLAUSE_CATALOG: dict[str, ClauseInfo] = {
    "force-majeure": ClauseInfo("Force Majeure", "#6366F1"),  # indigo
    "limitation-of-liability": ClauseInfo("Limitation of Liability", "#0EA5E9"),
    "assignment": ClauseInfo("Assignment", "#F97316"),  # orange
    "severability": ClauseInfo("Severability", "#EC4899"),  # pink
    "no-waiver": ClauseInfo("No Waiver", "#14B8A6"),  # teal
    "confidentiality": ClauseInfo("Confidentiality", "#10B981"),  # emerald
    "governing-law": ClauseInfo("Governing Law", DEFAULT_CLAUSE_COLOR),
    USER_ANNOTATION_TYPE: ClauseInfo("Review Comments", "#F59E0B"),  # amber
}


def clause_display_name(clause_type: str) -> str:
    """Display name for a type, title-casing unknown types."""
    info = DEFAULT_CLAUSE_CATALOG.get(to_hyphenated(clause_type))
    if info is not None:
        return info.name
    words = to_underscored(clause_type).replace("_", " ")
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), words)


def clause_color(clause_type: str) -> str:
    """Highlight colour for a type, slate for unknown types."""
    info = DEFAULT_CLAUSE_CATALOG.get(to_hyphenated(clause_type))
    return info.color if info is not None else DEFAULT_CLAUSE_COLOR


def lookup_clause(catalog: ClauseCatalog, clause_type: str) -> ClauseInfo | None:
    """Find the catalog entry for a type given in either encoding."""
    return catalog.get(to_hyphenated(clause_type))
