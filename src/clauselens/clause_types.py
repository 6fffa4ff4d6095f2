"""Conversions between the two textual encodings of a clause type.

The analysis provider reports types underscored (``governing_law``);
the clause catalog and the active filter use the hyphenated form
(``governing-law``). Convert at every boundary where a type crosses.
"""

from __future__ import annotations


def to_hyphenated(clause_type: str) -> str:
    """Return the catalog encoding: every ``_`` becomes ``-``."""
    return clause_type.replace("_", "-")


def to_underscored(clause_type: str) -> str:
    """Return the provider encoding: every ``-`` becomes ``_``."""
    return clause_type.replace("-", "_")
