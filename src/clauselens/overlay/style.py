"""Inline style for highlight spans, derived from the clause colour."""

from __future__ import annotations

import re

_HEX_COLOR = re.compile(r"^#[0-9a-fA-F]{6}$")


def _tint(color: str, alpha: str) -> str:
    """Append a two-digit alpha to ``#RRGGBB``; other colours pass through."""
    if _HEX_COLOR.match(color):
        return f"{color}{alpha}"
    return color


def highlight_style(
    color: str,
    *,
    user: bool = False,
    fill_alpha: str = "25",
    shadow_alpha: str = "30",
) -> str:
    """Build the inline style for a highlight span.

    User annotations get a dashed underline so they stay distinguishable
    from AI detections that share a colour.
    """
    line = "dashed" if user else "solid"
    return (
        f"background-color: {_tint(color, fill_alpha)}; "
        f"border-bottom: 2px {line} {color}; "
        f"box-shadow: 0 1px 0 0 {_tint(color, shadow_alpha)}"
    )
