"""Markup and annotation builders shared by the test suites."""

from __future__ import annotations

from selectolax.lexbor import LexborHTMLParser

from clauselens.models.annotation import Annotation, AnnotationSource, Position

DELAWARE = "This agreement is governed by the laws of Delaware."


def leaf(start: int, text: str, tag: str = "span", **attrs: str) -> str:
    """Build one offset-annotated leaf element."""
    extra = "".join(f' {k.replace("_", "-")}="{v}"' for k, v in attrs.items())
    return (
        f'<{tag} data-start="{start}" data-end="{start + len(text)}"{extra}>'
        f"{text}</{tag}>"
    )


def segmented(texts: list[str], start: int = 0) -> str:
    """Build consecutive leaves covering *texts* back to back."""
    parts = []
    pos = start
    for text in texts:
        parts.append(leaf(pos, text))
        pos += len(text)
    return "".join(parts)


def page(content: str, **attrs: str) -> str:
    extra = "".join(f' {k}="{v}"' for k, v in attrs.items())
    return f'<div class="page"{extra}>{content}</div>'


def ai(
    clause_type: str,
    start: int | None,
    end: int | None = None,
    *,
    text: str = "",
    confidence: float = 92,
) -> Annotation:
    """Build an AI-detected annotation."""
    position = Position(start, end) if start is not None and end is not None else None
    return Annotation(
        type=clause_type,
        selected_text=text,
        position=position,
        confidence=confidence,
        reason="detected",
        source=AnnotationSource.AI,
    )


def highlight_spans(markup: str) -> list[dict[str, str | None]]:
    """Attributes (plus ``_text``) of every highlight span in *markup*."""
    tree = LexborHTMLParser(markup)
    spans = []
    for node in tree.css("span.clause-highlight"):
        attrs = dict(node.attributes)
        attrs["_text"] = node.text() or ""
        spans.append(attrs)
    return spans


def spans_for(markup: str, identifier: str) -> list[dict[str, str | None]]:
    return [s for s in highlight_spans(markup) if s["data-annotation-id"] == identifier]
