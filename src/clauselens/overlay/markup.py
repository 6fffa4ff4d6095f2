"""Parsing and serialization of structured document markup.

The splice pass works on an lxml tree (element substitution with tail
handling). Page containers are located with selectolax, which accepts
the configurable CSS selector directly.
"""

from __future__ import annotations

import html as html_module
import logging

from lxml import etree
from lxml import html as lxml_html
from lxml.html import HtmlElement
from selectolax.lexbor import LexborHTMLParser

from clauselens.errors import MalformedDocumentError

logger = logging.getLogger(__name__)


def parse_document(markup: str) -> HtmlElement:
    """Parse markup into a fresh tree and return its ``<body>``.

    Each call yields an independent tree, so splices made during one
    pass never leak into the next.

    Raises:
        MalformedDocumentError: If the markup is empty or cannot be
            parsed.
    """
    if not markup or not markup.strip():
        raise MalformedDocumentError("Document markup is empty")
    try:
        root = lxml_html.document_fromstring(markup)
    except (etree.ParserError, ValueError) as exc:
        raise MalformedDocumentError(f"Cannot parse document markup: {exc}") from exc

    body = root.find("body")
    if body is None:
        raise MalformedDocumentError("Document markup has no body content")
    return body


def serialize_children(element: HtmlElement) -> str:
    """Serialize the content of *element* (its inner HTML)."""
    parts: list[str] = []
    if element.text:
        parts.append(html_module.escape(element.text, quote=False))
    # tostring() includes each child's tail
    parts.extend(lxml_html.tostring(child, encoding="unicode") for child in element)
    return "".join(parts)


def count_pages(markup: str, selector: str = ".page") -> int:
    """Count page-container elements in *markup*."""
    if not markup:
        return 0
    return len(LexborHTMLParser(markup).css(selector))


def _with_display(style: str | None, display: str) -> str:
    """Replace any ``display`` declaration in an inline style."""
    declarations = [
        decl.strip()
        for decl in (style or "").split(";")
        if decl.strip() and decl.split(":", 1)[0].strip().lower() != "display"
    ]
    declarations.append(f"display: {display}")
    return "; ".join(declarations)


def apply_page_visibility(
    markup: str,
    page: int,
    selector: str = ".page",
) -> tuple[str, int, int]:
    """Show only the selected page container.

    Every other page is marked ``display: none``; content is left in
    place so that changing the page never requires re-highlighting.

    Args:
        markup: Serialized document content.
        page: 1-based page number. Out-of-range values are clamped.
        selector: CSS selector matching page containers.

    Returns:
        ``(markup, page, page_count)`` where *page* is the page actually
        shown. Markup without page containers is returned unchanged with
        ``page_count == 0``.
    """
    tree = LexborHTMLParser(markup)
    pages = tree.css(selector)
    if not pages:
        return markup, page, 0

    current = min(max(page, 1), len(pages))
    if current != page:
        logger.debug(
            "Page %d out of range 1..%d; showing %d", page, len(pages), current
        )

    for index, node in enumerate(pages, start=1):
        display = "block" if index == current else "none"
        node.attrs["style"] = _with_display(node.attributes.get("style"), display)

    body = tree.body
    result = body.inner_html if body is not None else tree.html
    return result or "", current, len(pages)
