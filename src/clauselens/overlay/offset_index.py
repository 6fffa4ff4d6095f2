"""Offset index: text-bearing leaf elements and their character ranges.

The document converter marks each text-bearing element with absolute
``data-start``/``data-end`` offsets. This module collects those
elements, in document order, as the address space annotations resolve
against.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from lxml.html import HtmlElement

logger = logging.getLogger(__name__)

START_ATTR = "data-start"
END_ATTR = "data-end"


@dataclass(frozen=True)
class LeafInfo:
    """A text-bearing element and its global ``[start, end)`` range.

    Attributes:
        element: The element in the current tree.
        start: Absolute offset of the element's first character.
        end: Absolute offset one past its last character.
        text: The element's text content at index time.
    """

    element: HtmlElement
    start: int
    end: int
    text: str


def _parse_offsets(element: HtmlElement) -> tuple[int, int] | None:
    """Read ``(start, end)`` from an element, or None if unusable."""
    try:
        start = int(element.get(START_ATTR, ""))
        end = int(element.get(END_ATTR, ""))
    except ValueError:
        return None
    if start < 0 or end < start:
        return None
    return start, end


def build_offset_index(root: HtmlElement) -> list[LeafInfo]:
    """Collect addressable leaf elements under *root* in document order.

    An element is addressable when both offset attributes parse as
    non-negative integers with ``end >= start``. Only addressable
    elements without addressable descendants are leaves. Elements with
    missing or malformed offsets are excluded, never reported as errors.
    """
    addressable: dict[HtmlElement, tuple[int, int]] = {}
    for element in root.xpath(f".//*[@{START_ATTR} and @{END_ATTR}]"):
        offsets = _parse_offsets(element)
        if offsets is None:
            logger.debug(
                "Excluding <%s> with malformed offsets %r..%r",
                element.tag,
                element.get(START_ATTR),
                element.get(END_ATTR),
            )
            continue
        addressable[element] = offsets

    index: list[LeafInfo] = []
    for element, (start, end) in addressable.items():
        if any(desc in addressable for desc in element.iterdescendants()):
            continue
        index.append(LeafInfo(element, start, end, str(element.text_content())))
    return index
