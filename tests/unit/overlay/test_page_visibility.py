"""Tests for page counting, page visibility and document parsing."""

from __future__ import annotations

import pytest
from selectolax.lexbor import LexborHTMLParser

from clauselens.errors import MalformedDocumentError
from clauselens.overlay.markup import (
    apply_page_visibility,
    count_pages,
    parse_document,
    serialize_children,
)
from tests.helpers.markup import page

THREE_PAGES = page("<p>one</p>") + page("<p>two</p>") + page("<p>three</p>")


def _styles(markup: str, selector: str = ".page") -> list[str | None]:
    return [n.attributes.get("style") for n in LexborHTMLParser(markup).css(selector)]


class TestCountPages:
    def test_counts_containers(self) -> None:
        assert count_pages(THREE_PAGES) == 3

    def test_no_containers(self) -> None:
        assert count_pages("<p>single flow</p>") == 0

    def test_empty_markup(self) -> None:
        assert count_pages("") == 0

    def test_custom_selector(self) -> None:
        markup = '<section data-page="1">a</section><section data-page="2">b</section>'
        assert count_pages(markup, "section[data-page]") == 2


class TestApplyPageVisibility:
    def test_only_selected_page_visible(self) -> None:
        markup, shown, count = apply_page_visibility(THREE_PAGES, 3)

        assert (shown, count) == (3, 3)
        assert _styles(markup) == ["display: none", "display: none", "display: block"]

    def test_existing_style_merged(self) -> None:
        source = page("a", style="margin: 0; display: flex") + page("b", style="color: red")

        markup, _, _ = apply_page_visibility(source, 2)

        assert _styles(markup) == [
            "margin: 0; display: none",
            "color: red; display: block",
        ]

    @pytest.mark.parametrize(("requested", "expected"), [(0, 1), (-4, 1), (9, 3)])
    def test_out_of_range_page_clamped(self, requested: int, expected: int) -> None:
        markup, shown, _ = apply_page_visibility(THREE_PAGES, requested)

        assert shown == expected
        assert _styles(markup).count("display: block") == 1

    def test_no_pages_returns_markup_unchanged(self) -> None:
        source = "<p>No pagination here</p>"

        assert apply_page_visibility(source, 2) == (source, 2, 0)

    def test_page_content_left_in_place(self) -> None:
        markup, _, _ = apply_page_visibility(THREE_PAGES, 1)

        text = LexborHTMLParser(markup).body.text()
        assert text == "onetwothree"


class TestParseDocument:
    @pytest.mark.parametrize("markup", ["", "  \n\t "])
    def test_empty_markup_rejected(self, markup: str) -> None:
        with pytest.raises(MalformedDocumentError):
            parse_document(markup)

    def test_fragment_round_trips(self) -> None:
        source = '<p>Intro <span data-start="0" data-end="3">abc</span> tail</p>'

        assert serialize_children(parse_document(source)) == source

    def test_leading_body_text_is_escaped(self) -> None:
        body = parse_document("<p>x</p>")
        body.text = "a < b"

        assert serialize_children(body) == "a &lt; b<p>x</p>"

    def test_each_parse_is_independent(self) -> None:
        source = "<p>abc</p>"
        first = parse_document(source)
        first.find("p").text = "changed"

        assert serialize_children(parse_document(source)) == source
