"""Tests for splice_highlight and the highlight span attributes."""

from __future__ import annotations

from clauselens.config import OverlayConfig
from clauselens.models.annotation import Annotation
from clauselens.models.catalog import ClauseInfo
from clauselens.overlay.interval_resolver import resolve_interval
from clauselens.overlay.markup import parse_document, serialize_children
from clauselens.overlay.offset_index import build_offset_index
from clauselens.overlay.splicer import build_highlight_spec, splice_highlight
from tests.helpers.markup import ai, leaf

FORCE_MAJEURE = ClauseInfo("Force Majeure", "#6366F1")


def _splice(markup: str, annotation: Annotation, clause: ClauseInfo = FORCE_MAJEURE):
    body = parse_document(markup)
    spec = build_highlight_spec(annotation, clause, OverlayConfig())
    assert annotation.position is not None
    for intersection in resolve_interval(
        annotation.position.start, annotation.position.end, build_offset_index(body)
    ):
        splice_highlight(intersection, spec)
    return serialize_children(body)


class TestBuildHighlightSpec:
    def test_ai_attributes(self) -> None:
        spec = build_highlight_spec(
            ai("force-majeure", 5, 9, confidence=87.5), FORCE_MAJEURE, OverlayConfig()
        )

        assert spec.tag == "span"
        assert spec.get("class") == "clause-highlight"
        assert spec.get("data-clause-type") == "force-majeure"
        assert spec.get("data-annotation-id") == "force-majeure-5"
        assert spec.get("data-annotation-key") == "force-majeure-5-9"
        assert spec.get("data-confidence") == "87.5"
        assert spec.get("title") == "Force Majeure (88% confidence)"

    def test_style_uses_clause_colour(self) -> None:
        spec = build_highlight_spec(
            ai("force-majeure", 0, 3), FORCE_MAJEURE, OverlayConfig()
        )
        style = spec.get("style") or ""

        assert "background-color: #6366F125" in style
        assert "border-bottom: 2px solid #6366F1" in style
        assert "box-shadow: 0 1px 0 0 #6366F130" in style

    def test_user_annotation_attributes(self) -> None:
        note = Annotation.from_selection("text", 0, 4)
        clause = ClauseInfo("Review Comments", "#F59E0B")
        spec = build_highlight_spec(note, clause, OverlayConfig())

        assert spec.get("class") == "clause-highlight user-annotation"
        assert spec.get("data-confidence") is None
        assert spec.get("title") == "Review Comments"
        assert "dashed" in (spec.get("style") or "")


class TestSpliceHighlight:
    def test_contained_wraps_middle(self) -> None:
        out = _splice(f"<p>{leaf(0, 'Hello world')}</p>", ai("force-majeure", 6, 11))

        assert out.startswith('<p><span data-start="0" data-end="11">Hello <span')
        assert out.endswith(
            'title="Force Majeure (92% confidence)">world</span></span></p>'
        )

    def test_leaf_attributes_and_tag_preserved(self) -> None:
        clause = leaf(0, "Clause text", tag="p", id="c1", data_role="body")
        markup = f"<div>{clause}</div>"
        body = parse_document(markup)
        spec = build_highlight_spec(
            ai("force-majeure", 0, 6), FORCE_MAJEURE, OverlayConfig()
        )
        (intersection,) = resolve_interval(0, 6, build_offset_index(body))

        replacement = splice_highlight(intersection, spec)

        assert replacement.tag == "p"
        assert replacement.get("id") == "c1"
        assert replacement.get("data-role") == "body"
        assert replacement.get("data-start") == "0"
        assert replacement.text_content() == "Clause text"
        assert replacement.getparent() is body.find("div")

    def test_tail_text_survives(self) -> None:
        out = _splice(f"<p>{leaf(0, 'abc')} and more</p>", ai("force-majeure", 0, 3))

        assert out.endswith("</span></span> and more</p>")

    def test_left_overlap_has_no_post_text(self) -> None:
        body = parse_document(f"<p>{leaf(0, 'Hello ')}{leaf(6, 'world')}</p>")
        spec = build_highlight_spec(
            ai("force-majeure", 3, 8), FORCE_MAJEURE, OverlayConfig()
        )
        left, right = resolve_interval(3, 8, build_offset_index(body))

        first = splice_highlight(left, spec)
        second = splice_highlight(right, spec)

        assert first.text == "Hel"
        assert first[0].text == "lo "
        assert first[0].tail is None
        assert second.text is None
        assert second[0].text == "wo"
        assert second[0].tail == "rld"

    def test_inline_markup_inside_leaf_is_kept(self) -> None:
        markup = '<p><span data-start="0" data-end="9">one <b>two</b> x</span></p>'
        out = _splice(markup, ai("force-majeure", 2, 6))
        body = parse_document(out)

        assert body.text_content() == "one two x"
        assert len(body.xpath("//b")) == 1
        highlight = body.xpath("//span[@data-annotation-id]")
        assert "".join(h.text_content() for h in highlight) == "e tw"

    def test_line_break_inside_leaf_is_kept(self) -> None:
        markup = '<p><span data-start="0" data-end="10">Hello<br>World</span></p>'
        out = _splice(markup, ai("force-majeure", 0, 3))
        body = parse_document(out)

        (br,) = body.xpath("//br")
        assert br.getprevious().text_content() == "Hel"
        assert br.getprevious().tail == "lo"
        assert br.tail == "World"

    def test_empty_element_inside_range_joins_highlight(self) -> None:
        markup = '<p><span data-start="0" data-end="10">Hello<br>World</span></p>'
        out = _splice(markup, ai("force-majeure", 3, 7))
        body = parse_document(out)

        (highlight,) = body.xpath("//span[@data-annotation-id]")
        assert [child.tag for child in highlight] == ["br"]
        assert highlight.text_content() == "loWo"

    def test_adjacent_matching_siblings_stay_separate(self) -> None:
        markup = '<p><span data-start="0" data-end="4"><b>ab</b><b>cd</b></span></p>'
        out = _splice(markup, ai("force-majeure", 0, 1))
        body = parse_document(out)

        bold = body.xpath("//b")
        assert [b.text_content() for b in bold] == ["ab", "cd"]
        assert out.count("<b>") == 2

    def test_overlapping_second_splice_nests(self) -> None:
        markup = f"<p>{leaf(0, 'abcdefghij')}</p>"
        body = parse_document(markup)
        config = OverlayConfig()
        for annotation in (ai("force-majeure", 0, 6), ai("assignment", 3, 10)):
            spec = build_highlight_spec(annotation, FORCE_MAJEURE, config)
            pos = annotation.position
            assert pos is not None
            index = build_offset_index(body)
            for intersection in resolve_interval(pos.start, pos.end, index):
                splice_highlight(intersection, spec)

        assert body.text_content() == "abcdefghij"
        first = body.xpath('//span[@data-annotation-id="force-majeure-0"]')
        second = body.xpath('//span[@data-annotation-id="assignment-3"]')
        assert "".join(s.text_content() for s in first) == "abcdef"
        assert "".join(s.text_content() for s in second) == "defghij"
        # "def" is inside the first highlight, "ghij" outside it
        assert len(second) == 2
