"""Tests for highlight band resolution."""

import pytest

from text_layout.highlight_renderer import apply_highlights
from text_layout.phrase_index import build_index
from text_layout.text_nodes import TextContainer, TextRun, TextStyle, iter_runs
from text_processing.keyword_rules import HighlightRule

WHITE = TextStyle(10, fill='#ffffff')
YELLOW = (0xE1, 0xB3, 0x27)
BLUE = (0xA1, 0xDF, 0xFF)


@pytest.fixture
def tree():
    return TextContainer(0.0, 0.0, (
        TextContainer(0.0, 0.0, (
            TextRun("Gain", 0.0, 0.0, 20.0, 12.0, WHITE),
            TextRun(" 1 VP.", 20.0, 0.0, 30.0, 12.0, WHITE),
        )),
        TextContainer(0.0, 15.0, (
            TextRun("Draw.", 0.0, 0.0, 25.0, 12.0, WHITE),
        )),
    ))


def _fills(tree):
    return {run.text: run.style.fill for _, run, _, _ in iter_runs(tree)}


def test_single_line_band_is_padded(tree):
    rules = [HighlightRule(YELLOW, ("gain 1 vp.",))]
    _, spans = apply_highlights(tree, build_index(tree), rules, body_width=750, body_x=-29)
    assert len(spans) == 1
    span = spans[0]
    assert span.color == YELLOW
    assert span.x == -29
    assert span.width == 750
    assert span.top == pytest.approx(-10)
    assert span.height == pytest.approx(12 + 10 + 3)
    assert span.to_dict()['color'] == '#e1b327'


def test_band_covers_every_line_of_the_phrase(tree):
    rules = [HighlightRule(BLUE, ("VP. Draw",))]
    _, spans = apply_highlights(tree, build_index(tree), rules, body_width=750)
    assert spans[0].top == pytest.approx(-10)
    assert spans[0].height == pytest.approx(27 + 13)


def test_phrases_of_one_rule_share_a_band(tree):
    rules = [HighlightRule(YELLOW, ("Gain", "Draw.", "not present"))]
    _, spans = apply_highlights(tree, build_index(tree), rules, body_width=750)
    assert len(spans) == 1
    assert spans[0].phrases == ("Gain", "Draw.")
    assert spans[0].height == pytest.approx(27 + 13)


def test_only_matched_runs_are_recolored(tree):
    rules = [HighlightRule(YELLOW, ("1 VP",))]
    recolored, _ = apply_highlights(tree, build_index(tree), rules, body_width=750)
    assert _fills(recolored) == {"Gain": '#ffffff', " 1 VP.": '#000000', "Draw.": '#ffffff'}
    assert _fills(tree) == {"Gain": '#ffffff', " 1 VP.": '#ffffff', "Draw.": '#ffffff'}


def test_rule_without_match_adds_nothing(tree):
    rules = [HighlightRule(YELLOW, ("Gain a Weakness.",))]
    recolored, spans = apply_highlights(tree, build_index(tree), rules, body_width=750)
    assert spans == []
    assert recolored == tree


def test_overlapping_rules_both_fire_in_order(tree):
    rules = [HighlightRule(YELLOW, ("Gain",)), HighlightRule(BLUE, ("Gain 1",))]
    _, spans = apply_highlights(tree, build_index(tree), rules, body_width=750)
    assert [span.color for span in spans] == [YELLOW, BLUE]
