"""Tests for the claimed-span structure used while annotating."""

import re

from text_processing.markup import bold, italic, to_tagged
from text_processing.span_claims import BOLD, FREE, VERBATIM, ClaimedText, Segment


def test_claimed_text_is_not_matched_again():
    text = ClaimedText.from_markup("Super Power and Power")
    assert text.protect(re.compile(r"Super Power")) == 1
    assert text.bold(re.compile(r"Power")) == 1
    assert to_tagged(text.render()) == "Super Power and [b]Power[/b]"


def test_bold_inside_italic_nests_without_crossing():
    text = ClaimedText.from_markup("(Discard a card)")
    text.italicize(re.compile(r"\(([^)]+)\)"))
    text.bold(re.compile(r"Discard"))
    assert to_tagged(text.render()) == "[i]([b]Discard[/b] a card)[/i]"


def test_italic_is_not_applied_twice():
    text = ClaimedText.from_markup("(a (b) c)")
    text.italicize(re.compile(r"\(([^)]+)\)"))
    text.italicize(re.compile(r"\(([^)]+)\)"))
    assert to_tagged(text.render()).count("[i]") == 1


def test_bold_group_keeps_rest_of_match_free():
    text = ClaimedText.from_markup("Range: 3")
    text.bold_group(re.compile(r"Range:\s*(\d+)"), 1)
    assert [(s.text, s.kind) for s in text.segments] == [("Range: ", FREE), ("3", BOLD)]


def test_unwrap_keeps_only_the_group():
    text = ClaimedText.from_markup("{Draw 2} now")
    text.bold_span(re.compile(r"\{([^{}]+)\}"), 1)
    assert to_tagged(text.render()) == "[b]Draw 2[/b] now"


def test_existing_bold_markup_is_claimed():
    text = ClaimedText.from_markup("gain " + bold("Power") + " " + italic("now"))
    kinds = [s.kind for s in text.segments]
    assert VERBATIM in kinds
    assert text.bold(re.compile(r"Power")) == 0
    assert text.segments[-2].italic


def test_empty_matches_are_ignored():
    text = ClaimedText.from_markup("abc")
    assert text.bold(re.compile(r"x*")) == 0
    assert text.render() == "abc"


def test_italic_wraps_around_claimed_cost():
    text = ClaimedText.from_markup("(Block (3) when attacked)")
    text.bold(re.compile(r"Block \(\d+\)"))
    assert text.italicize(re.compile(r"\(([^)]+)\)")) == 1
    assert to_tagged(text.render()) == "[i]([b]Block (3)[/b] when attacked)[/i]"


def test_bold_span_absorbs_inner_claims_and_keeps_italics():
    text = ClaimedText.from_markup("{gain 1 (one) card} now")
    text.italicize(re.compile(r"\(([^)]+)\)"))
    text.bold(re.compile(r"gain"))
    assert text.bold_span(re.compile(r"\{([^{}]+)\}"), 1) == 1
    assert to_tagged(text.render()) == "[b]gain 1 [i](one)[/i] card[/b] now"
    assert text.segments[-1] == Segment(" now", FREE, False)


def test_wrap_skips_unpaired_italic_marker():
    text = ClaimedText.from_markup("{a (b} c)")
    text.italicize(re.compile(r"\(([^)]+)\)"))
    assert text.bold_span(re.compile(r"\{([^{}]+)\}"), 1) == 0
    assert to_tagged(text.render()) == "{a [i](b} c)[/i]"


def test_wrap_skips_delimiters_inside_claimed_text():
    text = ClaimedText.from_markup("x {y} z")
    text.protect(re.compile(r"\{y"))
    assert text.bold_span(re.compile(r"\{([^{}]+)\}"), 1) == 0
    assert text.render() == "x {y} z"
