"""Tests for the end-to-end rules text pipeline."""

from card_text_pipeline import annotate_and_layout, text_box_for_card
from config import STANDARD_CARD_WIDTH, STANDARD_TEXT_BOX
from text_layout.text_nodes import TextStyle, iter_runs
from text_processing.markup import to_tagged

GAIN_VP = "When you buy or gain this card, gain 1 VP."
YELLOW = (0xE1, 0xB3, 0x27)


def test_highlight_phrase_gets_a_card_wide_band(measurer):
    block = annotate_and_layout(GAIN_VP, renderer=measurer)
    assert to_tagged(block.markup) == f"[b]{GAIN_VP}[/b]"
    assert len(block.highlights) == 1
    span = block.highlights[0]
    assert span.color == YELLOW
    assert span.x == -STANDARD_TEXT_BOX['x']
    assert span.width == STANDARD_CARD_WIDTH


def test_text_without_highlight_phrases_has_no_bands(measurer):
    block = annotate_and_layout("Once per turn: gain a Power counter.", renderer=measurer)
    assert block.highlights == []
    assert block.fits


def test_fit_failure_is_reported_not_raised(measurer):
    block = annotate_and_layout("x" * 200, renderer=measurer, collision_shapes=[])
    assert not block.fits
    assert block.font_size > 0


def test_rendering_twice_gives_the_same_block(measurer):
    text = "Range: 3\n(Discard a non-Weakness card) " + GAIN_VP
    assert annotate_and_layout(text, renderer=measurer) == annotate_and_layout(text, renderer=measurer)


def test_highlighted_runs_are_dark_on_light_text(measurer):
    block = annotate_and_layout("Gain 1 VP. " + GAIN_VP, style=TextStyle(0, fill='#ffffff'),
                                renderer=measurer, collision_shapes=[])
    runs = [run for _, run, _, _ in iter_runs(block.tree)]
    assert any(run.style.fill == '#ffffff' for run in runs if not run.style.bold)
    assert all(run.style.fill == '#000000' for run in runs if run.style.bold)


def test_style_font_size_is_the_starting_size(measurer):
    block = annotate_and_layout("Draw.", style=TextStyle(20), renderer=measurer, collision_shapes=[])
    assert block.font_size == 20


def test_custom_box_and_collision_shapes(measurer):
    box = {'x': 0, 'y': 0, 'width': 200, 'height': 100}
    badge = {'shape': 'rect', 'x': 0, 'y': 0, 'width': 200, 'height': 30}
    block = annotate_and_layout("aaaa bbbb", box=box, collision_shapes=[badge],
                                preferred_font_size=10, renderer=measurer)
    assert not block.fits


def test_oversized_cards_have_no_badge():
    box, collisions, width = text_box_for_card(oversized=True)
    assert collisions == []
    assert width == 900
    assert box['width'] > STANDARD_TEXT_BOX['width']


def test_oversized_card_bands_span_the_wider_card(measurer):
    block = annotate_and_layout(GAIN_VP, renderer=measurer, oversized=True)
    box, _, width = text_box_for_card(oversized=True)
    assert block.highlights[0].width == width == 900
    assert block.highlights[0].x == -box['x']
