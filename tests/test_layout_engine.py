"""Tests for the auto-fit layout engine, using the fixed-width measurer."""

import pytest

from text_layout.geometry import Circle, rect_from_box
from text_layout.layout_engine import (
    LayoutConstraint, Piece, choose_start_font_size, floor_font_size,
    layout_markup, tokenize_markup, wrap_paragraphs,
)
from text_processing.markup import bold


def _line_rects(tree):
    for line in tree.children:
        width = sum(run.width for run in line.children)
        height = max(run.height for run in line.children)
        yield rect_from_box(line.x, line.y, width, height)


@pytest.mark.parametrize("length, expected", [(10, 52), (34, 52), (35, 44), (59, 44), (60, 38), (400, 38)])
def test_start_size_depends_on_text_length(length, expected):
    assert choose_start_font_size("x" * length) == expected


def test_preferred_start_size_wins():
    assert choose_start_font_size("short", preferred=30) == 30
    assert choose_start_font_size("short", preferred=0) == 52


def test_floor_never_exceeds_start():
    assert floor_font_size(LayoutConstraint(100, 100, start_font_size=20, min_shrink_factor=0.5)) == 10
    assert floor_font_size(LayoutConstraint(100, 100, start_font_size=20, min_shrink_factor=0.1)) == 8
    assert floor_font_size(LayoutConstraint(100, 100, start_font_size=6, min_shrink_factor=0.3)) == 6


def test_markers_do_not_split_words():
    assert tokenize_markup(bold("Range") + bold(":")) == [[[Piece("Range:", True, False)]]]
    assert tokenize_markup("Ran" + bold("ge")) == [[[Piece("Ran", False, False), Piece("ge", True, False)]]]


def test_greedy_wrap(measurer):
    paragraphs = tokenize_markup("aaaa bbbb cccc dddd")

    wide = wrap_paragraphs(paragraphs, 10, 100, measurer)
    assert len(wide.lines) == 1
    assert wide.width == pytest.approx(95)

    narrow = wrap_paragraphs(paragraphs, 10, 90, measurer)
    assert len(narrow.lines) == 2
    assert not narrow.overflow


def test_runs_split_on_style_changes(measurer):
    wrapped = wrap_paragraphs(tokenize_markup("plain " + bold("bold") + " plain"), 10, 1000, measurer)
    node = wrapped.lines[0][4]
    assert [run.text for run in node.children] == ["plain ", "bold ", "plain"]
    assert [run.style.bold for run in node.children] == [False, True, False]
    assert node.children[1].x == pytest.approx(node.children[0].width)


def test_explicit_newline_starts_a_paragraph(measurer):
    result = layout_markup("a\nb", LayoutConstraint(100, 100, start_font_size=10), measurer)
    first, second = result.tree.children
    assert result.line_count == 2
    assert second.y > first.y + first.children[0].height


def test_shrinks_until_text_fits(measurer):
    constraint = LayoutConstraint(200, 60, start_font_size=20, min_shrink_factor=0.3)
    result = layout_markup(" ".join(["word"] * 40), constraint, measurer)
    assert result.fits
    assert result.height <= 60
    assert 8 <= result.font_size <= 10


def test_returns_floor_layout_when_nothing_fits(measurer):
    constraint = LayoutConstraint(50, 100, start_font_size=20, min_shrink_factor=0.5)
    result = layout_markup("Supercalifragilistic", constraint, measurer)
    assert result.font_size == 10
    assert not result.fits
    assert result.line_count == 1


def test_lines_keep_clear_of_collision_shapes(measurer):
    badge = Circle(190, 10, 15)
    constraint = LayoutConstraint(200, 100, collision_shapes=(badge,), start_font_size=10)
    result = layout_markup(" ".join(["aaaa"] * 8), constraint, measurer)
    assert result.fits
    assert result.font_size < 10
    assert not any(badge.intersects_rect(rect) for rect in _line_rects(result.tree))


def test_longer_text_never_gets_a_larger_size(measurer):
    constraint = LayoutConstraint(200, 60, start_font_size=20, min_shrink_factor=0.3)
    sizes = [
        layout_markup(" ".join(["word"] * count), constraint, measurer).font_size
        for count in (5, 10, 20, 40, 80)
    ]
    assert sizes == sorted(sizes, reverse=True)


def test_center_alignment(measurer):
    constraint = LayoutConstraint(100, 100, start_font_size=10, align='center')
    result = layout_markup("ab", constraint, measurer)
    assert result.tree.children[0].x == pytest.approx(45)


@pytest.mark.parametrize("overrides", [
    {'shrink_step': 0},
    {'shrink_step': 0.5},
    {'max_width': 0},
    {'align': 'justify'},
])
def test_invalid_constraints_raise(measurer, overrides):
    constraint = LayoutConstraint(100, 100, start_font_size=10)._replace(**overrides)
    with pytest.raises(ValueError):
        layout_markup("text", constraint, measurer)


def test_empty_text_lays_out_as_one_blank_line(measurer):
    result = layout_markup("", LayoutConstraint(100, 100, start_font_size=10), measurer)
    assert result.fits
    assert result.line_count == 1
    assert result.tree.children[0].children == ()
