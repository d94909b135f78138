"""
Auto-fit word wrapping for styled rules text.

The engine wraps a markup string at a starting font size and shrinks the
size step by step until the wrapped lines fit the text box and keep clear of
every collision shape. The floor size is always tried last; if even that
does not fit, the floor layout is returned flagged as not fitting.
"""

import math
import re
from typing import List, NamedTuple, Optional, Sequence, Tuple

from config import (
    DEBUG_TEXT_LAYOUT, DEFAULT_MIN_SHRINK_FACTOR, DEFAULT_SHRINK_STEP, DEFAULT_TEXT_FILL,
    LONG_TEXT_FONT_SIZE, MEDIUM_TEXT_FONT_SIZE, MEDIUM_TEXT_LENGTH, MIN_FONT_SIZE,
    PARAGRAPH_SPACING, SHORT_TEXT_FONT_SIZE, SHORT_TEXT_LENGTH,
)
from text_processing.markup import parse_markup

from .geometry import CollisionShape, rect_from_box
from .text_nodes import TextContainer, TextRun, TextStyle

ALIGNMENTS = ('left', 'center')

# Markers are already gone after parse_markup; these are the break characters
_BREAK_RE = re.compile(r'(\n|[ \t]+)')


class LayoutConstraint(NamedTuple):
    max_width: float
    max_height: float
    collision_shapes: Tuple[CollisionShape, ...] = ()
    start_font_size: int = LONG_TEXT_FONT_SIZE
    min_shrink_factor: float = DEFAULT_MIN_SHRINK_FACTOR
    shrink_step: int = DEFAULT_SHRINK_STEP
    align: str = 'left'
    fill: str = DEFAULT_TEXT_FILL


class LayoutResult(NamedTuple):
    tree: TextContainer
    font_size: int
    fits: bool
    line_count: int
    width: float
    height: float


class Piece(NamedTuple):
    text: str
    bold: bool
    italic: bool


# A word is a list of pieces with no whitespace between them,
# e.g. "Range:" made of a bold "Range" and a bold ":"
Word = List[Piece]
Paragraph = List[Word]


class _Line:
    def __init__(self):
        self.runs: List[list] = []   # [text, style, width]
        self.width = 0.0
        self.height = 0.0
        self.word_count = 0

    def append(self, text: str, style: TextStyle, width: float):
        if self.runs and self.runs[-1][1] == style:
            self.runs[-1][0] += text
            self.runs[-1][2] += width
        else:
            self.runs.append([text, style, width])
        self.width += width


class WrappedText(NamedTuple):
    lines: List[Tuple[float, float, float, float, TextContainer]]   # left, top, width, height, node
    width: float
    height: float
    overflow: bool


def choose_start_font_size(text: str, preferred: Optional[float] = None) -> int:
    """
    Pick the size auto-fit starts from.

    A positive preferred size always wins; too-large values are shrunk by the
    fit loop like any other. Otherwise shorter texts start larger.
    """
    if preferred and preferred > 0:
        return int(preferred)
    length = len(text or '')
    if length < SHORT_TEXT_LENGTH:
        return SHORT_TEXT_FONT_SIZE
    if length < MEDIUM_TEXT_LENGTH:
        return MEDIUM_TEXT_FONT_SIZE
    return LONG_TEXT_FONT_SIZE


def floor_font_size(constraint: LayoutConstraint) -> int:
    """Smallest size the engine may shrink to, never above the start size."""
    start = int(constraint.start_font_size)
    floor = max(MIN_FONT_SIZE, int(math.ceil(start * float(constraint.min_shrink_factor))))
    return min(floor, start)


def tokenize_markup(markup: str) -> List[Paragraph]:
    """
    Split markup into paragraphs of words. Markers act as zero-width style
    toggles, so a style change inside a word does not split it.
    """
    paragraphs: List[Paragraph] = [[]]
    word: Word = []

    def close_word():
        if word:
            paragraphs[-1].append(list(word))
            word.clear()

    for run in parse_markup(markup):
        for chunk in _BREAK_RE.split(run.text):
            if not chunk:
                continue
            if chunk == '\n':
                close_word()
                paragraphs.append([])
            elif chunk[0] in ' \t':
                close_word()
            elif word and word[-1].bold == run.bold and word[-1].italic == run.italic:
                word[-1] = Piece(word[-1].text + chunk, run.bold, run.italic)
            else:
                word.append(Piece(chunk, run.bold, run.italic))

    close_word()
    return paragraphs


def _style(piece: Piece, font_size: int, fill: str) -> TextStyle:
    return TextStyle(font_size, piece.bold, piece.italic, fill)


def wrap_paragraphs(paragraphs: Sequence[Paragraph], font_size: int, max_width: float,
                    measurer, align: str = 'left', fill: str = DEFAULT_TEXT_FILL) -> WrappedText:
    """
    Greedy word wrap at one font size.

    A word goes on the current line when the line plus a space plus the word
    stays within max_width; otherwise it starts a new line. A word wider than
    max_width on its own is still placed, and the result is flagged overflow.
    """
    plain = TextStyle(font_size, False, False, fill)
    plain_height = measurer.line_height(plain)
    paragraph_gap = PARAGRAPH_SPACING * font_size

    lines: List[_Line] = []
    line_tops: List[float] = []
    y = 0.0

    def finish(line: _Line):
        nonlocal y
        if not line.runs:
            line.height = plain_height
        else:
            line.height = max(measurer.line_height(style) for _, style, _ in line.runs)
        lines.append(line)
        line_tops.append(y)
        y += line.height

    for index, paragraph in enumerate(paragraphs):
        if index > 0:
            y += paragraph_gap

        line = _Line()
        last_style = plain
        for word in paragraph:
            measured = [(piece.text, _style(piece, font_size, fill)) for piece in word]
            widths = [measurer.measure(text, style)[0] for text, style in measured]
            word_width = sum(widths)

            if line.word_count:
                space_width = measurer.measure(' ', last_style)[0]
                if line.width + space_width + word_width > max_width:
                    finish(line)
                    line = _Line()
                else:
                    line.append(' ', last_style, space_width)

            for (text, style), width in zip(measured, widths):
                line.append(text, style, width)
            line.word_count += 1
            last_style = measured[-1][1]

        finish(line)

    placed = []
    overflow = False
    widest = 0.0
    for line, top in zip(lines, line_tops):
        overflow = overflow or line.width > max_width
        widest = max(widest, line.width)
        left = 0.0
        if align == 'center' and line.width < max_width:
            left = (max_width - line.width) / 2.0

        runs = []
        cursor = 0.0
        for text, style, width in line.runs:
            runs.append(TextRun(text, cursor, 0.0, width, measurer.line_height(style), style))
            cursor += width
        node = TextContainer(left, top, tuple(runs))
        placed.append((left, top, line.width, line.height, node))

    return WrappedText(placed, widest, y, overflow)


def _first_collision(wrapped: WrappedText, shapes: Sequence[CollisionShape]):
    for left, top, width, height, _ in wrapped.lines:
        if width <= 0:
            continue
        line_rect = rect_from_box(left, top, width, height)
        for shape in shapes:
            if shape.intersects_rect(line_rect):
                return shape
    return None


def _fits(wrapped: WrappedText, constraint: LayoutConstraint) -> Tuple[bool, str]:
    if wrapped.overflow:
        return False, 'a word is wider than the box'
    if wrapped.height > constraint.max_height:
        return False, f'{wrapped.height:.0f}px height > {constraint.max_height}px limit'
    shape = _first_collision(wrapped, constraint.collision_shapes)
    if shape is not None:
        return False, f'a line collides with {shape}'
    return True, ''


def layout_markup(markup: str, constraint: LayoutConstraint, measurer) -> LayoutResult:
    """
    Lay out markup inside the constraint's box, shrinking until it fits.

    Args:
        markup: Markup string from the annotator
        constraint: Box size, collision shapes and shrink settings
        measurer: Object with measure(text, style) -> (width, height) and
            line_height(style) -> height

    Returns:
        LayoutResult; fits is False only when the floor size still did not fit
    """
    if constraint.shrink_step < 1:
        raise ValueError(f"shrink_step must be at least 1, got {constraint.shrink_step}")
    if constraint.max_width <= 0 or constraint.max_height <= 0:
        raise ValueError(f"Text box must have a positive size, got "
                         f"{constraint.max_width}x{constraint.max_height}")
    if constraint.align not in ALIGNMENTS:
        raise ValueError(f"Unknown alignment: {constraint.align!r}")

    paragraphs = tokenize_markup(markup)
    floor = floor_font_size(constraint)
    font_size = max(int(constraint.start_font_size), floor)

    while True:
        wrapped = wrap_paragraphs(paragraphs, font_size, constraint.max_width, measurer,
                                  align=constraint.align, fill=constraint.fill)
        fits, reason = _fits(wrapped, constraint)
        if fits or font_size <= floor:
            break
        if DEBUG_TEXT_LAYOUT:
            print(f"   Font size {font_size}px: {reason}")
        font_size = max(floor, font_size - int(constraint.shrink_step))

    if fits:
        if DEBUG_TEXT_LAYOUT:
            print(f"📏 Optimal font size for rules text: {font_size}px ({len(wrapped.lines)} lines)")
    else:
        print(f"⚠️  Text does not fit even at minimum size {font_size}px: {reason}")

    tree = TextContainer(0.0, 0.0, tuple(node for *_, node in wrapped.lines))
    return LayoutResult(tree, font_size, fits, len(wrapped.lines), wrapped.width, wrapped.height)
