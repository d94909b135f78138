"""
Rules text pipeline for card rendering.

annotate -> auto-fit layout -> phrase index -> highlights, run in strict
sequence for one card. Every call rebuilds the markup, the node tree and the
index from the current text; nothing is cached between renders except the
read-only rule tables and the font cache.
"""

import time
from functools import lru_cache
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

from card_renderer import card_renderer
from config import (
    DEBUG_TEXT_LAYOUT, DEFAULT_MIN_SHRINK_FACTOR, DEFAULT_SHRINK_STEP, DEFAULT_TEXT_FILL,
    OVERSIZED_CARD_WIDTH, OVERSIZED_TEXT_BOX, RULESET_PATH, STANDARD_CARD_WIDTH,
    STANDARD_TEXT_BOX, VP_BADGE_COLLISION,
)
from rules_text_processor import annotate_rules_text
from text_layout.geometry import shape_from_dict
from text_layout.highlight_renderer import HighlightSpan, apply_highlights
from text_layout.layout_engine import LayoutConstraint, choose_start_font_size, layout_markup
from text_layout.phrase_index import build_index
from text_layout.text_nodes import TextContainer, TextStyle
from text_processing.keyword_rules import DEFAULT_RULESET, Ruleset, load_ruleset


class RenderedTextBlock(NamedTuple):
    tree: TextContainer
    highlights: List[HighlightSpan]
    markup: str
    font_size: int
    fits: bool


@lru_cache(maxsize=1)
def get_default_ruleset() -> Ruleset:
    """The configured ruleset file if there is one, else the built-in tables."""
    if RULESET_PATH:
        return load_ruleset(RULESET_PATH)
    return DEFAULT_RULESET


def text_box_for_card(oversized: bool = False) -> Tuple[Dict[str, Any], List[Dict[str, Any]], int]:
    """
    Rules text box, default collision shapes and card width for a card size.
    Oversized cards have no VP badge in the text area.
    """
    if oversized:
        return dict(OVERSIZED_TEXT_BOX), [], OVERSIZED_CARD_WIDTH
    return dict(STANDARD_TEXT_BOX), [dict(VP_BADGE_COLLISION)], STANDARD_CARD_WIDTH


def annotate_and_layout(raw_text: str,
                        style: Optional[TextStyle] = None,
                        box: Optional[Dict[str, Any]] = None,
                        collision_shapes: Optional[Iterable[Any]] = None,
                        *,
                        ruleset: Optional[Ruleset] = None,
                        bold_phrases: Optional[Iterable[str]] = None,
                        preferred_font_size: Optional[int] = None,
                        renderer=None,
                        body_width: Optional[float] = None,
                        body_x: Optional[float] = None,
                        min_shrink_factor: float = DEFAULT_MIN_SHRINK_FACTOR,
                        shrink_step: int = DEFAULT_SHRINK_STEP,
                        align: str = 'left',
                        oversized: bool = False) -> RenderedTextBlock:
    """
    Produce a ready-to-draw rules text block for one card.

    Args:
        raw_text: Rules text as typed by the card author
        style: Base text style; its fill is used for plain runs and a
            positive font_size acts as the preferred starting size
        box: Rules text box {'x', 'y', 'width', 'height'} on the card
        collision_shapes: Shapes (or their dict form) in text box coordinates;
            None means the card size's default (the VP badge on standard
            cards), an empty list means none
        ruleset: Rule tables, defaults to the configured ruleset
        bold_phrases: Extra phrases to bold on this card
        preferred_font_size: Starting size; wins over style.font_size
        renderer: Measuring backend, defaults to the shared Pillow renderer
        body_width: Width of highlight bands, defaults to the card width
        body_x: Left edge of highlight bands relative to the box,
            defaults to the card's left edge
        min_shrink_factor: Floor as a fraction of the starting size
        shrink_step: Font size decrement per attempt
        align: 'left' or 'center'
        oversized: Use the oversized card defaults for the box, collision
            shapes and highlight band width

    Returns:
        RenderedTextBlock with the recolored tree, highlight spans, markup,
        chosen font size and fit flag
    """
    render_start = time.time()
    ruleset = ruleset or get_default_ruleset()
    renderer = renderer or card_renderer
    default_box, default_shapes, card_width = text_box_for_card(oversized)
    box = box or default_box
    if collision_shapes is None:
        collision_shapes = default_shapes

    markup = annotate_rules_text(raw_text, ruleset=ruleset, bold_phrases=bold_phrases)

    fill = style.fill if style else DEFAULT_TEXT_FILL
    if not preferred_font_size and style and style.font_size > 0:
        preferred_font_size = style.font_size

    constraint = LayoutConstraint(
        max_width=float(box['width']),
        max_height=float(box['height']),
        collision_shapes=tuple(shape_from_dict(shape) for shape in collision_shapes),
        start_font_size=choose_start_font_size(raw_text or '', preferred_font_size),
        min_shrink_factor=min_shrink_factor,
        shrink_step=shrink_step,
        align=align,
        fill=fill,
    )
    layout = layout_markup(markup, constraint, renderer)

    index = build_index(layout.tree)
    tree, highlights = apply_highlights(
        layout.tree,
        index,
        ruleset.highlight_rules,
        body_width=card_width if body_width is None else body_width,
        body_x=-float(box.get('x', 0)) if body_x is None else body_x,
    )

    if DEBUG_TEXT_LAYOUT:
        print(f"🎨 Rules text rendered at {layout.font_size}px in {time.time() - render_start:.3f}s "
              f"({layout.line_count} lines, {len(highlights)} highlight(s), fits={layout.fits})")

    return RenderedTextBlock(tree, highlights, markup, layout.font_size, layout.fits)
