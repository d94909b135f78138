"""
Layout modules for card rules text.

This package wraps styled markup into positioned text nodes that fit the
rules text box, indexes the laid-out characters, and resolves highlight
bands over them.
"""

from .geometry import Circle, Rect, shape_from_dict
from .highlight_renderer import HighlightSpan, apply_highlights
from .layout_engine import (
    LayoutConstraint,
    LayoutResult,
    choose_start_font_size,
    layout_markup,
)
from .phrase_index import CleanCharIndex, build_index, find_phrase
from .text_nodes import TextContainer, TextRun, TextStyle, iter_runs, node_to_dict

__all__ = [
    # Geometry
    'Circle',
    'Rect',
    'shape_from_dict',

    # Nodes
    'TextStyle',
    'TextRun',
    'TextContainer',
    'iter_runs',
    'node_to_dict',

    # Auto-fit layout
    'LayoutConstraint',
    'LayoutResult',
    'choose_start_font_size',
    'layout_markup',

    # Phrase index and highlights
    'CleanCharIndex',
    'build_index',
    'find_phrase',
    'HighlightSpan',
    'apply_highlights',
]
