"""
Highlight resolution for laid-out rules text.

Each highlight rule that finds one of its phrases in the text yields one
full-width background band covering every line its matched phrases touch,
and the runs inside the match are recolored.
"""

from typing import Dict, List, NamedTuple, Sequence, Tuple

from config import DEBUG_TEXT_LAYOUT, HIGHLIGHT_PADDING_BOTTOM, HIGHLIGHT_PADDING_TOP, HIGHLIGHT_TEXT_FILL

from .phrase_index import CleanCharIndex, find_phrase
from .text_nodes import NodePath, TextNode, TextStyle, iter_runs, replace_run_styles


class HighlightSpan(NamedTuple):
    color: Tuple[int, int, int]
    x: float
    top: float
    width: float
    height: float
    phrases: Tuple[str, ...]

    def to_dict(self):
        return {
            'color': '#%02x%02x%02x' % tuple(self.color),
            'x': round(self.x, 2),
            'y': round(self.top, 2),
            'width': round(self.width, 2),
            'height': round(self.height, 2),
            'phrases': list(self.phrases),
        }


def apply_highlights(tree: TextNode, index: CleanCharIndex, highlight_rules: Sequence,
                     body_width: float, body_x: float = 0.0,
                     text_fill: str = HIGHLIGHT_TEXT_FILL) -> Tuple[TextNode, List[HighlightSpan]]:
    """
    Resolve highlight rules against a laid-out tree.

    Rules are independent: every rule is checked against the whole text and
    every phrase of a rule that is found widens that rule's band. A rule
    with no phrase present contributes nothing. When two rules cover the same
    characters both bands are returned, in rule order.

    Args:
        tree: Laid-out node tree
        index: Index built from the same tree
        highlight_rules: Sequence of HighlightRule
        body_width: Width of the band, normally the full card body
        body_x: Left edge of the band in the same coordinates as the tree
        text_fill: Color assigned to runs inside a match

    Returns:
        (recolored tree, highlight spans)
    """
    styles: Dict[NodePath, TextStyle] = {}
    spans: List[HighlightSpan] = []
    runs = {path: run for path, run, _, _ in iter_runs(tree)}

    for highlight_rule in highlight_rules:
        top = float('inf')
        bottom = float('-inf')
        matched = []

        for phrase in highlight_rule.phrases:
            location = find_phrase(index, phrase)
            if location is None:
                continue
            matched.append(phrase)
            start, end = location
            for position in range(start, end):
                top = min(top, index.y_positions[position])
                bottom = max(bottom, index.y_positions[position] + index.heights[position])
                path = index.node_paths[position]
                if path not in styles:
                    styles[path] = runs[path].style._replace(fill=text_fill)

        if matched:
            spans.append(HighlightSpan(
                color=tuple(highlight_rule.color),
                x=body_x,
                top=top - HIGHLIGHT_PADDING_TOP,
                width=body_width,
                height=(bottom - top) + HIGHLIGHT_PADDING_TOP + HIGHLIGHT_PADDING_BOTTOM,
                phrases=tuple(matched),
            ))
            if DEBUG_TEXT_LAYOUT:
                print(f"🖍️  Highlight {highlight_rule.color}: {len(matched)} phrase(s), "
                      f"y {top:.0f}-{bottom:.0f}")

    return replace_run_styles(tree, styles), spans
