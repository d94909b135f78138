"""
Whitespace-free character index over laid-out text.

Wrapping moves words onto new lines and collapses the spaces between them,
so a phrase is located by comparing whitespace-stripped, uppercased text and
mapping the match back to the runs that drew each character.
"""

from typing import List, NamedTuple, Optional, Tuple

from .text_nodes import NodePath, TextNode, iter_runs


class CleanCharIndex(NamedTuple):
    """Parallel tuples, one entry per non-whitespace character in visual order."""
    chars: Tuple[str, ...]
    node_paths: Tuple[NodePath, ...]
    y_positions: Tuple[float, ...]
    heights: Tuple[float, ...]

    def __len__(self) -> int:
        return len(self.chars)

    @property
    def text(self) -> str:
        return ''.join(self.chars)


def build_index(tree: TextNode) -> CleanCharIndex:
    """
    Index every non-whitespace character of the tree, top to bottom and then
    left to right, with the path, absolute y and height of its run.
    """
    runs = sorted(iter_runs(tree), key=lambda item: (item[3], item[2]))

    chars: List[str] = []
    paths: List[NodePath] = []
    tops: List[float] = []
    heights: List[float] = []
    for path, run, _, top in runs:
        for char in run.text:
            if char.isspace():
                continue
            chars.append(char)
            paths.append(path)
            tops.append(top)
            heights.append(run.height)

    return CleanCharIndex(tuple(chars), tuple(paths), tuple(tops), tuple(heights))


def _clean(text: str) -> str:
    return ''.join(char for char in text if not char.isspace())


def find_phrase(index: CleanCharIndex, phrase: str) -> Optional[Tuple[int, int]]:
    """
    Locate the first occurrence of `phrase`, ignoring case and whitespace.

    Returns:
        (start, end) positions in the index, end exclusive, or None
    """
    needle = _clean(phrase).upper()
    if not needle:
        return None

    # upper() can lengthen a character ("ß" -> "SS"), so keep a map from
    # haystack position back to index position
    haystack: List[str] = []
    owners: List[int] = []
    for position, char in enumerate(index.chars):
        upper = char.upper()
        haystack.append(upper)
        owners.extend([position] * len(upper))

    found = ''.join(haystack).find(needle)
    if found == -1:
        return None
    return owners[found], owners[found + len(needle) - 1] + 1
