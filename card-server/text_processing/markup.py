"""
Markup primitives for styled rules text.

A markup string is plain text with four private-use marker characters that
open and close bold and italic runs. Markers may nest but never cross.
For display and JSON the markers are rendered as [b] [/b] [i] [/i] tags.
"""

from typing import List, NamedTuple

BOLD_START = '\ue000'
BOLD_END = '\ue001'
ITALIC_START = '\ue002'
ITALIC_END = '\ue003'

MARKERS = (BOLD_START, BOLD_END, ITALIC_START, ITALIC_END)

_TAGS = {
    BOLD_START: '[b]',
    BOLD_END: '[/b]',
    ITALIC_START: '[i]',
    ITALIC_END: '[/i]',
}

_OPENERS = {BOLD_START: 'bold', ITALIC_START: 'italic'}
_CLOSERS = {BOLD_END: 'bold', ITALIC_END: 'italic'}


class MarkupError(ValueError):
    """Raised when strict parsing meets unbalanced or crossing markers."""


class StyledRun(NamedTuple):
    text: str
    bold: bool
    italic: bool


def bold(text: str) -> str:
    return BOLD_START + text + BOLD_END


def italic(text: str) -> str:
    return ITALIC_START + text + ITALIC_END


def parse_markup(markup: str, strict: bool = False) -> List[StyledRun]:
    """
    Split a markup string into runs of uniformly styled text.

    Markers are zero-width: they only toggle the style of the text that
    follows. In lenient mode an end marker with no matching opener is
    dropped, a closer that would cross another run closes the inner run
    first, and runs still open at the end are closed there.

    Args:
        markup: Text carrying marker characters
        strict: Raise MarkupError instead of repairing

    Returns:
        List of StyledRun, adjacent runs always differ in style
    """
    runs: List[StyledRun] = []
    stack: List[str] = []
    buffer: List[str] = []

    def flush():
        if buffer:
            text = ''.join(buffer)
            is_bold = 'bold' in stack
            is_italic = 'italic' in stack
            if runs and runs[-1].bold == is_bold and runs[-1].italic == is_italic:
                runs[-1] = StyledRun(runs[-1].text + text, is_bold, is_italic)
            else:
                runs.append(StyledRun(text, is_bold, is_italic))
            buffer.clear()

    for position, char in enumerate(markup):
        if char in _OPENERS:
            flush()
            stack.append(_OPENERS[char])
        elif char in _CLOSERS:
            flush()
            kind = _CLOSERS[char]
            if stack and stack[-1] == kind:
                stack.pop()
            elif strict:
                raise MarkupError(f"Unexpected {_TAGS[char]} at position {position}")
            elif kind in stack:
                # crossing close: unwind down to the matching opener
                while stack and stack[-1] != kind:
                    stack.pop()
                stack.pop()
        else:
            buffer.append(char)

    if stack and strict:
        raise MarkupError(f"Unclosed markers at end of text: {stack}")
    flush()
    return runs


def is_well_formed(markup: str) -> bool:
    """True when every marker is balanced and no two runs cross."""
    try:
        parse_markup(markup, strict=True)
    except MarkupError:
        return False
    return True


def strip_markup(markup: str) -> str:
    """Remove every marker, leaving the plain text."""
    for marker in MARKERS:
        markup = markup.replace(marker, '')
    return markup


def to_tagged(markup: str) -> str:
    """Render markers as [b] [/b] [i] [/i] tags."""
    for marker, tag in _TAGS.items():
        markup = markup.replace(marker, tag)
    return markup


def from_tagged(tagged: str) -> str:
    """Turn [b] [/b] [i] [/i] tags back into markers."""
    for marker, tag in _TAGS.items():
        tagged = tagged.replace(tag, marker)
    return tagged
