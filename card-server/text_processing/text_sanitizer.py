"""
Text sanitization utilities for card rules text.

Raw text arrives from an editor table or an HTTP payload, so line endings,
tabs and stray edge whitespace vary. Everything downstream expects the
normalized form produced here.
"""

import re

_TRAILING_SPACE_RE = re.compile(r'[ \t]+$', re.MULTILINE)


def normalize_rules_text(text) -> str:
    """
    Normalize line endings and edge whitespace of raw rules text.

    - CRLF and lone CR become LF
    - Tabs become single spaces
    - Trailing spaces on each line are removed
    - Leading and trailing blank lines are removed

    Interior runs of spaces are kept: phrase matching ignores whitespace
    and the layout engine splits on it anyway.
    """
    if not text:
        return ''

    text = str(text).replace('\r\n', '\n').replace('\r', '\n')
    text = text.replace('\t', ' ')
    text = _TRAILING_SPACE_RE.sub('', text)
    return text.strip('\n').lstrip(' ') if text.strip() else ''
