"""
Text processing modules for card rules text.

This package contains the markup primitives, the claimed-span structure used
while annotating, the keyword and highlight tables, and input sanitizing.
"""

# Import main functions for easy access
from .markup import (
    BOLD_END,
    BOLD_START,
    ITALIC_END,
    ITALIC_START,
    MarkupError,
    from_tagged,
    is_well_formed,
    parse_markup,
    strip_markup,
    to_tagged,
)

from .keyword_rules import (
    DEFAULT_RULESET,
    AnnotationRule,
    HighlightRule,
    Ruleset,
    keyword_precedence,
    load_ruleset,
    ruleset_from_dict,
)

from .span_claims import ClaimedText

from .text_sanitizer import normalize_rules_text

__all__ = [
    # Markup
    'BOLD_START',
    'BOLD_END',
    'ITALIC_START',
    'ITALIC_END',
    'MarkupError',
    'parse_markup',
    'is_well_formed',
    'strip_markup',
    'to_tagged',
    'from_tagged',

    # Rule tables
    'DEFAULT_RULESET',
    'AnnotationRule',
    'HighlightRule',
    'Ruleset',
    'keyword_precedence',
    'load_ruleset',
    'ruleset_from_dict',

    # Annotation bookkeeping
    'ClaimedText',

    # Sanitizing
    'normalize_rules_text',
]
