"""
Rules text annotation for custom card rendering.

This module turns raw card rules text into a markup string: keywords and
special phrases are bolded, parenthetical reminder text is italicized, and
phrases that merely contain a keyword are shielded from the keyword pass.
"""

from typing import Iterable, Optional

from config import DEBUG_TEXT_PROCESSING
from text_processing.keyword_rules import (
    BOLD, BOLD_GROUP, DEFAULT_RULESET, ITALIC, PROTECT, UNWRAP_BOLD, UNWRAP_ITALIC,
    AnnotationRule, Ruleset, keyword_precedence, literal_pattern,
)
from text_processing.span_claims import ClaimedText
from text_processing.text_sanitizer import normalize_rules_text


def apply_rule(text: ClaimedText, annotation_rule: AnnotationRule) -> int:
    """Run one rule over the free segments of `text`. Returns the match count."""
    pattern, mode, group = annotation_rule
    if mode == BOLD:
        return text.bold(pattern)
    if mode == PROTECT:
        return text.protect(pattern)
    if mode == ITALIC:
        return text.italicize(pattern)
    if mode == BOLD_GROUP:
        return text.bold_group(pattern, group)
    if mode == UNWRAP_BOLD:
        return text.bold_span(pattern, group)
    if mode == UNWRAP_ITALIC:
        return text.italicize(pattern, group)
    raise ValueError(f"Unknown annotation rule mode: {mode!r}")


def _run_table(text: ClaimedText, table_name: str, rules) -> None:
    for annotation_rule in rules:
        count = apply_rule(text, annotation_rule)
        if DEBUG_TEXT_PROCESSING and count:
            print(f"   [{table_name}] {annotation_rule.pattern.pattern!r}: {count} match(es)")


def annotate_rules_text(raw_text: str, ruleset: Ruleset = DEFAULT_RULESET,
                        bold_phrases: Optional[Iterable[str]] = None) -> str:
    """
    Convert raw rules text into a markup string with bold and italic markers.

    Passes run in a fixed order and each pass only sees text that no earlier
    pass has claimed:

    1. Cost-in-parens keywords ("Block (3)") so the italic pass skips them
    2. Parenthetical reminder text in italics, around any cost already bolded
       inside it (content stays claimable)
    3. The number after labels such as "Range:"
    4. Either/or keywords, longer variant first ("Stack Ongoing" / "Ongoing")
    5. Neutral phrases that contain a keyword but stay plain ("Super Power")
    6. Author overrides: {text}, [b]text[/b] and [i]text[/i], applied around
       anything earlier passes claimed inside them
    7. Highlight phrases, bolded whole
    8. Multi-token phrases ("+2 Power", "Pay 1 VPs"), bolded whole
    9. The single "Attack" keyword
    10. Every auto-bold keyword plus the card's own bold phrases

    Unterminated override delimiters are left as literal text.

    Args:
        raw_text: Rules text as typed by the card author
        ruleset: Rule tables to apply
        bold_phrases: Extra phrases to bold for this card only

    Returns:
        Markup string; markers are balanced and never cross
    """
    text = ClaimedText.from_markup(normalize_rules_text(raw_text))
    if not text.segments:
        return ''

    _run_table(text, 'numeric_parentheticals', ruleset.numeric_parentheticals)
    _run_table(text, 'parentheticals', ruleset.parentheticals)
    _run_table(text, 'labelled_numbers', ruleset.labelled_numbers)
    _run_table(text, 'either_or', ruleset.either_or)
    _run_table(text, 'neutral_phrases', ruleset.neutral_phrases)
    _run_table(text, 'manual_overrides', ruleset.manual_overrides)

    for highlight_rule in ruleset.highlight_rules:
        for phrase in highlight_rule.phrases:
            if phrase:
                text.bold(literal_pattern(phrase))

    _run_table(text, 'protected_phrases', ruleset.protected_phrases)
    _run_table(text, 'single_keywords', ruleset.single_keywords)

    keywords = list(ruleset.bold_keywords) + list(bold_phrases or [])
    for keyword in keyword_precedence(keywords):
        count = text.bold(literal_pattern(keyword))
        if DEBUG_TEXT_PROCESSING and count:
            print(f"   [keyword] {keyword!r}: {count} match(es)")

    markup = text.render()
    if DEBUG_TEXT_PROCESSING:
        print(f"🔤 Annotated rules text: {repr(raw_text[:60])}... -> {len(text.segments)} segments")
    return markup
