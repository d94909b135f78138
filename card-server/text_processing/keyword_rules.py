"""
Keyword, protection and highlight tables for card rules text.

The tables are plain data: the default English + Portuguese ruleset is built
once at import and never mutated. A ruleset for another locale or game set
can be loaded from JSON with load_ruleset() without touching the code.
"""

import json
import re
from functools import lru_cache
from typing import Any, Dict, Iterable, List, NamedTuple, Optional, Tuple

from PIL import ImageColor

PROTECT = 'protect'              # claim the match, render it verbatim
BOLD = 'bold'                    # claim the match, render it bold
ITALIC = 'italic'                # wrap the match in italics, content stays claimable
BOLD_GROUP = 'bold_group'        # bold one capture group, the rest stays claimable
UNWRAP_BOLD = 'unwrap_bold'      # drop the delimiters, bold the captured content
UNWRAP_ITALIC = 'unwrap_italic'  # drop the delimiters, italicize the captured content

RULE_MODES = (PROTECT, BOLD, ITALIC, BOLD_GROUP, UNWRAP_BOLD, UNWRAP_ITALIC)

_FLAG_LETTERS = {'i': re.IGNORECASE, 's': re.DOTALL, 'm': re.MULTILINE}


class AnnotationRule(NamedTuple):
    pattern: re.Pattern
    mode: str
    group: Optional[int] = None


class HighlightRule(NamedTuple):
    color: Tuple[int, int, int]
    phrases: Tuple[str, ...]


class Ruleset(NamedTuple):
    """Ordered rule tables, one per annotation pass."""
    numeric_parentheticals: Tuple[AnnotationRule, ...]
    parentheticals: Tuple[AnnotationRule, ...]
    labelled_numbers: Tuple[AnnotationRule, ...]
    either_or: Tuple[AnnotationRule, ...]
    neutral_phrases: Tuple[AnnotationRule, ...]
    manual_overrides: Tuple[AnnotationRule, ...]
    protected_phrases: Tuple[AnnotationRule, ...]
    single_keywords: Tuple[AnnotationRule, ...]
    bold_keywords: Tuple[str, ...]
    highlight_rules: Tuple[HighlightRule, ...]


RULE_TABLES = (
    'numeric_parentheticals', 'parentheticals', 'labelled_numbers', 'either_or',
    'neutral_phrases', 'manual_overrides', 'protected_phrases', 'single_keywords',
)


def rule(pattern: str, mode: str, flags: str = 'i', group: Optional[int] = None) -> AnnotationRule:
    """Compile one annotation rule. Flags are letters: i (ignore case), s (dotall), m (multiline)."""
    if mode not in RULE_MODES:
        raise ValueError(f"Unknown annotation rule mode: {mode!r}")
    if mode in (BOLD_GROUP, UNWRAP_BOLD, UNWRAP_ITALIC) and group is None:
        group = 1

    compiled_flags = 0
    for letter in flags:
        if letter not in _FLAG_LETTERS:
            raise ValueError(f"Unknown regex flag letter: {letter!r}")
        compiled_flags |= _FLAG_LETTERS[letter]
    return AnnotationRule(re.compile(pattern, compiled_flags), mode, group)


def parse_color(value: Any) -> Tuple[int, int, int]:
    """Accept '#rrggbb', CSS color names, 0xrrggbb integers or [r, g, b]."""
    if isinstance(value, bool):
        raise ValueError(f"Invalid highlight color: {value!r}")
    if isinstance(value, int):
        return ((value >> 16) & 0xFF, (value >> 8) & 0xFF, value & 0xFF)
    if isinstance(value, str):
        return ImageColor.getrgb(value)[:3]
    if isinstance(value, (list, tuple)) and len(value) == 3:
        return tuple(int(channel) for channel in value)
    raise ValueError(f"Invalid highlight color: {value!r}")


@lru_cache(maxsize=1024)
def literal_pattern(phrase: str) -> re.Pattern:
    """Case-insensitive literal matcher for a keyword or highlight phrase."""
    return re.compile(re.escape(phrase), re.IGNORECASE)


def keyword_precedence(keywords: Iterable[str]) -> List[str]:
    """
    Order keywords for the generic bold pass.

    List order is kept, except that a keyword contained in another keyword
    (ignoring case) is moved after it, so "Once per turn" claims its span
    before ":" or "Once" can. Case-insensitive duplicates are kept once.
    """
    unique: List[str] = []
    seen = set()
    for keyword in keywords:
        if keyword and keyword.lower() not in seen:
            seen.add(keyword.lower())
            unique.append(keyword)

    ordered: List[str] = []
    visited = set()

    def visit(keyword):
        key = keyword.lower()
        if key in visited:
            return
        visited.add(key)
        for other in unique:
            if other.lower() != key and key in other.lower():
                visit(other)
        ordered.append(keyword)

    for keyword in unique:
        visit(keyword)
    return ordered


# Keywords that are automatically bolded for all card text
AUTO_BOLD_KEYWORDS = (
    "WHEN YOU GAIN THIS: Investigate",
    "AO GANHAR ISSO: Investigue",
    "Ataque Surpresa!",
    "Ataque de Emboscada!",
    "Investigate",
    "Investigue",
    "+Power",
    "Power",
    "+Poder",
    "Poder",
    ":",
    "Defense",
    "Weakness",
    "Atacado",
    "Ataque",
    "Defensa",
    "Fraqueza",
    "Confrontation",
    "Confronto",
    "Speedster",
    "Velocista",
    "Once per turn",
    "Uma vez por turno",
    "Reward",
    "Recompensa",
    "Once during each of your turns",
    "Uma vez durante cada um dos seus turnos",
    "Range",
    "Alcance",
    "Contínuo",
    "Contínuas",
    "Defesa",
    "Surge",
    "Stack Ongoing",
    "Pilha Contínua",
    "Once per Turn",
    "Uma vez por Turno",
    "Block",
    "Bloqueio",
    "Discard 2 different cards",
    "Descarte 2 cartas diferentes",
    "Vulnerability ",
    "Vulnerabilidade ",
    "Discard two cards",
    "Descarte duas cartas",
    "Teamwork",
    "Trabalho em Equipe",
    "Punch",
    "Soco",
    "Ambush",
    "Surpresa",
    "UNAVOIDABLE",
    "INDEFENSÁVEL",
    "Once during your turn",
    "Once this turn",
    "Uma vez neste turno",
    "Uma vez durante o seu turno",
    "Bribe",
    "Suborno",
    "End of Your Turn",
    "Fim do Seu Turno",
    "SYMBIOTE",
    "SIMBIONTE",
    "Discard a Super Power",
    "Descarte um Superpoder",
    "Once per your turns",
    "Time Travel",
    "Eco Temporal",
    "Bombshell",
    "Bombástico",
    "WHEN YOU GAIN THIS: Investigate.",
    "Seal a Location you control",
    "Sele uma Localização que você controla",
    "Once per your turn",
    "Start of your turn",
    "Início do seu turno",
    "Area",
    "em Área",
    "END OF GAME",
    "FIM DE JOGO",
    "Sidekicks",
    "Ajudantes",
    "Seal",
    "Sele",
    "Selar",
)

HIGHLIGHT_RULES = (
    HighlightRule(
        color=(0xE1, 0xB3, 0x27),  # yellow
        phrases=(
            "WHEN YOU GAIN THIS: GAIN A WEAKNESS.",
            "When you buy or gain this card, gain 1 VP.",
            "AO GANHAR ISTO: GANHE UMA FRAQUEZA.",
            "Quando você comprar ou ganhar esta carta, ganhe 1 PV.",
            "WHEN YOU GAIN THIS: Investigate, then shuffle 2 Ambush Attack! cards into the Investigation deck.",
            "AO GANHAR ISSO: Investigue e, em seguida, embaralhe 2 cartas de Ataque Surpresa! no baralho de Investigação.",
        ),
    ),
    HighlightRule(
        color=(0xA1, 0xDF, 0xFF),  # blue
        phrases=(
            "If you destroy or discard this card from your hand, deck, or discard pile, gain it and put it into your hand.",
            "Se você destruir ou descartar esta carta de sua mão, baralho ou pilha de descarte, ganhe-a e coloque-a em sua mão.",
        ),
    ),
)

DEFAULT_RULESET = Ruleset(
    # Cost-in-parens keywords must survive the italic pass
    numeric_parentheticals=(
        rule(r'Meter Burn \((\d+)\)', BOLD),
        rule(r'Queima da barra \((\d+)\)', BOLD),
        rule(r'(Block|Bloqueio)(\s*)\((\d+)\)', BOLD),
    ),
    parentheticals=(
        rule(r'\(([^)]+)\)', ITALIC),
    ),
    labelled_numbers=(
        rule(r'(?:Range|Alcance):\s*(\d+)', BOLD_GROUP),
    ),
    # Longer alternative first so the shared stem is never bolded alone
    either_or=(
        rule(r'Stack Ongoing|Ongoing', BOLD, flags=''),
        rule(r'Pilha Contínua|Contínua(?!s)', BOLD, flags=''),
    ),
    neutral_phrases=(
        rule(r'Super\s*Power(s)?', PROTECT),
        rule(r'Super\s*Poder(es)?', PROTECT),
    ),
    manual_overrides=(
        rule(r'\{([^{}]+)\}', UNWRAP_BOLD),
        rule(r'\[b\]((?:(?!\[/?b\]).)+)\[/b\]', UNWRAP_BOLD, flags='is'),
        rule(r'\[i\]((?:(?!\[/?i\]).)+)\[/i\]', UNWRAP_ITALIC, flags='is'),
    ),
    protected_phrases=(
        rule(r'Galactus Herald:\s*\d+', BOLD),
        rule(r'Arauto de Galactus:\s*\d+', BOLD),
        rule(r'First Appearance\s*[—–-]\s*Attack', BOLD),
        rule(r'Primeira Aparição\s*[—–-]\s*Ataque', BOLD),
        rule(r'\+[\d\sX]*? Power', BOLD),
        rule(r'\+[\d\sX]*? de Poder', BOLD),
        rule(r'\d+\s*\+\s*Power', BOLD),
        rule(r'\d+\s*\+\s*de Poder', BOLD),
        rule(r'\d Power', BOLD),
        rule(r'Pay\s*[1-9]\s*VPs', BOLD),
        rule(r'Pague\s*[1-9]\s*PVs', BOLD),
        rule(r'Discard a non-Weakness card', BOLD),
        rule(r'Descarte uma carta de não-Fraqueza', BOLD),
        rule(r'\bReverter\b', BOLD),
        rule(r'\bRevert\b', BOLD),
        rule(r'\bTransformar\b', BOLD),
        rule(r'\bTransform\b', BOLD),
    ),
    single_keywords=(
        rule(r'\bAttack\b', BOLD),
    ),
    bold_keywords=AUTO_BOLD_KEYWORDS,
    highlight_rules=HIGHLIGHT_RULES,
)


def _rules_from_json(entries: List[Dict[str, Any]], table: str) -> Tuple[AnnotationRule, ...]:
    rules = []
    for entry in entries:
        if isinstance(entry, str):
            entry = {'pattern': entry}
        if 'pattern' not in entry:
            raise ValueError(f"Rule in '{table}' has no pattern: {entry!r}")
        try:
            rules.append(rule(entry['pattern'], entry.get('mode', BOLD),
                              flags=entry.get('flags', 'i'), group=entry.get('group')))
        except re.error as e:
            raise ValueError(f"Invalid pattern in '{table}': {entry['pattern']!r} ({e})") from e
    return tuple(rules)


def ruleset_from_dict(data: Dict[str, Any], base: Ruleset = DEFAULT_RULESET) -> Ruleset:
    """
    Build a ruleset from decoded JSON. Tables missing from `data` are taken
    from `base`, so a locale file can replace only the keyword list.

    Args:
        data: Mapping of table name to entries
        base: Ruleset supplying the tables that are not given

    Returns:
        New immutable Ruleset
    """
    if not isinstance(data, dict):
        raise ValueError("Ruleset JSON must be an object")

    unknown = set(data) - set(Ruleset._fields)
    if unknown:
        raise ValueError(f"Unknown ruleset tables: {sorted(unknown)}")

    overrides: Dict[str, Any] = {}
    for table in RULE_TABLES:
        if table in data:
            overrides[table] = _rules_from_json(data[table], table)

    if 'bold_keywords' in data:
        overrides['bold_keywords'] = tuple(str(k) for k in data['bold_keywords'])

    if 'highlight_rules' in data:
        highlight_rules = []
        for entry in data['highlight_rules']:
            if 'color' not in entry or 'phrases' not in entry:
                raise ValueError(f"Highlight rule needs 'color' and 'phrases': {entry!r}")
            highlight_rules.append(HighlightRule(parse_color(entry['color']), tuple(entry['phrases'])))
        overrides['highlight_rules'] = tuple(highlight_rules)

    return base._replace(**overrides)


def load_ruleset(path: str, base: Ruleset = DEFAULT_RULESET) -> Ruleset:
    """Load a ruleset JSON file. Raises ValueError on malformed content."""
    with open(path, encoding='utf-8') as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Ruleset file {path} is not valid JSON: {e}") from e
    ruleset = ruleset_from_dict(data, base=base)
    print(f"📚 Loaded ruleset from {path}: {len(ruleset.bold_keywords)} keywords, "
          f"{len(ruleset.highlight_rules)} highlight rules")
    return ruleset
