"""
Configuration constants for the card text engine.
"""

import os

# ===== FONT FILES =====
# Rules text fonts, one file per style. Each path can be overridden with an
# environment variable; missing files fall back to Pillow's bundled font.
ASSETS_DIR = os.environ.get('CARD_ASSETS_DIR', os.path.join(os.path.dirname(__file__), 'assets'))
FONTS_DIR = os.path.join(ASSETS_DIR, 'fonts')

FONT_PATHS = {
    'regular': os.environ.get('CARD_FONT_REGULAR', os.path.join(FONTS_DIR, 'RulesText-Regular.ttf')),
    'bold': os.environ.get('CARD_FONT_BOLD', os.path.join(FONTS_DIR, 'RulesText-Bold.ttf')),
    'italic': os.environ.get('CARD_FONT_ITALIC', os.path.join(FONTS_DIR, 'RulesText-Italic.ttf')),
    'bold_italic': os.environ.get('CARD_FONT_BOLD_ITALIC', os.path.join(FONTS_DIR, 'RulesText-BoldItalic.ttf')),
}

# ===== FONT SIZING =====
# Starting sizes picked from the raw text length when no preferred size is set
SHORT_TEXT_LENGTH = 35
MEDIUM_TEXT_LENGTH = 60
SHORT_TEXT_FONT_SIZE = 52
MEDIUM_TEXT_FONT_SIZE = 44
LONG_TEXT_FONT_SIZE = 38

# Auto-fit shrinking
DEFAULT_SHRINK_STEP = 1
DEFAULT_MIN_SHRINK_FACTOR = 0.3   # never shrink below 30% of the starting size
MIN_FONT_SIZE = 8                 # absolute floor, whatever the factor says

# Line metrics (multiples of the font size)
LINE_SPACING = 1.15          # line height when the backend has no metrics
PARAGRAPH_SPACING = 0.35     # extra gap between explicit newlines

# ===== TEXT BOX =====
# Rules text box for standard (750x1050) and oversized (900x1200) cards
STANDARD_TEXT_BOX = {'x': 29, 'y': 725, 'width': 692, 'height': 205}
OVERSIZED_TEXT_BOX = {'x': 29, 'y': 974, 'width': 852, 'height': 155}
STANDARD_CARD_WIDTH = 750
OVERSIZED_CARD_WIDTH = 900

# VP badge that rules text must not run into on standard cards,
# in text box coordinates
VP_BADGE_COLLISION = {'shape': 'circle', 'x': 603, 'y': 230, 'radius': 70}

DEFAULT_TEXT_FILL = '#000000'

# ===== HIGHLIGHTS =====
HIGHLIGHT_PADDING_TOP = 10
HIGHLIGHT_PADDING_BOTTOM = 3
HIGHLIGHT_TEXT_FILL = '#000000'  # highlighted runs are always drawn dark

# ===== RULESET =====
# Optional JSON file replacing the built-in keyword and highlight tables
RULESET_PATH = os.environ.get('CARD_RULESET_PATH', '')

# ===== SERVER =====
SERVER_HOST = os.environ.get('CARD_SERVER_HOST', '0.0.0.0')
SERVER_PORT = int(os.environ.get('CARD_SERVER_PORT', '5000'))
MAX_TEXT_LENGTH = 5000  # reject absurd payloads before annotating

# ===== DEBUGGING FLAGS =====
# Control debug output verbosity
DEBUG_TEXT_PROCESSING = False
DEBUG_TEXT_LAYOUT = False
