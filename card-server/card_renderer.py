from PIL import Image, ImageDraw, ImageFont
from typing import Dict, Optional, Tuple

from config import FONT_PATHS, LINE_SPACING
from text_layout.highlight_renderer import HighlightSpan
from text_layout.text_nodes import TextStyle, iter_runs


class CardTextRenderer:
    """
    Pillow backend for the rules text engine:
    - Loads regular/bold/italic/bold-italic fonts, cached per size
    - Measures styled glyph runs for the layout engine
    - Paints a laid-out block and its highlight bands onto a card image
    """

    def __init__(self, font_paths: Optional[Dict[str, str]] = None):
        self.font_paths = dict(FONT_PATHS)
        if font_paths:
            self.font_paths.update(font_paths)

        # Font cache to avoid loading font files repeatedly
        self._font_cache: Dict[Tuple[int, bool, bool], ImageFont.ImageFont] = {}

        self.load_fonts()

    def load_fonts(self):
        """Check which rules text font files are present"""
        self.available_styles = {}
        for style_name, path in self.font_paths.items():
            try:
                # Test load to see if the font file is usable
                ImageFont.truetype(path, 12)
                self.available_styles[style_name] = path
            except Exception as font_e:
                print(f"Could not load {style_name} rules font {path}: {font_e}")

        if self.available_styles:
            print(f"Rules text fonts loaded: {', '.join(sorted(self.available_styles))}")
        else:
            print("No rules text fonts found, using Pillow's default font for every style")

    def _style_key(self, bold: bool, italic: bool) -> str:
        if bold and italic:
            return 'bold_italic'
        if bold:
            return 'bold'
        if italic:
            return 'italic'
        return 'regular'

    def get_text_font(self, size: int, bold: bool = False, italic: bool = False):
        """Get the rules text font for a size and style, falling back to closer styles"""
        key = (int(size), bool(bold), bool(italic))
        if key in self._font_cache:
            return self._font_cache[key]

        style_name = self._style_key(bold, italic)
        candidates = [style_name, 'bold' if bold else 'italic' if italic else None, 'regular']
        font = None
        for candidate in candidates:
            path = self.available_styles.get(candidate) if candidate else None
            if path:
                font = ImageFont.truetype(path, int(size))
                break
        if font is None:
            font = ImageFont.load_default(size=int(size))

        self._font_cache[key] = font
        return font

    def clear_font_cache(self):
        """Clear the font cache to free up memory if needed."""
        self._font_cache.clear()
        print("Font cache cleared")

    def get_cache_stats(self) -> dict:
        """Get statistics about the current cache state."""
        return {
            'cached_fonts': len(self._font_cache),
            'available_styles': sorted(self.available_styles),
        }

    def measure(self, text: str, style: TextStyle) -> Tuple[float, float]:
        """Width and height of a glyph run drawn in the given style"""
        font = self.get_text_font(style.font_size, style.bold, style.italic)
        try:
            width = float(font.getlength(text))
        except AttributeError:
            left, _, right, _ = font.getbbox(text)
            width = float(right - left)
        return width, self.line_height(style)

    def line_height(self, style: TextStyle) -> float:
        """Height of one line of text in the given style"""
        font = self.get_text_font(style.font_size, style.bold, style.italic)
        try:
            ascent, descent = font.getmetrics()
            return float(max(ascent + descent, style.font_size * LINE_SPACING))
        except AttributeError:
            return float(style.font_size * LINE_SPACING)

    def draw_text_block(self, card_image: Image.Image, block, origin: Tuple[int, int]) -> Image.Image:
        """
        Draw a rendered text block onto a card image.

        Highlight bands go down first so the recolored runs sit on top of them.

        Args:
            card_image: Image to draw on (modified in place)
            block: RenderedTextBlock from annotate_and_layout
            origin: Top-left of the rules text box on the card

        Returns:
            The same image, for chaining
        """
        draw = ImageDraw.Draw(card_image)
        ox, oy = origin

        for span in block.highlights:
            self.draw_highlight(draw, span, origin)

        for _, run, x, y in iter_runs(block.tree):
            if not run.text.strip():
                continue
            font = self.get_text_font(run.style.font_size, run.style.bold, run.style.italic)
            draw.text((ox + x, oy + y), run.text, fill=run.style.fill, font=font)

        return card_image

    def draw_highlight(self, draw: ImageDraw.ImageDraw, span: HighlightSpan, origin: Tuple[int, int]):
        """Draw one highlight band"""
        ox, oy = origin
        left = ox + span.x
        top = oy + span.top
        draw.rectangle(
            [(left, top), (left + span.width, top + span.height)],
            fill=tuple(span.color),
        )


# Global renderer instance
card_renderer = CardTextRenderer()
