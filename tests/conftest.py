"""Shared fixtures for rules text tests."""

import pytest

from text_layout.text_nodes import TextStyle


class FixedWidthMeasurer:
    """Deterministic stand-in for the Pillow backend.

    Every character is half the font size wide (0.6 when bold) and every
    line is 1.2 font sizes tall, so expected layouts can be worked out by hand.
    """

    def __init__(self, plain_factor=0.5, bold_factor=0.6, line_factor=1.2):
        self.plain_factor = plain_factor
        self.bold_factor = bold_factor
        self.line_factor = line_factor

    def measure(self, text, style: TextStyle):
        factor = self.bold_factor if style.bold else self.plain_factor
        return len(text) * style.font_size * factor, self.line_height(style)

    def line_height(self, style: TextStyle):
        return style.font_size * self.line_factor


@pytest.fixture
def measurer():
    return FixedWidthMeasurer()
