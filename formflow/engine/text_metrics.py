"""Approximate text metrics shared by layout and every backend.

Widths use an average character width of half the font size instead of real
glyph metrics. The PDF and HTML backends have no common font metrics source,
and pagination only stays identical if both wrap text into the same lines.
"""

from __future__ import annotations

from typing import List

AVERAGE_CHAR_WIDTH = 0.5


def estimate_text_width(text: str, font_size: float) -> float:
    """Estimated rendered width of ``text`` in points."""
    return len(text) * font_size * AVERAGE_CHAR_WIDTH


def wrap_text(text: str, max_width: float, font_size: float) -> List[str]:
    """Greedy word wrap.

    Words are appended to the current line while its estimated width stays
    within ``max_width``. A word wider than ``max_width`` is kept alone on
    its own line and never split.

    Args:
        text: Text to wrap; runs of whitespace separate words
        max_width: Available width in points
        font_size: Font size in points

    Returns:
        List of lines; empty when ``text`` has no words
    """
    lines: List[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if current and estimate_text_width(candidate, font_size) > max_width:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines


def line_count(text: str, max_width: float, font_size: float) -> int:
    return len(wrap_text(text, max_width, font_size))


# Share of the font size above the baseline; places a text run inside its box.
ASCENT_RATIO = 0.8


def baseline_for_top(top: float, font_size: float) -> float:
    """Baseline of a text run whose box starts at ``top``."""
    return top - font_size * ASCENT_RATIO
