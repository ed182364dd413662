"""5-row bitmap font and text rendering.

Glyphs are 4 columns wide (trailing blank column included) and 5 rows tall,
so text sits on rows 1-5 of the 7-row grid.
"""

from app.painter.constants import GRID_COLS, GRID_ROWS, MAX_LEVEL
from app.painter.types import Grid
from app.painter.validators import clamp_level

CHAR_WIDTH = 4
CHAR_SPACING = 1
TEXT_START_ROW = 1

FONT_5X5: dict[str, tuple[str, ...]] = {
    "A": (" 1  ", "1 1 ", "111 ", "1 1 ", "1 1 "),
    "B": ("11  ", "1 1 ", "11  ", "1 1 ", "11  "),
    "C": (" 11 ", "1   ", "1   ", "1   ", " 11 "),
    "D": ("11  ", "1 1 ", "1 1 ", "1 1 ", "11  "),
    "E": ("111 ", "1   ", "11  ", "1   ", "111 "),
    "F": ("111 ", "1   ", "11  ", "1   ", "1   "),
    "G": (" 11 ", "1   ", "1 11", "1  1", " 11 "),
    "H": ("1 1 ", "1 1 ", "111 ", "1 1 ", "1 1 "),
    "I": ("111 ", " 1  ", " 1  ", " 1  ", "111 "),
    "J": (" 111", "   1", "   1", "1  1", " 11 "),
    "K": ("1 1 ", "1 1 ", "11  ", "1 1 ", "1 1 "),
    "L": ("1   ", "1   ", "1   ", "1   ", "111 "),
    "M": ("1 1 ", "111 ", "111 ", "1 1 ", "1 1 "),
    "N": ("1 1 ", "111 ", "111 ", "111 ", "1 1 "),
    "O": (" 1  ", "1 1 ", "1 1 ", "1 1 ", " 1  "),
    "P": ("11  ", "1 1 ", "11  ", "1   ", "1   "),
    "Q": (" 1  ", "1 1 ", "1 1 ", "1 1 ", " 11 "),
    "R": ("11  ", "1 1 ", "11  ", "1 1 ", "1 1 "),
    "S": (" 11 ", "1   ", " 1  ", "  1 ", "11  "),
    "T": ("111 ", " 1  ", " 1  ", " 1  ", " 1  "),
    "U": ("1 1 ", "1 1 ", "1 1 ", "1 1 ", "111 "),
    "V": ("1 1 ", "1 1 ", "1 1 ", "1 1 ", " 1  "),
    "W": ("1 1 ", "1 1 ", "111 ", "111 ", "1 1 "),
    "X": ("1 1 ", "1 1 ", " 1  ", "1 1 ", "1 1 "),
    "Y": ("1 1 ", "1 1 ", " 1  ", " 1  ", " 1  "),
    "Z": ("111 ", "  1 ", " 1  ", "1   ", "111 "),
    "0": ("111 ", "1 1 ", "1 1 ", "1 1 ", "111 "),
    "1": (" 1  ", "11  ", " 1  ", " 1  ", "111 "),
    "2": ("111 ", "  1 ", "111 ", "1   ", "111 "),
    "3": ("111 ", "  1 ", "111 ", "  1 ", "111 "),
    "4": ("1 1 ", "1 1 ", "111 ", "  1 ", "  1 "),
    "5": ("111 ", "1   ", "111 ", "  1 ", "111 "),
    "6": ("111 ", "1   ", "111 ", "1 1 ", "111 "),
    "7": ("111 ", "  1 ", " 1  ", " 1  ", " 1  "),
    "8": ("111 ", "1 1 ", "111 ", "1 1 ", "111 "),
    "9": ("111 ", "1 1 ", "111 ", "  1 ", "111 "),
    " ": ("    ", "    ", "    ", "    ", "    "),
}


def text_width(text: str) -> int:
    """Return the rendered width of `text` in columns."""
    if not text:
        return 0
    return len(text) * CHAR_WIDTH + (len(text) - 1) * CHAR_SPACING


def render_text_to_grid(text: str, level: int = MAX_LEVEL) -> Grid:
    """Render `text` horizontally centered on an empty grid.

    Unknown characters render as a space. Characters that do not fit are
    dropped at the right edge.

    Args:
        text: Text to render (case-insensitive)
        level: Intensity used for lit pixels

    Returns:
        7x53 grid
    """
    level = clamp_level(level)
    grid = [[0] * GRID_COLS for _ in range(GRID_ROWS)]
    if not text:
        return grid

    upper = text.upper()
    col = max(0, (GRID_COLS - text_width(upper)) // 2)

    for ch in upper:
        glyph = FONT_5X5.get(ch, FONT_5X5[" "])
        for pr, line in enumerate(glyph):
            for pc, pixel in enumerate(line):
                c = col + pc
                if pixel == "1" and c < GRID_COLS:
                    grid[TEXT_START_ROW + pr][c] = level
        col += CHAR_WIDTH + CHAR_SPACING
        if col >= GRID_COLS:
            break
    return grid
