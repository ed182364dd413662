"""Grid constants - single source of truth.

The contribution graph is rendered as 53 week columns of 7 day rows.
All grid-shape and intensity logic must import from here.
"""

from typing import Literal

GRID_ROWS = 7
GRID_COLS = 53

MIN_LEVEL = 0
MAX_LEVEL = 4

# Each intensity level is worth a fixed number of commits on its day
COMMITS_PER_LEVEL = 2

GRID_DOCUMENT_VERSION = 1

# Target years: commit epochs stay positive and week 52 of the last year stays inside date.max
MIN_YEAR = 1971
MAX_YEAR = 9998

CONTRIBUTION_LEVELS = [
    "#161b22",  # Level 0 (empty)
    "#0e4429",  # Level 1
    "#006d32",  # Level 2
    "#26a641",  # Level 3
    "#39d353",  # Level 4
]

DAYS = ["Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat"]

PresetName = Literal[
    "HEART",
    "SMILEY",
    "SPACE_INVADER",
    "HI",
    "RIP",
    "RANDOM_SCATTER",
    "CHAOS_WAVE",
    "CHECKERBOARD",
    "LINE_GRAPH",
]

GradientDirection = Literal["LEFT_TO_RIGHT", "RIGHT_TO_LEFT", "TOP_TO_BOTTOM", "BOTTOM_TO_TOP"]

PRESETS: dict[str, dict[str, str]] = {
    "HEART": {"name": "Heart", "description": "A pixel-art heart in the middle of the year"},
    "SMILEY": {"name": "Smiley", "description": "A smiling face"},
    "SPACE_INVADER": {"name": "Space Invader", "description": "Retro alien"},
    "HI": {"name": "Say Hi", "description": 'Writes "HI" on the grid'},
    "RIP": {"name": "RIP", "description": "For dead projects"},
    "RANDOM_SCATTER": {"name": "Classic Chaos", "description": "Small spikes everywhere"},
    "CHAOS_WAVE": {"name": "Chaos Wave", "description": "Irregular continuous band"},
    "CHECKERBOARD": {"name": "Checkerboard", "description": "Alternating pattern"},
    "LINE_GRAPH": {"name": "Line Graph", "description": "Customizable curve across 53 columns"},
}
