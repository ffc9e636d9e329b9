"""Mapping of pitches to pitch-graph coordinates and colours.

The graph wraps every octave onto the same vertical span, so a sung note
lands at the same height whichever octave it is in. A sits at the bottom.
"""

import colorsys
from typing import List, Tuple

import numpy as np

from .note_utils import A4_FREQUENCY, MIN_MUSICAL_FREQUENCY, NOTE_NAMES, NOTE_INDEX
from .transpose import shift_note_name

GRAPH_HEIGHT = 400.0
GRAPH_WINDOW_SECONDS = 15.0

# Fixed saturation and lightness for the rainbow
RAINBOW_SATURATION = 0.70
RAINBOW_LIGHTNESS = 0.60


def graph_y(frequency: float, height: float = GRAPH_HEIGHT) -> float:
    """Octave-wrapped vertical position of a frequency, in [0, height)."""
    if frequency < MIN_MUSICAL_FREQUENCY:
        return 0.0
    octave = float(np.log2(frequency / A4_FREQUENCY)) + 4.0
    return (octave % 1.0) * height


def graph_x(
    timestamp: float, width: float, window_seconds: float = GRAPH_WINDOW_SECONDS
) -> float:
    """Horizontal position of a point; the time axis wraps every window."""
    return ((timestamp % window_seconds) / window_seconds) * width


def rainbow_hue(y: float, height: float = GRAPH_HEIGHT) -> float:
    """Hue in degrees (0-360) for a graph position."""
    return (y / height) * 360.0


def rainbow_color(y: float, height: float = GRAPH_HEIGHT) -> str:
    """CSS hsl() colour for a graph position."""
    hue = rainbow_hue(y, height)
    return (
        f"hsl({hue:g}, {RAINBOW_SATURATION * 100:g}%, "
        f"{RAINBOW_LIGHTNESS * 100:g}%)"
    )


def rainbow_rgb(y: float, height: float = GRAPH_HEIGHT) -> Tuple[int, int, int]:
    """The rainbow colour as 0-255 RGB, for pixel renderers."""
    hue = (rainbow_hue(y, height) % 360.0) / 360.0
    r, g, b = colorsys.hls_to_rgb(hue, RAINBOW_LIGHTNESS, RAINBOW_SATURATION)
    return int(round(r * 255)), int(round(g * 255)), int(round(b * 255))


def note_grid(
    transpose: int = 0, height: float = GRAPH_HEIGHT, octave: int = 4
) -> List[Tuple[float, str]]:
    """Semitone grid lines for the graph as (y, label) pairs.

    One line per pitch class, starting with A at y=0 and rising a semitone
    per line, labelled with the transposed note name.
    """
    spacing = height / 12.0
    grid = []
    for i in range(12):
        index = (NOTE_INDEX["A"] + i) % 12
        # Pitch classes above A belong to the next octave up
        line_octave = octave + (1 if index < NOTE_INDEX["A"] else 0)
        name, label_octave = shift_note_name(NOTE_NAMES[index], line_octave, transpose)
        grid.append((i * spacing, f"{name}{label_octave}"))
    return grid
