"""Utility functions for working with musical notes and frequencies."""

import math
from typing import List, Dict

import numpy as np

from .logger import get_logger
from .note_types import NoteResult, EMPTY_NOTE

# Get logger for this module
logger = get_logger(__name__)

# Standard reference: A4 = 440Hz
A4_FREQUENCY = 440.0
A4_OCTAVE = 4
# C0 sits 4.75 octaves (57 semitones) below A4
C0_FREQUENCY = A4_FREQUENCY * 2.0 ** -4.75

# Anything below this is not a musical frequency
MIN_MUSICAL_FREQUENCY = 20.0

NOTE_NAMES: List[str] = [
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
]

NOTE_INDEX: Dict[str, int] = {name: i for i, name in enumerate(NOTE_NAMES)}

# Cents display thresholds
IN_TUNE_CENTS = 15
SLIGHTLY_OFF_CENTS = 30

CENTS_COLORS = {
    "in_tune": "#22c55e",
    "slightly_off": "#f97316",
    "off": "#ef4444",
}


def _round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding towards +infinity."""
    return int(math.floor(value + 0.5))


def note_index(note_name: str) -> int:
    """Return the 0-11 pitch-class index of a sharp note name (C = 0).

    Raises:
        ValueError: If the name is not one of the twelve canonical names
    """
    try:
        return NOTE_INDEX[note_name]
    except KeyError:
        raise ValueError(f"Unknown note name: {note_name!r}") from None


def note_frequency(note_name: str, octave: int) -> float:
    """Equal-tempered frequency of a note, e.g. ('A', 4) -> 440.0."""
    semitones_from_a4 = (note_index(note_name) - NOTE_INDEX["A"]) + (
        octave - A4_OCTAVE
    ) * 12
    return A4_FREQUENCY * 2.0 ** (semitones_from_a4 / 12.0)


def frequency_to_note(frequency: float) -> NoteResult:
    """Convert a frequency to its nearest note, octave and cents deviation.

    Args:
        frequency: Frequency in Hz

    Returns:
        NoteResult for the nearest equal-tempered note. Frequencies below
        20 Hz (or non-finite values) give an empty note with zero cents.

    Note:
        - A4 is 440 Hz and middle C is C4 (261.63 Hz)
        - Octave numbers change between B and C (e.g., B3 -> C4)
    """
    if not np.isfinite(frequency):
        logger.warning(f"Invalid frequency value: {frequency}")
        return EMPTY_NOTE

    if frequency < MIN_MUSICAL_FREQUENCY:
        return EMPTY_NOTE

    half_steps = 12.0 * float(np.log2(frequency / C0_FREQUENCY))
    octave = math.floor(half_steps / 12.0)
    index = _round_half_up(half_steps % 12.0)

    # Rounding up from the top of B lands on the C of the next octave
    if index == 12:
        index = 0
        octave += 1

    name = NOTE_NAMES[index]
    reference = note_frequency(name, octave)
    cents = _round_half_up(1200.0 * float(np.log2(frequency / reference)))

    return NoteResult(name=name, octave=octave, cents=cents)


def get_note_name(freq: float) -> str:
    """Convert frequency to note name using Scientific Pitch Notation (SPN).

    Returns:
        Note name with octave (e.g., 'A4', 'C#4'), or '---' if not musical
    """
    result = frequency_to_note(freq)
    return result.label or "---"


def format_cents(cents: int) -> str:
    """Format a cents deviation with sign and two digits, e.g. '+05¢'."""
    sign = "+" if cents >= 0 else "-"
    return f"{sign}{abs(cents):02d}¢"


def cents_color(cents: int) -> str:
    """Hex colour for a cents deviation: green in tune, orange close, red off."""
    abs_cents = abs(cents)
    if abs_cents <= IN_TUNE_CENTS:
        return CENTS_COLORS["in_tune"]
    elif abs_cents <= SLIGHTLY_OFF_CENTS:
        return CENTS_COLORS["slightly_off"]
    return CENTS_COLORS["off"]
