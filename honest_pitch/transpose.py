"""Transposition of frequencies and note names by whole semitones."""

from typing import Tuple, ClassVar

from .logger import get_logger
from .note_utils import NOTE_NAMES, note_index

logger = get_logger(__name__)


def shift_frequency(frequency: float, semitones: int) -> float:
    """Shift a frequency by a signed number of equal-tempered semitones."""
    if semitones == 0:
        return frequency
    return frequency * 2.0 ** (semitones / 12.0)


def shift_note_name(note_name: str, octave: int, semitones: int) -> Tuple[str, int]:
    """Shift a note name and octave by a signed number of semitones.

    Examples:
        >>> shift_note_name('B', 3, 1)
        ('C', 4)
        >>> shift_note_name('C', 4, -1)
        ('B', 3)

    Raises:
        ValueError: If note_name is not a canonical sharp note name
    """
    index = note_index(note_name)
    new_index = (index + semitones) % 12
    octave_shift = (index + semitones) // 12
    return NOTE_NAMES[new_index], octave + octave_shift


class Transposer:
    """Holds the session-wide transpose setting and applies it."""

    MIN_SEMITONES: ClassVar[int] = -12
    MAX_SEMITONES: ClassVar[int] = 12

    def __init__(self, semitones: int = 0) -> None:
        self._semitones = 0
        self.semitones = semitones

    @property
    def semitones(self) -> int:
        """Get the current transpose offset in semitones."""
        return self._semitones

    @semitones.setter
    def semitones(self, value: int) -> None:
        """Set the transpose offset."""
        if isinstance(value, bool) or int(value) != value:
            raise ValueError(f"Transpose must be a whole number of semitones: {value}")
        value = int(value)
        if not self.MIN_SEMITONES <= value <= self.MAX_SEMITONES:
            raise ValueError(
                f"Transpose must be between {self.MIN_SEMITONES} and "
                f"{self.MAX_SEMITONES} semitones"
            )
        if value != self._semitones:
            logger.info(f"Transpose set to {value:+d} semitones")
        self._semitones = value

    def reset(self) -> None:
        """Reset the transpose offset to zero."""
        self.semitones = 0

    def apply(self, frequency: float) -> float:
        """Apply the current offset to a frequency."""
        return shift_frequency(frequency, self._semitones)

    def label(self, note_name: str, octave: int) -> str:
        """Transposed label for a note, e.g. 'A4' -> 'B4' at +2."""
        name, new_octave = shift_note_name(note_name, octave, self._semitones)
        return f"{name}{new_octave}"

    def __str__(self) -> str:
        return f"{self._semitones:+d}" if self._semitones else "0"
