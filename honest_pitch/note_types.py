"""Type definitions for the Honest Pitch project."""

from typing import Optional, Tuple
from dataclasses import dataclass, field

import numpy as np

# A frequency in Hz, or None when no pitch was determined for the frame
PitchEstimate = Optional[float]


@dataclass(frozen=True)
class AudioFrame:
    """One block of mono time-domain samples from the capture session."""

    samples: np.ndarray  # 1-D float32 samples in [-1, 1]
    sample_rate: int  # Hz, fixed for the capture session

    def __len__(self) -> int:
        return len(self.samples)


@dataclass(frozen=True)
class NoteResult:
    """A frequency expressed as a pitch class, octave and deviation."""

    name: str  # Pitch class (e.g., 'C#'), empty for non-musical input
    octave: int  # Scientific pitch notation octave (A4 = 440 Hz)
    cents: int  # Deviation from the equal-tempered note, roughly +/-50

    @property
    def label(self) -> str:
        return f"{self.name}{self.octave}" if self.name else ""


EMPTY_NOTE = NoteResult(name="", octave=0, cents=0)


@dataclass(frozen=True)
class PitchPoint:
    """A detected pitch at a moment of the listening session."""

    timestamp: float  # Seconds since the session started
    frequency: float  # Frequency in Hz (after transposition)
    note: str
    octave: int
    cents: int


@dataclass
class SessionState:
    """Exists only while a listening session is active."""

    listening: bool
    start_time: float  # Monotonic clock reading when the session started


@dataclass(frozen=True)
class DisplayState:
    """Everything a display needs to draw one frame."""

    listening: bool = False
    note: str = ""
    octave: int = 0
    frequency: float = 0.0
    cents: int = 0
    history: Tuple[PitchPoint, ...] = field(default_factory=tuple)
    transpose: int = 0
    show_transpose: bool = False
    notice: Optional[str] = None
