"""Listening session: ties capture, detection, transposition and history together."""

from __future__ import annotations
import time
from typing import Optional, Callable

from .logger import get_logger
from .note_types import DisplayState, PitchPoint, SessionState
from .note_utils import frequency_to_note
from .history import PitchHistory
from .transpose import Transposer
from .core.events import PitchEventType, PitchSessionEvents
from .core.interfaces import IAudioInput, ICaptureSession, IPitchEstimator
from .detection.pitch_estimator import PitchEstimator

logger = get_logger(__name__)


class PitchSession:
    """Runs the pitch pipeline once per tick while listening.

    All state changes (start, stop, clear, transpose) and ticks are expected
    to come from the same thread, one at a time.

    The capture session opened by ``start`` is owned here and released by
    ``stop``, by leaving a ``with`` block, or by ``close``.
    """

    def __init__(
        self,
        audio_input: IAudioInput,
        estimator: Optional[IPitchEstimator] = None,
        history: Optional[PitchHistory] = None,
        transposer: Optional[Transposer] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the pitch session.

        Args:
            audio_input: Source of capture sessions
            estimator: Pitch estimator, or None for the default autocorrelation one
            history: Pitch history, or None for a 15 second window
            transposer: Transpose setting, or None to start at 0
            clock: Monotonic clock in seconds
        """
        self._audio_input = audio_input
        self._estimator = estimator or PitchEstimator()
        self._history = history or PitchHistory()
        self._transposer = transposer or Transposer()
        self._clock = clock
        self.events = PitchSessionEvents()

        self._capture: Optional[ICaptureSession] = None
        self._state: Optional[SessionState] = None

        self._current_note = ""
        self._current_octave = 0
        self._current_frequency = 0.0
        self._current_cents = 0

    # Session lifecycle

    def start(self) -> None:
        """Open the audio capture and start listening.

        Raises:
            AudioCaptureError: If the capture could not be opened; the session
                stays stopped and can be started again later
        """
        if self.is_listening():
            logger.warning("Session already listening")
            return

        capture = self._audio_input.open()

        self._capture = capture
        self._state = SessionState(listening=True, start_time=self._clock())
        logger.info(f"Listening started at {capture.sample_rate} Hz")
        self.events.emit(PitchEventType.SESSION_STARTED)

    def stop(self) -> None:
        """Stop listening, release the capture and reset the display values."""
        if self._capture is None and self._state is None:
            return

        capture, self._capture = self._capture, None
        self._state = None
        try:
            if capture is not None:
                capture.release()
        finally:
            self._reset_current()
            self._history.clear()
            logger.info("Listening stopped")
            self.events.emit(PitchEventType.SESSION_STOPPED)

    def toggle(self) -> None:
        """Start if stopped, stop if listening."""
        if self.is_listening():
            self.stop()
        else:
            self.start()

    def close(self) -> None:
        """Release everything; safe to call more than once."""
        self.stop()
        self.events.clear()

    def __enter__(self) -> "PitchSession":
        return self

    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.stop()

    def is_listening(self) -> bool:
        return self._state is not None and self._state.listening

    def is_exhausted(self) -> bool:
        """True when the open capture has reached the end of its source."""
        return self._capture is not None and self._capture.exhausted

    # Frame processing

    def elapsed(self) -> float:
        """Seconds since the session started, 0 when not listening."""
        if self._state is None:
            return 0.0
        return max(0.0, self._clock() - self._state.start_time)

    def tick(self) -> Optional[PitchPoint]:
        """Process the current audio frame.

        Returns:
            The new PitchPoint, or None when not listening or no pitch was found
        """
        if not self.is_listening():
            return None

        frame = self._capture.read_frame()
        frequency = self._estimator.estimate(frame)
        if frequency is None:
            return None

        transposed = self._transposer.apply(frequency)
        note = frequency_to_note(transposed)

        self._current_note = note.name
        self._current_octave = note.octave
        self._current_frequency = transposed
        self._current_cents = note.cents

        timestamp = self.elapsed()
        point = PitchPoint(
            timestamp=timestamp,
            frequency=transposed,
            note=note.name,
            octave=note.octave,
            cents=note.cents,
        )
        self._history.append(point, current_time=timestamp)

        logger.debug(
            f"[{timestamp:.2f}s] {note.label} ({transposed:.1f}Hz, {note.cents:+d} cents)"
        )
        self.events.emit(PitchEventType.PITCH_DETECTED, point)
        return point

    # User controls

    def clear_history(self) -> None:
        self._history.clear()
        self.events.emit(PitchEventType.HISTORY_CLEARED)

    @property
    def transpose(self) -> int:
        return self._transposer.semitones

    def set_transpose(self, semitones: int) -> None:
        """Set the transpose offset.

        Raises:
            ValueError: If semitones is outside [-12, 12]
        """
        previous = self._transposer.semitones
        self._transposer.semitones = semitones
        if self._transposer.semitones != previous:
            self.events.emit(PitchEventType.TRANSPOSE_CHANGED, self._transposer.semitones)

    def reset_transpose(self) -> None:
        self.set_transpose(0)

    @property
    def transposer(self) -> Transposer:
        return self._transposer

    @property
    def history(self) -> PitchHistory:
        return self._history

    # Display

    def display_state(
        self, show_transpose: bool = False, notice: Optional[str] = None
    ) -> DisplayState:
        """Snapshot of everything a display draws for one frame."""
        return DisplayState(
            listening=self.is_listening(),
            note=self._current_note,
            octave=self._current_octave,
            frequency=self._current_frequency,
            cents=self._current_cents,
            history=self._history.snapshot(),
            transpose=self._transposer.semitones,
            show_transpose=show_transpose,
            notice=notice,
        )

    def _reset_current(self) -> None:
        self._current_note = ""
        self._current_octave = 0
        self._current_frequency = 0.0
        self._current_cents = 0
