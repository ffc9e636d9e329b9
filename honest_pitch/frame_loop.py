"""Display-paced frame loop driving a pitch session."""

from __future__ import annotations
import time
from typing import Optional, Callable

from .logger import get_logger
from .note_types import DisplayState
from .session import PitchSession

logger = get_logger(__name__)


class FramePacer:
    """Sleeps just enough to hold a target frame rate."""

    def __init__(
        self,
        fps: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if fps <= 0:
            raise ValueError("fps must be positive")
        self._interval = 1.0 / fps
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None

    def __call__(self) -> None:
        now = self._clock()
        if self._last is not None:
            remaining = self._interval - (now - self._last)
            if remaining > 0:
                self._sleep(remaining)
                now = self._clock()
        self._last = now


class FrameLoop:
    """Runs one session tick per displayed frame until stopped.

    Each iteration:
        1. checks the running flag (the only cancellation point)
        2. lets ``poll`` handle user input; returning False ends the loop
        3. ticks the session if it is listening
        4. hands a DisplayState to ``render``
        5. waits for the next frame via ``pace``
    """

    def __init__(
        self,
        session: PitchSession,
        render: Optional[Callable[[DisplayState], None]] = None,
        poll: Optional[Callable[[], bool]] = None,
        pace: Optional[Callable[[], None]] = None,
        state: Optional[Callable[[], DisplayState]] = None,
    ):
        """Initialize the frame loop.

        Args:
            session: The session to tick
            render: Called with the display state after every tick
            poll: Called before every tick; return False to stop the loop
            pace: Called after every frame to wait for the next one
            state: Builds the display state, defaults to session.display_state
        """
        self._session = session
        self._render = render
        self._poll = poll
        self._pace = pace or FramePacer()
        self._state = state or session.display_state
        self._running = False
        self.frames = 0

    def is_running(self) -> bool:
        return self._running

    def stop(self) -> None:
        """Ask the loop to finish; takes effect at the top of the next frame."""
        if self._running:
            logger.debug("Frame loop stop requested")
        self._running = False

    def run(self, max_frames: Optional[int] = None) -> int:
        """Run until stopped, ``poll`` returns False or ``max_frames`` is reached.

        Returns:
            Number of frames processed
        """
        self._running = True
        self.frames = 0
        logger.info("Frame loop started")

        try:
            while True:
                if not self._running:
                    break
                if max_frames is not None and self.frames >= max_frames:
                    break

                if self._poll is not None and not self._poll():
                    break

                self._session.tick()
                if self._render is not None:
                    self._render(self._state())

                self.frames += 1
                self._pace()
        finally:
            self._running = False
            logger.info(f"Frame loop finished after {self.frames} frames")

        return self.frames
